"""Chart generation using Plotly."""

import logging
from datetime import date, timedelta
from pathlib import Path

import pandas as pd
import plotly.graph_objects as go
from plotly.subplots import make_subplots

from .models import District, PersistedSeries, SeriesPoint

logger = logging.getLogger(__name__)

# Color scheme
COLORS = {
    "median": "#1a73e8",  # Google blue
    "average": "#ea4335",  # Google red
    "grid": "#e0e0e0",
    "bg": "#ffffff",
}

UNIT = "USD/m²"


def series_to_frame(points: list[SeriesPoint]) -> pd.DataFrame:
    """Build a date-sorted frame from series points, skipping empty days."""
    rows = [p.to_row() for p in points if p.average or p.median]
    if not rows:
        return pd.DataFrame(columns=["date", "average", "median"])

    df = pd.DataFrame(rows, columns=["date", "average", "median"])
    df["date"] = pd.to_datetime(df["date"])
    df = df.sort_values("date").reset_index(drop=True)
    return df


def create_dashboard(district: District, points: list[SeriesPoint], output_path: Path) -> bool:
    """Create a dashboard PNG with multiple timeframes for one district."""
    df = series_to_frame(points)

    if df.empty:
        logger.warning(f"No data for {district.name}, skipping chart")
        return False

    today = date.today()

    df_week = df[df["date"] >= pd.Timestamp(today - timedelta(days=7))]
    df_month = df[df["date"] >= pd.Timestamp(today - timedelta(days=30))]

    fig = make_subplots(
        rows=3,
        cols=1,
        subplot_titles=("Last 7 Days", "Last 30 Days", "All Time"),
        vertical_spacing=0.08,
        row_heights=[0.33, 0.33, 0.34],
    )

    _add_price_traces(fig, df_week, row=1)
    _add_price_traces(fig, df_month, row=2)
    _add_price_traces(fig, df, row=3)

    latest = df.iloc[-1]
    fig.update_layout(
        title=dict(
            text=f"{district.name} - Price per m² Dashboard",
            font=dict(size=20, color="#333"),
            x=0.5,
        ),
        showlegend=True,
        legend=dict(orientation="h", yanchor="bottom", y=1.02, xanchor="center", x=0.5),
        height=900,
        width=1200,
        plot_bgcolor=COLORS["bg"],
        paper_bgcolor=COLORS["bg"],
        font=dict(family="Arial, sans-serif", size=12, color="#333"),
        annotations=[
            dict(
                text=(
                    f"Latest: {latest['date'].strftime('%Y-%m-%d')} | "
                    f"Median: {latest['median']:,.2f} {UNIT} | "
                    f"Average: {latest['average']:,.2f} {UNIT}"
                ),
                xref="paper",
                yref="paper",
                x=0.5,
                y=-0.02,
                showarrow=False,
                font=dict(size=11, color="#666"),
            )
        ],
    )

    for i in range(1, 4):
        fig.update_xaxes(
            showgrid=True,
            gridcolor=COLORS["grid"],
            tickformat="%d %b %Y" if i == 3 else "%d %b",
            row=i,
            col=1,
        )
        fig.update_yaxes(
            showgrid=True,
            gridcolor=COLORS["grid"],
            title_text=UNIT,
            tickformat=",",
            row=i,
            col=1,
        )

    output_path.parent.mkdir(parents=True, exist_ok=True)
    fig.write_image(str(output_path), scale=2)

    logger.info(f"Dashboard saved to {output_path}")
    return True


def _add_price_traces(fig: go.Figure, df: pd.DataFrame, row: int) -> None:
    """Add median and average lines to a subplot."""
    if df.empty:
        return

    show_legend = row == 1

    fig.add_trace(
        go.Scatter(
            x=df["date"],
            y=df["median"],
            mode="lines+markers",
            name="Median",
            line=dict(color=COLORS["median"], width=3),
            marker=dict(size=8, symbol="circle"),
            showlegend=show_legend,
            hovertemplate=f"Median: %{{y:,.2f}} {UNIT}<extra></extra>",
        ),
        row=row,
        col=1,
    )

    fig.add_trace(
        go.Scatter(
            x=df["date"],
            y=df["average"],
            mode="lines+markers",
            name="Average",
            line=dict(color=COLORS["average"], width=2, dash="dash"),
            marker=dict(size=6, symbol="square"),
            showlegend=show_legend,
            hovertemplate=f"Average: %{{y:,.2f}} {UNIT}<extra></extra>",
        ),
        row=row,
        col=1,
    )


def create_overview(districts: list[District], series: PersistedSeries, output_path: Path) -> bool:
    """Create an overview chart showing the median price per m² for all districts."""
    fig = go.Figure()

    colors = ["#1a73e8", "#ea4335", "#34a853", "#fbbc04", "#9c27b0", "#00bcd4"]
    has_data = False

    for i, district in enumerate(districts):
        df = series_to_frame(series.get(str(district.code), []))

        if df.empty:
            continue

        has_data = True
        fig.add_trace(
            go.Scatter(
                x=df["date"],
                y=df["median"],
                mode="lines+markers",
                name=district.name,
                line=dict(color=colors[i % len(colors)], width=2),
                marker=dict(size=8),
                hovertemplate=f"{district.name}<br>Median: %{{y:,.2f}} {UNIT}<br>%{{x}}<extra></extra>",
            )
        )

    if not has_data:
        fig.add_annotation(
            text="No data yet",
            xref="paper",
            yref="paper",
            x=0.5,
            y=0.5,
            showarrow=False,
            font=dict(size=20, color="#999"),
        )

    fig.update_layout(
        title=dict(
            text="Yerevan Apartment Price Index - Overview",
            font=dict(size=20, color="#333"),
            x=0.5,
        ),
        xaxis=dict(showgrid=True, gridcolor=COLORS["grid"], tickformat="%d %b %Y"),
        yaxis=dict(showgrid=True, gridcolor=COLORS["grid"], title=f"Median ({UNIT})", tickformat=","),
        legend=dict(orientation="h", yanchor="bottom", y=1.02, xanchor="center", x=0.5),
        height=500,
        width=1200,
        plot_bgcolor=COLORS["bg"],
        paper_bgcolor=COLORS["bg"],
        font=dict(family="Arial, sans-serif", size=12, color="#333"),
    )

    output_path.parent.mkdir(parents=True, exist_ok=True)
    fig.write_image(str(output_path), scale=2)

    logger.info(f"Overview saved to {output_path}")
    return True
