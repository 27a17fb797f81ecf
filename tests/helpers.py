"""HTML and HTTP fakes for list.am tests."""

import httpx

RATES_PAYLOAD = {"date": "2024-01-01", "usd": {"amd": 400.0, "rub": 90.0, "eur": 0.9, "gbp": 0.8}}


def listing_html(listing_id: int, price: str | None, info: str | None = "Кентрон, 3 комн., 75 кв.м., 5/9 этаж") -> str:
    """Markup of one listing card as list.am renders it."""
    parts = [f'<a href="/ru/item/{listing_id}">']
    if price is not None:
        parts.append(f'<span class="p">{price}</span>')
    if info is not None:
        parts.append(f'<span class="at">{info}</span>')
    parts.append("</a>")
    return "".join(parts)


def page_html(page: int | None, gl: list[str] = (), dl: list[str] = ()) -> str:
    """A listing page with the pager showing `page` and two listing sections."""
    pager = f'<div class="dlf"><span class="pp"><span class="c">{page}</span></span></div>' if page else ""
    return (
        "<html><body>"
        f'<div class="gl">{"".join(gl)}</div>'
        f'<div class="dl">{"".join(dl)}</div>'
        f"{pager}"
        "</body></html>"
    )


class FakeListAm:
    """Routes requests to canned rate and listing responses and records them."""

    def __init__(self, pages: dict[tuple[int, int], list[httpx.Response]] | None = None) -> None:
        self.pages = pages or {}
        self.rates_response = httpx.Response(200, json=RATES_PAYLOAD)
        self.requested: list[tuple[int, int]] = []
        self.rate_requests = 0

    def __call__(self, request: httpx.Request) -> httpx.Response:
        if request.url.host == "cdn.jsdelivr.net":
            self.rate_requests += 1
            return self.rates_response

        page = int(request.url.path.rstrip("/").split("/")[-1])
        district = int(request.url.params["n"])
        self.requested.append((district, page))

        responses = self.pages.get((district, page))
        if not responses:
            # Past the last page list.am keeps showing page 1
            return httpx.Response(200, text=page_html(1))
        if len(responses) > 1:
            return responses.pop(0)
        return responses[0]


