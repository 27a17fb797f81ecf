"""Shared test fixtures for the price index."""

import json
from typing import Callable

import httpx
import pytest

from listam_index.models import CurrencyRateSet, District

from .helpers import FakeListAm


@pytest.fixture
def rates() -> CurrencyRateSet:
    return CurrencyRateSet(rates={"amd": 400.0, "rub": 90.0, "eur": 0.9})


@pytest.fixture
def kentron() -> District:
    return District(code=8, name="Kentron")


@pytest.fixture
def arabkir() -> District:
    return District(code=3, name="Arabkir")


@pytest.fixture
def client_factory() -> Callable[[FakeListAm], httpx.AsyncClient]:
    def make(fake: FakeListAm) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(fake))

    return make


@pytest.fixture
def write_json():
    def write(path, payload) -> None:
        path.write_text(json.dumps(payload), encoding="utf-8")

    return write
