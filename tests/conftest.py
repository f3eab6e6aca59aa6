import pytest
import requests
from selenium.common.exceptions import TimeoutException

from rental_scraper.agents import ExtractionOrchestrator
from helpers import FakeDriver, FakeRenderer, make_fetcher


@pytest.fixture
def timeout_driver():
    return FakeDriver(
        html="<html><body><h1>Apartamento 2 quartos no Batel</h1></body></html>",
        navigation_error=TimeoutException("timeout"),
    )


@pytest.fixture
def orchestrator_factory():
    def build(fetcher=None, renderer=None):
        if fetcher is None:
            fetcher, _ = make_fetcher(error=requests.exceptions.ConnectionError("offline"))
        return ExtractionOrchestrator(
            fetcher=fetcher, renderer=renderer or FakeRenderer(FakeDriver())
        )

    return build
