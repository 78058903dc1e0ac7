"""
Test configuration and fixtures for the SEO Meta Analyzer API.

The network is never touched: page fetches go through an httpx
MockTransport backed by a small in-memory "site".
"""

from typing import Dict, Generator, Tuple

import httpx
import pytest
from fastapi.testclient import TestClient

from app.features.seo.dependencies.analyzer import get_analyzer_service
from app.features.seo.services.analyzer import SeoAnalyzerService
from app.features.seo.services.fetcher import PageFetcher


class FakeSite:
    """URL -> (status, headers, body) map served through httpx.MockTransport."""

    def __init__(self):
        self.pages: Dict[str, Tuple[int, Dict[str, str], bytes]] = {}
        self.requests = []

    def add_html(self, url: str, html: str, status_code: int = 200, headers=None):
        merged = {"Content-Type": "text/html; charset=utf-8"}
        merged.update(headers or {})
        self.pages[url] = (status_code, merged, html.encode("utf-8"))

    def add_redirect(self, url: str, location: str, status_code: int = 301):
        self.pages[url] = (status_code, {"Location": location}, b"")

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        status_code, headers, body = self.pages.get(
            str(request.url), (404, {"Content-Type": "text/html"}, b"not found")
        )
        return httpx.Response(status_code, headers=headers, content=body)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)

    def fetcher(self, **kwargs) -> PageFetcher:
        return PageFetcher(transport=self.transport, **kwargs)


@pytest.fixture(scope="session")
def test_app():
    """Create FastAPI test application."""
    from app.main import app

    return app


@pytest.fixture(scope="function")
def client(test_app) -> Generator[TestClient, None, None]:
    """
    Create a test client for making HTTP requests.
    This fixture provides a clean TestClient instance for each test function,
    ensuring proper isolation between tests.
    """
    with TestClient(test_app) as test_client:
        yield test_client


@pytest.fixture
def site() -> FakeSite:
    return FakeSite()


@pytest.fixture
def analyze_client(client, test_app, site):
    """Client whose analyzer fetches from the fake site instead of the network."""
    test_app.dependency_overrides[get_analyzer_service] = lambda: SeoAnalyzerService(site.fetcher())

    yield client

    test_app.dependency_overrides.pop(get_analyzer_service, None)
