from __future__ import annotations

from typing import Any, Callable

import httpx
import pytest

from uptimeboard.services.store_client import StoreClient


@pytest.fixture
def http_fields() -> dict[str, Any]:
    return {
        "url": "https://status.example.com/health",
        "method": "GET",
        "expectedStatusCode": "200",
        "verifySSL": "true",
        "followRedirects": "true",
        "maxRedirects": "5",
        "contentMatch": "",
        "contentMatchMode": "contains",
        "basicAuthUser": "",
        "basicAuthPassword": "",
        "body": "",
        "headers": "",
    }


@pytest.fixture
def make_store() -> Callable[..., StoreClient]:
    """Build a StoreClient whose requests go to ``handler`` instead of the network."""

    def _make(handler: Callable[[httpx.Request], Any]) -> StoreClient:
        return StoreClient(
            base_url="http://store.test",
            timeout=5,
            transport=httpx.MockTransport(handler),
        )

    return _make
