# Test configuration
import os
import sys
from pathlib import Path

import httpx
import pytest

REPO_ROOT = Path(__file__).parent.parent

# Add repo root to path so tests can import modules
sys.path.insert(0, str(REPO_ROOT))

# Settings are cached on first use, so pin them before any test imports the app
os.environ.setdefault("MAJOR_API_BASE_URL", "https://api.example.com")
os.environ.setdefault("MAJOR_JWT_TOKEN", "service-token")

from resource_client.invoke.client import ResourceClient  # noqa: E402


BASE_URL = "https://api.example.com"
SERVICE_TOKEN = "service-token"


@pytest.fixture
def captured_requests() -> list[httpx.Request]:
    """Requests seen by the mock transport, in order."""
    return []


@pytest.fixture
def make_client(captured_requests):
    """Factory for a ResourceClient wired to an httpx.MockTransport.
    
    The default handler records each request and answers with ``body`` as
    JSON; pass ``handler`` to take full control of the response.
    """
    def factory(body=None, status_code=200, handler=None, base_url=BASE_URL):
        def default_handler(request: httpx.Request) -> httpx.Response:
            captured_requests.append(request)
            return httpx.Response(status_code, json=body)
        
        transport = httpx.MockTransport(handler or default_handler)
        return ResourceClient(
            base_url=base_url,
            major_jwt_token=SERVICE_TOKEN,
            http_client=httpx.AsyncClient(transport=transport),
        )
    
    return factory
