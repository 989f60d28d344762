import pytest
import os
import base64
import httpx

# Skip all E2E tests unless explicitly enabled
def pytest_configure(config):
    config.addinivalue_line("markers", "e2e: mark test as end-to-end (requires real services)")

def pytest_collection_modifyitems(config, items):
    if not config.getoption("--run-e2e", default=False):
        skip_e2e = pytest.mark.skip(reason="E2E tests skipped. Use --run-e2e to run.")
        for item in items:
            if "e2e" in item.keywords:
                item.add_marker(skip_e2e)

@pytest.fixture(scope="session")
def api_base_url():
    """Base URL for API - deployed or local"""
    return os.getenv("API_URL", "http://localhost:8000")

@pytest.fixture(scope="session")
def http_client():
    """HTTP client for E2E tests"""
    with httpx.Client(timeout=600.0) as client:
        yield client

@pytest.fixture
def brand_image_base64():
    """Brand image from BRAND_IMAGE_PATH, or a 1x1 red PNG"""
    path = os.getenv("BRAND_IMAGE_PATH")
    if path:
        with open(path, "rb") as f:
            return base64.b64encode(f.read()).decode()
    return "iVBORw0KGgoAAAANSUhEUgAAAAEAAAABCAYAAAAfFcSJAAAADUlEQVR42mP8z8DwHwAFBQIAX8jx0gAAAABJRU5ErkJggg=="

@pytest.fixture
def session_id(api_base_url, http_client):
    """Create a session and delete it afterwards"""
    response = http_client.post(f"{api_base_url}/sessions")
    assert response.status_code == 201
    session_id = response.json()["id"]

    yield session_id

    try:
        http_client.delete(f"{api_base_url}/sessions/{session_id}")
    except httpx.HTTPError:
        pass  # Best effort cleanup
