import pytest
from unittest.mock import MagicMock, AsyncMock
from fastapi.testclient import TestClient
from adsgen.main import app
from adsgen.routers.generation import get_brand_service, get_generation_service
from adsgen.routers.sessions import get_campaign_service
from adsgen.schemas import AdCopy, AssetSpecs, BrandAnalysis
from adsgen.services.campaign import CampaignService

PNG_BASE64 = "iVBORw0KGgoAAAANSUhEUgAAAAEAAAABCAYAAAAfFcSJAAAADUlEQVR42mP8z8DwHwAFBQIAX8jx0gAAAABJRU5ErkJggg=="

@pytest.fixture
def client():
    """Test client for the app"""
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()

@pytest.fixture
def png_base64():
    return PNG_BASE64

@pytest.fixture
def mock_composio_response():
    """Build an httpx response mock for a Composio tool call"""
    def _build(data=None, successful=True, error=None, status_code=200):
        response = MagicMock()
        response.status_code = status_code
        response.json.return_value = {"data": data, "successful": successful, "error": error}
        response.text = str(data)
        return response
    return _build

@pytest.fixture
def mock_generation_service():
    service = MagicMock()
    service.generate_text = AsyncMock(return_value="text")
    service.generate_image = AsyncMock(return_value="https://cdn.example.com/image.png")
    service.generate_video = AsyncMock(return_value="operations/video-op-123")
    service.wait_for_video = AsyncMock(return_value="https://cdn.example.com/video.mp4")
    app.dependency_overrides[get_generation_service] = lambda: service
    return service

@pytest.fixture
def mock_brand_service():
    service = MagicMock()
    service.analyze_brand = AsyncMock(return_value=BrandAnalysis(
        colors=["#0A84FF", "#FFFFFF"], mood="Minimalist", subject="Headphones", brand_name="Hush"
    ))
    service.generate_specs = AsyncMock(return_value=AssetSpecs(
        social_prompts=["Headphones floating in mist"],
        portrait34_prompts=["Headphones on a marble plinth"],
        video_prompts=["Slow orbit around headphones"],
        square_prompts=["Top-down headphones on linen"],
        landscape_prompts=["Headphones on a desert dune at dawn"],
    ))
    service.generate_ad_copy = AsyncMock(return_value=AdCopy(
        headline="Hear Nothing Else", cta="Shop Now", hashtags=["#hush", "#quiet"]
    ))
    app.dependency_overrides[get_brand_service] = lambda: service
    return service

@pytest.fixture
def campaign_service(mock_brand_service, mock_generation_service):
    """Real pipeline over mocked brand and generation services"""
    service = CampaignService(
        brand_service=mock_brand_service,
        generation_service=mock_generation_service
    )
    app.dependency_overrides[get_campaign_service] = lambda: service
    return service
