from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import ClassVar

class Settings(BaseSettings):
    # Composio tool execution
    composio_api_key: str = ""
    composio_base_url: str = "https://backend.composio.dev/api/v3"
    composio_user_id: str = "default"
    composio_tool_version: str = "20260114_00"
    composio_timeout: float = 600.0

    # Direct Gemini access for image analysis (falls back to Vertex AI)
    gemini_api_key: str = ""
    project_id: str = "adsgen"
    location: str = "us-central1"

    # Model names
    gemini_text_model: str = "gemini-2.5-flash"
    gemini_vision_model: str = "gemini-2.5-flash"
    gemini_image_model: str = "gemini-3-pro-image-preview"
    veo_model: str = "veo-3.0-generate-001"

    image_size: str = "1K"
    video_duration_seconds: int = 6

    # Hardcoded, not from env
    MAX_ASSETS_PER_RATIO: ClassVar[int] = 3

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

settings = Settings()
