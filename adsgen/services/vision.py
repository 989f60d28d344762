"""
Direct multimodal inference for brand image analysis
"""
from google import genai
from google.genai import types
from typing import Optional
from adsgen.config import settings
from adsgen.logging_config import setup_logger

logger = setup_logger(__name__)

_genai_client = None


def get_genai_client() -> genai.Client:
    """Get or create the Gemini client (singleton)"""
    global _genai_client
    if _genai_client is None:
        if settings.gemini_api_key:
            _genai_client = genai.Client(api_key=settings.gemini_api_key)
            logger.info("Gemini client initialized with API key")
        else:
            _genai_client = genai.Client(
                vertexai=True,
                project=settings.project_id,
                location=settings.location
            )
            logger.info(f"Gemini client initialized for Vertex AI project: {settings.project_id}")
    return _genai_client


class VisionService:
    def __init__(self, client: Optional[genai.Client] = None):
        self._client = client

    @property
    def client(self) -> genai.Client:
        if self._client is None:
            self._client = get_genai_client()
        return self._client

    async def analyze_image(self, prompt: str, image_bytes: bytes, mime_type: str) -> str:
        """Send a prompt plus inline image bytes to the vision model and return its text"""
        logger.info(f"Analyzing image: {len(image_bytes)} bytes, format: {mime_type}")

        response = await self.client.aio.models.generate_content(
            model=settings.gemini_vision_model,
            contents=[
                types.Part.from_bytes(data=image_bytes, mime_type=mime_type),
                prompt
            ],
            config=types.GenerateContentConfig(
                temperature=0.4,
                max_output_tokens=2048
            )
        )

        return response.text or ""
