from typing import Optional
from adsgen.config import settings
from adsgen.parsing import first_present, tool_output_text
from adsgen.schemas import VideoStatusResponse
from adsgen.services.composio import ComposioClient
from adsgen.logging_config import setup_logger

logger = setup_logger(__name__)

# Composio tool names
TEXT_TOOL = "GEMINI_GENERATE_CONTENT"
IMAGE_TOOL = "GEMINI_GENERATE_IMAGE"
VIDEO_TOOL = "GEMINI_GENERATE_VIDEOS"
VIDEO_STATUS_TOOL = "GEMINI_GET_VIDEOS_OPERATION"
VIDEO_WAIT_TOOL = "GEMINI_WAIT_FOR_VIDEO"

IMAGE_PROMPT_PREFIX = "High-end product photography, ad shoot, creative lighting, "
VIDEO_PROMPT_PREFIX = "Cinematic, high-end product video, "


class GenerationError(Exception):
    """A tool call succeeded but its payload lacked the expected result"""


class GenerationService:
    def __init__(self, composio: Optional[ComposioClient] = None):
        self.composio = composio or ComposioClient()

    async def generate_text(self, prompt: str) -> str:
        """Generate text using Gemini through Composio"""
        result = await self.composio.execute(TEXT_TOOL, {
            "prompt": prompt,
            "model": settings.gemini_text_model
        })
        return tool_output_text(result)

    async def generate_image(self, prompt: str, aspect_ratio: str = "1:1") -> str:
        """Generate a product image and return its hosted URL"""
        try:
            result = await self.composio.execute(IMAGE_TOOL, {
                "prompt": IMAGE_PROMPT_PREFIX + prompt,
                "aspect_ratio": aspect_ratio,
                "model": settings.gemini_image_model,
                "image_size": settings.image_size
            })

            image_url = first_present(
                result,
                "url",
                "image_url",
                "data.url",
                "image.s3url",
                "data.image.s3url"
            )
            if not image_url:
                raise GenerationError(f"No image URL returned from Gemini. Result: {result}")

            logger.info(f"Generated {aspect_ratio} image successfully")
            return image_url
        except Exception as e:
            logger.error(f"Image generation error: {type(e).__name__}: {e}")
            raise

    async def generate_video(self, prompt: str, aspect_ratio: str = "16:9") -> str:
        """Start video generation using Veo and return the operation name"""
        try:
            result = await self.composio.execute(VIDEO_TOOL, {
                "prompt": VIDEO_PROMPT_PREFIX + prompt,
                "model": settings.veo_model,
                "aspect_ratio": aspect_ratio,
                "duration_seconds": settings.video_duration_seconds
            })

            operation_name = first_present(result, "operation_name", "operationName", "name")
            if not operation_name:
                raise GenerationError("No operation name returned from Veo")

            logger.info(f"Video generation started: {operation_name}")
            return operation_name
        except Exception as e:
            logger.error(f"Video generation error: {type(e).__name__}: {e}")
            raise

    async def check_video_status(self, operation_name: str) -> VideoStatusResponse:
        """Poll a Veo operation once"""
        try:
            result = await self.composio.execute(VIDEO_STATUS_TOOL, {
                "operation_name": operation_name
            })
        except Exception as e:
            logger.error(f"Video status check error: {e}")
            return VideoStatusResponse(status="failed")

        if not isinstance(result, dict):
            logger.error(f"Video status check returned unexpected payload: {result!r}")
            return VideoStatusResponse(status="failed")

        if result.get("done") or result.get("status") == "completed":
            video_url = first_present(
                result,
                "video_url",
                "url",
                "response.generatedSamples.0.video.uri"
            )
            return VideoStatusResponse(status="completed", url=video_url)

        return VideoStatusResponse(status="processing")

    async def wait_for_video(self, operation_name: str) -> str:
        """Block until a Veo operation finishes and return the video URL"""
        try:
            result = await self.composio.execute(VIDEO_WAIT_TOOL, {
                "operation_name": operation_name
            })

            video_url = first_present(result, "url", "video_url", "data.url")
            if not video_url:
                raise GenerationError("No video URL returned")

            logger.info(f"Video ready for operation {operation_name}")
            return video_url
        except Exception as e:
            logger.error(f"Wait for video error: {type(e).__name__}: {e}")
            raise
