from fastapi import APIRouter
from adsgen.config import settings

router = APIRouter()

@router.get("/")
def health():
    """Health check endpoint"""
    return {
        "status": "ok",
        "composio_configured": bool(settings.composio_api_key),
        "models": {
            "text": settings.gemini_text_model,
            "vision": settings.gemini_vision_model,
            "image": settings.gemini_image_model,
            "video": settings.veo_model
        }
    }
