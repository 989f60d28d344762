from fastapi import APIRouter, Depends, HTTPException
from adsgen.schemas import (
    AnalyzeRequest, BrandAnalysis,
    SpecsRequest, AssetSpecs,
    AdCopyRequest, AdCopy,
    TextRequest, TextResponse,
    ImageRequest, ImageResponse,
    VideoRequest, VideoOperationResponse,
    StatusRequest, VideoStatusResponse, VideoResponse
)
from adsgen.services.brand import BrandService
from adsgen.services.generation import GenerationService
from adsgen.services.session import decode_image
from adsgen.logging_config import setup_logger

logger = setup_logger(__name__)
router = APIRouter()

def get_generation_service() -> GenerationService:
    return GenerationService()

def get_brand_service() -> BrandService:
    return BrandService()

@router.post("/analyze", response_model=BrandAnalysis)
async def analyze_brand(
    request: AnalyzeRequest,
    service: BrandService = Depends(get_brand_service)
):
    """Infer brand colors, mood and subject from an image"""
    image = decode_image(request.image, request.mime_type)
    if image is None:
        raise HTTPException(status_code=400, detail="Please select image files")

    logger.info(f"Brand analysis request, {len(image.data)} bytes, {image.mime_type}")
    return await service.analyze_brand(image.data, image.mime_type)

@router.post("/specs", response_model=AssetSpecs)
async def generate_specs(
    request: SpecsRequest,
    service: BrandService = Depends(get_brand_service)
):
    """Plan generation prompts for each aspect ratio"""
    logger.info(f"Specs request, total_assets={request.counts.total}")
    return await service.generate_specs(request.context, request.user_instruction, request.counts)

@router.post("/copy", response_model=AdCopy)
async def generate_ad_copy(
    request: AdCopyRequest,
    service: BrandService = Depends(get_brand_service)
):
    """Generate ad copy for a brand context"""
    logger.info("Ad copy request")
    return await service.generate_ad_copy(request.context, request.user_instruction)

@router.post("/text", response_model=TextResponse)
async def generate_text(
    request: TextRequest,
    service: GenerationService = Depends(get_generation_service)
):
    """Generate text using Gemini"""
    try:
        logger.info("Text generation request")
        return TextResponse(response=await service.generate_text(request.prompt))
    except Exception as e:
        logger.error(f"Text generation failed: {str(e)}")
        raise HTTPException(status_code=500, detail=str(e))

@router.post("/image", response_model=ImageResponse)
async def generate_image(
    request: ImageRequest,
    service: GenerationService = Depends(get_generation_service)
):
    """Generate a product image"""
    try:
        logger.info(f"Image generation request, prompt={request.prompt[:50]}..., aspect_ratio={request.aspect_ratio}")
        url = await service.generate_image(request.prompt, request.aspect_ratio)
        return ImageResponse(url=url)
    except Exception as e:
        logger.error(f"Image generation failed: {str(e)}")
        raise HTTPException(status_code=500, detail=str(e))

@router.post("/video", response_model=VideoOperationResponse)
async def generate_video(
    request: VideoRequest,
    service: GenerationService = Depends(get_generation_service)
):
    """Start video generation using Veo"""
    try:
        logger.info(f"Video generation request, prompt={request.prompt[:50]}..., aspect_ratio={request.aspect_ratio}")
        operation_name = await service.generate_video(request.prompt, request.aspect_ratio)
        return VideoOperationResponse(operation_name=operation_name)
    except Exception as e:
        logger.error(f"Video generation failed: {str(e)}")
        raise HTTPException(status_code=500, detail=str(e))

@router.post("/video/status", response_model=VideoStatusResponse)
async def check_video_status(
    request: StatusRequest,
    service: GenerationService = Depends(get_generation_service)
):
    """Check video generation status"""
    logger.debug(f"Video status check: {request.operation_name}")
    return await service.check_video_status(request.operation_name)

@router.post("/video/wait", response_model=VideoResponse)
async def wait_for_video(
    request: StatusRequest,
    service: GenerationService = Depends(get_generation_service)
):
    """Block until a video is ready"""
    try:
        logger.info(f"Waiting for video: {request.operation_name}")
        return VideoResponse(url=await service.wait_for_video(request.operation_name))
    except Exception as e:
        logger.error(f"Wait for video failed: {str(e)}")
        raise HTTPException(status_code=500, detail=str(e))
