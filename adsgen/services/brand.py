"""
Brand identity analysis, per-ratio prompt planning and ad copy.

Every operation here degrades to a canned fallback instead of raising, so
a flaky model never stops a campaign before any asset is requested.
"""
import json
from pydantic import ValidationError
from typing import Optional
from adsgen.parsing import extract_json_object
from adsgen.schemas import AdCopy, AssetCounts, AssetSpecs, BrandAnalysis
from adsgen.services.generation import GenerationService
from adsgen.services.vision import VisionService
from adsgen.logging_config import setup_logger

logger = setup_logger(__name__)

# Used when the model gives nothing usable for a ratio
FALLBACK_PROMPTS = {
    "social_prompts": "Vibrant lifestyle shot",
    "portrait34_prompts": "Elegant portrait composition",
    "video_prompts": "Cinematic wide shot",
    "square_prompts": "Minimalist product focus",
    "landscape_prompts": "Wide cinematic product shot",
}

ANALYSIS_PROMPT = """You are a brand identity analyst. Analyze this image and extract:
1. colors: Array of hex codes for dominant brand colors
2. mood: The emotional tone (e.g., Energetic, Serene, Luxury, Minimalist)
3. subject: The main subject of the image
4. brandName: The brand name if visible or inferable
5. slogan: A potential marketing slogan
6. hasLogo: Whether a distinct logo is present

Respond ONLY with valid JSON matching this structure:
{
  "colors": ["#hexcode"],
  "mood": "string",
  "subject": "string",
  "brandName": "string or null",
  "slogan": "string or null",
  "hasLogo": boolean
}"""


def _context_json(context: BrandAnalysis) -> str:
    return json.dumps(context.model_dump(by_alias=True, exclude_none=True))


def build_specs_prompt(context: BrandAnalysis, user_instruction: str, counts: AssetCounts) -> str:
    prompt = f"""Based on brand context: {_context_json(context)}, create:
- {counts.portrait} prompts for social (9:16)
- {counts.portrait34} prompts for portrait (3:4)
- {counts.video} prompts for Video (16:9) [All for Veo]
- {counts.square} prompts for Square (1:1)
- {counts.landscape} prompts for Landscape (16:9)

CRITICAL: All image prompts must be for "high-end product photography" or "ad shoot" style.
They must be EXTREMELY creative and visually stunning.
ABSOLUTELY NO TEXT IN IMAGES. Pure visual storytelling.

For Video Prompts:
- FOCUS: Creative product cinematography. Dynamic camera movements, lighting effects, slow motion.
- DO NOT include people speaking or introducing the product unless explicitly requested.
- NO "commercial film" style with actors. Focus on the PRODUCT itself in a creative way.

Respond ONLY with valid JSON:
{{
  "socialPrompts": ["prompt1", ...],
  "portrait34Prompts": ["prompt1", ...],
  "videoPrompts": ["prompt1", ...],
  "squarePrompts": ["prompt1", ...],
  "landscapePrompts": ["prompt1", ...]
}}"""

    if user_instruction:
        prompt += f"\n\nIMPORTANT USER INSTRUCTION: {user_instruction}\nEnsure all prompts align with this instruction."
    return prompt


def build_ad_copy_prompt(context: BrandAnalysis, user_instruction: Optional[str] = None) -> str:
    prompt = f"""Based on brand context: {_context_json(context)}, generate comprehensive advertising copy.

Create:
- headline: Main advertising headline (max 10 words, attention-grabbing)
- tagline: Brand tagline/slogan (memorable and brand-aligned)
- description: Compelling product/service description (2-3 sentences)
- cta: Call-to-action text (e.g., 'Shop Now', 'Learn More')
- hashtags: 5-8 relevant hashtags for social media
- instagramCaption: Engaging, emoji-friendly caption with hashtags
- facebookCaption: Professional, informative caption
- twitterCaption: Concise, punchy, within character limit
- linkedinCaption: Professional, B2B focused

CRITICAL:
- Align with brand mood: {context.mood}
- Subject focus: {context.subject}
- Brand name: {context.brand_name or "Brand"}

Respond ONLY with valid JSON matching this structure."""

    if user_instruction:
        prompt += f"\n\nIMPORTANT USER INSTRUCTION: {user_instruction}"
    return prompt


def fallback_specs(counts: AssetCounts) -> AssetSpecs:
    return AssetSpecs(
        social_prompts=[FALLBACK_PROMPTS["social_prompts"]] * counts.portrait,
        portrait34_prompts=[FALLBACK_PROMPTS["portrait34_prompts"]] * counts.portrait34,
        video_prompts=[FALLBACK_PROMPTS["video_prompts"]] * counts.video,
        square_prompts=[FALLBACK_PROMPTS["square_prompts"]] * counts.square,
        landscape_prompts=[FALLBACK_PROMPTS["landscape_prompts"]] * counts.landscape,
    )


def fallback_ad_copy(context: BrandAnalysis) -> AdCopy:
    """Copy used when the model answered but without usable JSON"""
    return AdCopy(
        headline=f"Discover {context.brand_name or 'Excellence'}",
        tagline=f"{context.mood or 'Premium'} Quality",
        description="Experience exceptional quality. Crafted with care.",
        cta="Learn More",
        hashtags=["#premium", "#quality", "#lifestyle"],
    )


def minimal_ad_copy() -> AdCopy:
    """Copy used when the text tool itself failed"""
    return AdCopy(
        headline="Discover Excellence",
        description="Experience exceptional quality.",
        cta="Learn More",
        hashtags=["#premium", "#quality"],
    )


def _without_nulls(data: dict) -> dict:
    return {key: value for key, value in data.items() if value is not None}


class BrandService:
    def __init__(
        self,
        vision: Optional[VisionService] = None,
        generation: Optional[GenerationService] = None
    ):
        self.vision = vision or VisionService()
        self.generation = generation or GenerationService()

    async def analyze_brand(self, image_bytes: bytes, mime_type: str) -> BrandAnalysis:
        """Infer brand identity attributes from an uploaded image"""
        try:
            content = await self.vision.analyze_image(ANALYSIS_PROMPT, image_bytes, mime_type)
            data = extract_json_object(content)
            if data is not None:
                analysis = BrandAnalysis.model_validate(_without_nulls(data))
                logger.info(f"Brand analysis complete: mood={analysis.mood}, subject={analysis.subject}")
                return analysis
        except ValidationError as e:
            logger.error(f"Brand analysis returned unexpected fields: {e}")
        except Exception as e:
            logger.error(f"Brand analysis error: {type(e).__name__}: {e}")

        logger.warning("Using fallback brand analysis")
        return BrandAnalysis()

    async def generate_specs(
        self,
        context: BrandAnalysis,
        user_instruction: str,
        counts: AssetCounts
    ) -> AssetSpecs:
        """Ask the text model for per-ratio generation prompts"""
        prompt = build_specs_prompt(context, user_instruction, counts)
        try:
            content = await self.generation.generate_text(prompt)
            data = extract_json_object(content)
            if data is not None:
                return AssetSpecs.model_validate(_without_nulls(data))
        except ValidationError as e:
            logger.error(f"Specs generation returned unexpected fields: {e}")
        except Exception as e:
            logger.error(f"Specs generation error: {type(e).__name__}: {e}")

        logger.warning("Using fallback asset specs")
        return fallback_specs(counts)

    async def generate_ad_copy(
        self,
        context: BrandAnalysis,
        user_instruction: Optional[str] = None
    ) -> AdCopy:
        """Generate headline, tagline, CTA, hashtags and per-network captions"""
        prompt = build_ad_copy_prompt(context, user_instruction)
        try:
            content = await self.generation.generate_text(prompt)
        except Exception as e:
            logger.error(f"Ad copy generation error: {type(e).__name__}: {e}")
            return minimal_ad_copy()

        data = extract_json_object(content)
        if data is not None:
            try:
                return AdCopy.model_validate(_without_nulls(data))
            except ValidationError as e:
                logger.error(f"Ad copy returned unexpected fields: {e}")

        logger.warning("Using fallback ad copy")
        return fallback_ad_copy(context)
