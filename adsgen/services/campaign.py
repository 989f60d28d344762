import asyncio
import time
from typing import List, Optional
from adsgen.schemas import Asset, AssetCounts, AssetSpecs
from adsgen.services.brand import BrandService, FALLBACK_PROMPTS
from adsgen.services.generation import GenerationService
from adsgen.services.session import CampaignSession
from adsgen.logging_config import setup_logger

logger = setup_logger(__name__)

# (asset type, aspect ratio, prompt list on AssetSpecs, counter on AssetCounts), in batch order
BATCH_LAYOUT = [
    ("image", "9:16", "social_prompts", "portrait"),
    ("image", "3:4", "portrait34_prompts", "portrait34"),
    ("image", "1:1", "square_prompts", "square"),
    ("image", "16:9", "landscape_prompts", "landscape"),
    ("video", "16:9", "video_prompts", "video"),
]

VIDEO_ASPECT_RATIO = "16:9"

# Progress checkpoints
PROGRESS_ANALYZING = 10
PROGRESS_ANALYZED = 25
PROGRESS_PLANNING = 35
PROGRESS_GENERATING = 50
PROGRESS_BATCH_STARTED = 60
PROGRESS_BATCH_DONE = 90


def plan_assets(specs: AssetSpecs, counts: AssetCounts, now_ms: Optional[int] = None) -> List[Asset]:
    """
    Fan specs out into one pending asset per requested slot.

    Each ratio yields exactly its count: extra prompts are dropped and a
    missing or short prompt list is padded with that ratio's fallback prompt.
    """
    now_ms = now_ms if now_ms is not None else int(time.time() * 1000)
    assets = []

    for asset_type, aspect_ratio, prompts_field, count_field in BATCH_LAYOUT:
        count = getattr(counts, count_field)
        if count <= 0:
            continue

        prompts = list(getattr(specs, prompts_field) or [])[:count]
        prompts += [FALLBACK_PROMPTS[prompts_field]] * (count - len(prompts))

        for i, prompt in enumerate(prompts):
            assets.append(Asset(
                id=f"{asset_type}-{aspect_ratio}-{now_ms}-{i}",
                type=asset_type,
                aspect_ratio=aspect_ratio,
                prompt=prompt,
                description=f"[Veo] {prompt}" if asset_type == "video" else prompt,
            ))

    return assets


class CampaignService:
    def __init__(
        self,
        brand_service: Optional[BrandService] = None,
        generation_service: Optional[GenerationService] = None
    ):
        self.generation = generation_service or GenerationService()
        self.brand = brand_service or BrandService(generation=self.generation)

    async def _generate_image_asset(self, asset: Asset):
        try:
            asset.url = await self.generation.generate_image(asset.prompt, asset.aspect_ratio)
            asset.status = "completed"
        except Exception as e:
            logger.warning(f"Asset {asset.id} failed: {e}")
            asset.status = "failed"
            asset.error = str(e)

    async def _generate_video_asset(self, asset: Asset):
        try:
            operation_name = await self.generation.generate_video(asset.prompt, VIDEO_ASPECT_RATIO)
            asset.url = await self.generation.wait_for_video(operation_name)
            asset.status = "completed"
        except Exception as e:
            logger.warning(f"Asset {asset.id} failed: {e}")
            asset.status = "failed"
            asset.error = str(e)

    async def generate_assets(self, assets: List[Asset], session: Optional[CampaignSession] = None) -> List[Asset]:
        """
        Generate every asset concurrently.

        Each task settles its own asset as completed or failed and never
        raises, so one failure cannot cancel its siblings.
        """
        settled = 0

        async def _run(asset: Asset):
            nonlocal settled
            if asset.type == "video":
                await self._generate_video_asset(asset)
            else:
                await self._generate_image_asset(asset)

            settled += 1
            if session is not None:
                span = PROGRESS_BATCH_DONE - PROGRESS_BATCH_STARTED
                session.update_progress(PROGRESS_BATCH_STARTED + span * settled // len(assets))

        await asyncio.gather(*(_run(asset) for asset in assets))

        failed = sum(1 for asset in assets if asset.status == "failed")
        logger.info(f"Asset batch settled: {len(assets) - failed} completed, {failed} failed")
        return assets

    async def run(self, session: CampaignSession):
        """Analyze, plan, generate and write copy, recording progress on the session"""
        try:
            session.update_progress(PROGRESS_ANALYZING, "Analyzing brand identity...")
            primary = session.images[0]
            analysis = await self.brand.analyze_brand(primary.data, primary.mime_type)
            session.brand_context = analysis
            session.update_progress(PROGRESS_ANALYZED)

            session.update_progress(PROGRESS_PLANNING, "Formulating cross-platform strategy...")
            specs = await self.brand.generate_specs(analysis, session.user_instruction, session.counts)

            session.set_phase("generating")
            session.update_progress(PROGRESS_GENERATING, "Generating assets...")
            session.assets = plan_assets(specs, session.counts)
            session.update_progress(PROGRESS_BATCH_STARTED)

            await self.generate_assets(session.assets, session)

            session.update_progress(PROGRESS_BATCH_DONE, "Generating ad copy...")
            try:
                session.ad_copy = await self.brand.generate_ad_copy(analysis, session.user_instruction or None)
            except Exception as e:
                logger.error(f"Ad copy generation error: {e}")

            session.complete()
        except Exception as e:
            session.fail(str(e) or "Failed to generate assets")
