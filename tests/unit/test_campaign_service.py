import asyncio
import pytest
from unittest.mock import MagicMock, AsyncMock
from adsgen.schemas import AdCopy, Asset, AssetCounts, AssetSpecs, BrandAnalysis, ImageUpload
from adsgen.services.campaign import CampaignService, plan_assets
from adsgen.services.generation import GenerationError
from adsgen.services.session import CampaignSession, SessionBusyError

PNG_BASE64 = "iVBORw0KGgoAAAANSUhEUgAAAAEAAAABCAYAAAAfFcSJAAAADUlEQVR42mP8z8DwHwAFBQIAX8jx0gAAAABJRU5ErkJggg=="

FULL_SPECS = AssetSpecs(
    social_prompts=["s1", "s2", "s3"],
    portrait34_prompts=["p1", "p2", "p3"],
    video_prompts=["v1", "v2", "v3"],
    square_prompts=["q1", "q2", "q3"],
    landscape_prompts=["l1", "l2", "l3"],
)


class TestPlanAssets:
    """Aspect-ratio-to-count fan-out"""

    def test_default_counts_one_per_ratio_in_order(self):
        assets = plan_assets(FULL_SPECS, AssetCounts(), now_ms=1700000000000)

        assert [(a.type, a.aspect_ratio, a.prompt) for a in assets] == [
            ("image", "9:16", "s1"),
            ("image", "3:4", "p1"),
            ("image", "1:1", "q1"),
            ("image", "16:9", "l1"),
            ("video", "16:9", "v1"),
        ]
        assert all(a.status == "generating" and a.url == "" for a in assets)

    def test_counts_per_ratio(self):
        counts = AssetCounts(portrait=3, portrait34=0, square=2, landscape=0, video=1)

        assets = plan_assets(FULL_SPECS, counts)

        ratios = [(a.type, a.aspect_ratio) for a in assets]
        assert ratios.count(("image", "9:16")) == 3
        assert ratios.count(("image", "3:4")) == 0
        assert ratios.count(("image", "1:1")) == 2
        assert ratios.count(("image", "16:9")) == 0
        assert ratios.count(("video", "16:9")) == 1
        assert len(assets) == counts.total

    def test_extra_prompts_are_dropped(self):
        counts = AssetCounts(portrait=1, portrait34=0, square=0, landscape=0, video=0)

        assets = plan_assets(FULL_SPECS, counts)

        assert [a.prompt for a in assets] == ["s1"]

    def test_short_and_missing_lists_are_padded(self):
        specs = AssetSpecs(social_prompts=["only one"], square_prompts=[])
        counts = AssetCounts(portrait=2, portrait34=1, square=1, landscape=1, video=1)

        assets = plan_assets(specs, counts)

        assert [a.prompt for a in assets] == [
            "only one",
            "Vibrant lifestyle shot",
            "Elegant portrait composition",
            "Minimalist product focus",
            "Wide cinematic product shot",
            "Cinematic wide shot",
        ]

    def test_zero_counts_yield_nothing(self):
        counts = AssetCounts(portrait=0, portrait34=0, square=0, landscape=0, video=0)

        assert plan_assets(FULL_SPECS, counts) == []

    def test_ids_and_video_descriptions(self):
        counts = AssetCounts(portrait=2, portrait34=0, square=0, landscape=0, video=1)

        assets = plan_assets(FULL_SPECS, counts, now_ms=42)

        assert [a.id for a in assets] == ["image-9:16-42-0", "image-9:16-42-1", "video-16:9-42-0"]
        assert assets[0].description == "s1"
        assert assets[2].description == "[Veo] v1"
        assert assets[2].prompt == "v1"


@pytest.fixture
def mock_generation():
    generation = MagicMock()
    generation.generate_image = AsyncMock(return_value="https://img/ok.png")
    generation.generate_video = AsyncMock(return_value="operations/op-1")
    generation.wait_for_video = AsyncMock(return_value="https://video/ok.mp4")
    return generation

@pytest.fixture
def mock_brand():
    brand = MagicMock()
    brand.analyze_brand = AsyncMock(return_value=BrandAnalysis(mood="Luxury", subject="Watch"))
    brand.generate_specs = AsyncMock(return_value=FULL_SPECS)
    brand.generate_ad_copy = AsyncMock(return_value=AdCopy(headline="Time, refined"))
    return brand

@pytest.fixture
def service(mock_brand, mock_generation):
    return CampaignService(brand_service=mock_brand, generation_service=mock_generation)

@pytest.fixture
def session():
    session = CampaignSession("session-1")
    session.add_images([ImageUpload(data=PNG_BASE64, filename="logo.png")])
    return session


class TestGenerateAssets:
    @pytest.mark.asyncio
    async def test_all_succeed(self, service, mock_generation):
        assets = plan_assets(FULL_SPECS, AssetCounts())

        await service.generate_assets(assets)

        assert [a.status for a in assets] == ["completed"] * 5
        assert assets[0].url == "https://img/ok.png"
        assert assets[4].url == "https://video/ok.mp4"
        mock_generation.generate_video.assert_awaited_once_with("v1", "16:9")
        mock_generation.wait_for_video.assert_awaited_once_with("operations/op-1")

    @pytest.mark.asyncio
    async def test_partial_failures_do_not_abort_siblings(self, service, mock_generation):
        async def flaky_image(prompt, aspect_ratio):
            if aspect_ratio == "3:4":
                raise Exception("safety filter")
            return f"https://img/{prompt}.png"

        mock_generation.generate_image.side_effect = flaky_image
        mock_generation.wait_for_video.side_effect = GenerationError("No video URL returned")
        assets = plan_assets(FULL_SPECS, AssetCounts())

        await service.generate_assets(assets)

        by_ratio = {(a.type, a.aspect_ratio): a for a in assets}
        assert by_ratio[("image", "9:16")].status == "completed"
        assert by_ratio[("image", "9:16")].url == "https://img/s1.png"
        assert by_ratio[("image", "3:4")].status == "failed"
        assert by_ratio[("image", "3:4")].error == "safety filter"
        assert by_ratio[("image", "3:4")].url == ""
        assert by_ratio[("image", "1:1")].status == "completed"
        assert by_ratio[("image", "16:9")].status == "completed"
        assert by_ratio[("video", "16:9")].status == "failed"

    @pytest.mark.asyncio
    async def test_requests_run_concurrently(self, service, mock_generation):
        """A slow request does not hold back the others"""
        in_flight = 0
        peak = 0

        async def slow_image(prompt, aspect_ratio):
            nonlocal in_flight, peak
            in_flight += 1
            peak = max(peak, in_flight)
            await asyncio.sleep(0.01)
            in_flight -= 1
            return "https://img/x.png"

        mock_generation.generate_image.side_effect = slow_image
        counts = AssetCounts(portrait=3, portrait34=0, square=0, landscape=0, video=0)
        assets = plan_assets(FULL_SPECS, counts)

        await service.generate_assets(assets)

        assert peak == 3

    @pytest.mark.asyncio
    async def test_all_failures_still_settle(self, service, mock_generation):
        mock_generation.generate_image.side_effect = Exception("down")
        mock_generation.generate_video.side_effect = Exception("down")
        assets = plan_assets(FULL_SPECS, AssetCounts())

        result = await service.generate_assets(assets)

        assert [a.status for a in result] == ["failed"] * 5

    @pytest.mark.asyncio
    async def test_progress_advances_as_assets_settle(self, service, session):
        assets = plan_assets(FULL_SPECS, AssetCounts(portrait=2, portrait34=0, square=0, landscape=0, video=0))

        await service.generate_assets(assets, session)

        assert session.progress == 90


class TestRun:
    @pytest.mark.asyncio
    async def test_happy_path(self, service, session, mock_brand):
        session.user_instruction = "Moody lighting"
        session.begin()

        await service.run(session)

        assert session.phase == "completed"
        assert session.progress == 100
        assert session.progress_message == "All assets generated successfully!"
        assert session.is_processing is False
        assert session.error is None
        assert session.brand_context.mood == "Luxury"
        assert len(session.assets) == 5
        assert session.ad_copy.headline == "Time, refined"

        image_bytes, mime_type = mock_brand.analyze_brand.call_args.args
        assert image_bytes.startswith(b"\x89PNG")
        assert mime_type == "image/png"
        mock_brand.generate_specs.assert_awaited_once_with(
            session.brand_context, "Moody lighting", session.counts
        )
        mock_brand.generate_ad_copy.assert_awaited_once_with(session.brand_context, "Moody lighting")

    @pytest.mark.asyncio
    async def test_empty_instruction_passed_as_none_to_ad_copy(self, service, session, mock_brand):
        session.begin()

        await service.run(session)

        mock_brand.generate_ad_copy.assert_awaited_once_with(session.brand_context, None)

    @pytest.mark.asyncio
    async def test_phases_progress_in_order(self, service, session, mock_brand, mock_generation):
        seen = []

        async def record_analyze(*args):
            seen.append((session.phase, session.progress))
            return BrandAnalysis()

        async def record_image(prompt, aspect_ratio):
            seen.append((session.phase, session.progress))
            return "https://img/x.png"

        mock_brand.analyze_brand.side_effect = record_analyze
        mock_generation.generate_image.side_effect = record_image
        session.counts = AssetCounts(portrait=1, portrait34=0, square=0, landscape=0, video=0)
        session.begin()

        await service.run(session)

        assert seen == [("analyzing", 10), ("generating", 60)]
        assert session.phase == "completed"

    @pytest.mark.asyncio
    async def test_asset_failures_still_complete(self, service, session, mock_generation):
        mock_generation.generate_image.side_effect = Exception("quota")
        session.begin()

        await service.run(session)

        assert session.phase == "completed"
        assert sum(1 for a in session.assets if a.status == "failed") == 4
        assert session.assets[-1].status == "completed"

    @pytest.mark.asyncio
    async def test_ad_copy_error_is_not_fatal(self, service, session, mock_brand):
        mock_brand.generate_ad_copy.side_effect = Exception("copy failed")
        session.begin()

        await service.run(session)

        assert session.phase == "completed"
        assert session.ad_copy is None

    @pytest.mark.asyncio
    async def test_unexpected_error_exits_to_idle(self, service, session, mock_brand):
        mock_brand.generate_specs.side_effect = RuntimeError("specs exploded")
        session.begin()

        await service.run(session)

        assert session.phase == "idle"
        assert session.error == "specs exploded"
        assert session.is_processing is False
        assert session.assets == []

    @pytest.mark.asyncio
    async def test_reset_during_run_is_refused(self, service, session, mock_generation):
        started = asyncio.Event()
        gate = asyncio.Event()

        async def gated_image(prompt, aspect_ratio):
            started.set()
            await gate.wait()
            return "https://img/x.png"

        mock_generation.generate_image.side_effect = gated_image
        session.counts = AssetCounts(portrait=1, portrait34=0, square=0, landscape=0, video=0)
        session.begin()

        run = asyncio.create_task(service.run(session))
        await asyncio.wait_for(started.wait(), timeout=1)
        assert session.phase == "generating"

        with pytest.raises(SessionBusyError):
            session.reset()
        with pytest.raises(SessionBusyError):
            session.remove_image(0)

        gate.set()
        await run

        assert session.phase == "completed"
        assert session.is_processing is False
        assert len(session.images) == 1
        assert [a.status for a in session.assets] == ["completed"]

    @pytest.mark.asyncio
    async def test_error_without_message_uses_default(self, service, session, mock_brand):
        mock_brand.analyze_brand.side_effect = RuntimeError()
        session.begin()

        await service.run(session)

        assert session.error == "Failed to generate assets"


def test_default_brand_service_shares_generation_service(mock_generation):
    service = CampaignService(generation_service=mock_generation)

    assert service.brand.generation is mock_generation
    assert isinstance(plan_assets(FULL_SPECS, AssetCounts())[0], Asset)
