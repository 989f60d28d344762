from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel
from typing import Optional, List, Literal
from adsgen.config import Settings

AspectRatio = Literal["9:16", "3:4", "1:1", "16:9"]
VideoAspectRatio = Literal["16:9", "9:16"]
AssetType = Literal["image", "video"]
AssetStatus = Literal["generating", "completed", "failed"]
Phase = Literal["idle", "analyzing", "generating", "completed"]

# ============== MODEL OUTPUT ==============
# Field names follow the camelCase JSON the model is asked to produce.

class ModelOutput(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore"
    )

class BrandAnalysis(ModelOutput):
    colors: List[str] = Field(default_factory=lambda: ["#000000"])
    mood: str = "Modern"
    subject: str = "Product"
    brand_name: Optional[str] = None
    slogan: Optional[str] = None
    has_logo: Optional[bool] = None

class AssetSpecs(ModelOutput):
    social_prompts: Optional[List[str]] = None
    portrait34_prompts: Optional[List[str]] = None
    video_prompts: Optional[List[str]] = None
    square_prompts: Optional[List[str]] = None
    landscape_prompts: Optional[List[str]] = None

class AdCopy(ModelOutput):
    headline: Optional[str] = None
    tagline: Optional[str] = None
    description: Optional[str] = None
    cta: Optional[str] = None
    hashtags: Optional[List[str]] = None
    instagram_caption: Optional[str] = None
    facebook_caption: Optional[str] = None
    twitter_caption: Optional[str] = None
    linkedin_caption: Optional[str] = None

# ============== CAMPAIGN STATE ==============

class AssetCounts(BaseModel):
    portrait: int = Field(1, ge=0, le=Settings.MAX_ASSETS_PER_RATIO)      # 9:16
    portrait34: int = Field(1, ge=0, le=Settings.MAX_ASSETS_PER_RATIO)    # 3:4
    square: int = Field(1, ge=0, le=Settings.MAX_ASSETS_PER_RATIO)        # 1:1
    landscape: int = Field(1, ge=0, le=Settings.MAX_ASSETS_PER_RATIO)     # 16:9
    video: int = Field(1, ge=0, le=Settings.MAX_ASSETS_PER_RATIO)         # 16:9 videos

    @property
    def image_total(self) -> int:
        return self.portrait + self.portrait34 + self.square + self.landscape

    @property
    def total(self) -> int:
        return self.image_total + self.video

class Asset(BaseModel):
    id: str
    type: AssetType
    aspect_ratio: AspectRatio
    status: AssetStatus = "generating"
    prompt: str
    description: str
    url: str = ""
    error: Optional[str] = None

class UploadedImageInfo(BaseModel):
    index: int
    filename: Optional[str] = None
    mime_type: str
    size: int

class SessionResponse(BaseModel):
    id: str
    phase: Phase
    is_processing: bool
    progress: int
    progress_message: str
    error: Optional[str] = None
    images: List[UploadedImageInfo]
    user_instruction: str
    counts: AssetCounts
    total_assets: int
    brand_context: Optional[BrandAnalysis] = None
    assets: List[Asset]
    ad_copy: Optional[AdCopy] = None

# ============== REQUEST MODELS ==============

class ImageUpload(BaseModel):
    data: str
    filename: Optional[str] = None
    mime_type: Optional[str] = None

class UploadImagesRequest(BaseModel):
    images: List[ImageUpload]

class UpdateSettingsRequest(BaseModel):
    user_instruction: Optional[str] = None
    counts: Optional[AssetCounts] = None

class AnalyzeRequest(BaseModel):
    image: str
    mime_type: Optional[str] = None

class SpecsRequest(BaseModel):
    context: BrandAnalysis
    user_instruction: str = ""
    counts: AssetCounts = Field(default_factory=AssetCounts)

class AdCopyRequest(BaseModel):
    context: BrandAnalysis
    user_instruction: Optional[str] = None

class TextRequest(BaseModel):
    prompt: str

class ImageRequest(BaseModel):
    prompt: str
    aspect_ratio: AspectRatio = "1:1"

class VideoRequest(BaseModel):
    prompt: str
    aspect_ratio: VideoAspectRatio = "16:9"

class StatusRequest(BaseModel):
    operation_name: str

# ============== RESPONSE MODELS ==============

class TextResponse(BaseModel):
    response: str

class ImageResponse(BaseModel):
    url: str

class VideoOperationResponse(BaseModel):
    operation_name: str

class VideoStatusResponse(BaseModel):
    status: Literal["pending", "processing", "completed", "failed"]
    url: Optional[str] = None

class VideoResponse(BaseModel):
    url: str
