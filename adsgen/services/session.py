"""
In-memory campaign sessions: uploaded images, asset counters, progress and results
"""
import base64
import binascii
import uuid
from dataclasses import dataclass
from typing import Dict, List, Optional
from adsgen.schemas import (
    AdCopy, Asset, AssetCounts, BrandAnalysis, ImageUpload,
    Phase, SessionResponse, UploadedImageInfo
)
from adsgen.logging_config import setup_logger

logger = setup_logger(__name__)


class SessionError(Exception):
    """The requested change is not allowed in the session's current state"""


class SessionBusyError(SessionError):
    """A campaign run owns the session until it settles"""


class SessionNotFoundError(Exception):
    pass


@dataclass
class UploadedImage:
    data: bytes
    mime_type: str
    filename: Optional[str] = None


def _strip_base64_prefix(data: str) -> str:
    """Remove data URL prefix if present and ensure valid base64 padding"""
    if not data:
        return data

    if ',' in data and data.startswith('data:'):
        data = data.split(',', 1)[1]

    missing_padding = len(data) % 4
    if missing_padding:
        data += '=' * (4 - missing_padding)

    return data


def _data_url_mime_type(data: str) -> Optional[str]:
    # data:image/png;base64,....
    if data and data.startswith('data:') and ',' in data:
        header = data[5:].split(',', 1)[0]
        return header.split(';', 1)[0] or None
    return None


def sniff_image_mime_type(image_bytes: bytes) -> Optional[str]:
    if image_bytes[:8] == b'\x89PNG\r\n\x1a\n':
        return "image/png"
    if image_bytes[:2] == b'\xff\xd8':
        return "image/jpeg"
    if image_bytes[:6] in (b'GIF87a', b'GIF89a'):
        return "image/gif"
    if image_bytes[:4] == b'RIFF' and image_bytes[8:12] == b'WEBP':
        return "image/webp"
    return None


def decode_image(data: str, mime_type: Optional[str] = None, filename: Optional[str] = None) -> Optional[UploadedImage]:
    """
    Decode a base64 or data-URL upload.

    Returns None for anything that is not an image: undecodable data or a
    mime type outside image/*.
    """
    try:
        image_bytes = base64.b64decode(_strip_base64_prefix(data), validate=True)
    except (binascii.Error, ValueError) as e:
        logger.warning(f"Rejected upload {filename or ''}: invalid base64 ({e})")
        return None

    if not image_bytes:
        return None

    resolved = _data_url_mime_type(data) or mime_type or sniff_image_mime_type(image_bytes)
    if not resolved or not resolved.startswith("image/"):
        logger.warning(f"Rejected upload {filename or ''}: type {resolved}")
        return None

    return UploadedImage(data=image_bytes, mime_type=resolved, filename=filename)


class CampaignSession:
    def __init__(self, session_id: str):
        self.id = session_id
        self.images: List[UploadedImage] = []
        self.user_instruction = ""
        self.counts = AssetCounts()
        self._clear_run()

    def _clear_run(self):
        self.phase: Phase = "idle"
        self.is_processing = False
        self.progress = 0
        self.progress_message = ""
        self.error: Optional[str] = None
        self.brand_context: Optional[BrandAnalysis] = None
        self.assets: List[Asset] = []
        self.ad_copy: Optional[AdCopy] = None

    # ---------- uploads and settings ----------

    def _ensure_idle(self, action: str):
        if self.is_processing:
            raise SessionBusyError(f"Cannot {action} while generating")

    def add_images(self, uploads: List[ImageUpload]) -> int:
        """Keep only the uploads that are images; returns how many were added"""
        self._ensure_idle("change images")
        images = [
            image for image in (
                decode_image(upload.data, upload.mime_type, upload.filename)
                for upload in uploads
            )
            if image is not None
        ]
        if not images:
            self.error = "Please select image files"
            raise SessionError(self.error)

        self.images.extend(images)
        self.error = None
        logger.info(f"Session {self.id}: added {len(images)} image(s), total {len(self.images)}")
        return len(images)

    def remove_image(self, index: int):
        self._ensure_idle("change images")
        if index < 0 or index >= len(self.images):
            raise SessionError(f"No image at index {index}")
        self.images.pop(index)

    def update_settings(self, user_instruction: Optional[str] = None, counts: Optional[AssetCounts] = None):
        self._ensure_idle("change settings")
        if user_instruction is not None:
            self.user_instruction = user_instruction
        if counts is not None:
            self.counts = counts

    # ---------- run lifecycle ----------

    def begin(self):
        """Validate and enter the analyzing phase, discarding previous results"""
        if self.is_processing:
            raise SessionBusyError("Generation already in progress")
        if not self.images:
            self.error = "Please upload at least one image"
            raise SessionError(self.error)
        if self.counts.total == 0:
            self.error = "Select at least one asset to generate"
            raise SessionError(self.error)

        self._clear_run()
        self.is_processing = True
        self.phase = "analyzing"
        self.progress_message = "Starting..."

    def update_progress(self, progress: int, message: Optional[str] = None):
        self.progress = progress
        if message is not None:
            self.progress_message = message

    def set_phase(self, phase: Phase):
        logger.info(f"Session {self.id}: {self.phase} -> {phase}")
        self.phase = phase

    def complete(self):
        self.set_phase("completed")
        self.update_progress(100, "All assets generated successfully!")
        self.is_processing = False

    def fail(self, message: str):
        logger.error(f"Session {self.id} failed during {self.phase}: {message}")
        self.error = message
        self.phase = "idle"
        self.is_processing = False

    def reset(self):
        self._ensure_idle("reset")
        self.images = []
        self.user_instruction = ""
        self._clear_run()

    def to_response(self) -> SessionResponse:
        return SessionResponse(
            id=self.id,
            phase=self.phase,
            is_processing=self.is_processing,
            progress=self.progress,
            progress_message=self.progress_message,
            error=self.error,
            images=[
                UploadedImageInfo(
                    index=i,
                    filename=image.filename,
                    mime_type=image.mime_type,
                    size=len(image.data)
                )
                for i, image in enumerate(self.images)
            ],
            user_instruction=self.user_instruction,
            counts=self.counts,
            total_assets=self.counts.total,
            brand_context=self.brand_context,
            assets=self.assets,
            ad_copy=self.ad_copy
        )


class SessionStore:
    def __init__(self):
        self._sessions: Dict[str, CampaignSession] = {}

    def create(self) -> CampaignSession:
        session = CampaignSession(str(uuid.uuid4()))
        self._sessions[session.id] = session
        logger.info(f"Created session {session.id}")
        return session

    def get(self, session_id: str) -> CampaignSession:
        session = self._sessions.get(session_id)
        if session is None:
            raise SessionNotFoundError(f"Session {session_id} not found")
        return session

    def delete(self, session_id: str):
        if self._sessions.pop(session_id, None) is None:
            raise SessionNotFoundError(f"Session {session_id} not found")


_store = SessionStore()


def get_session_store() -> SessionStore:
    return _store
