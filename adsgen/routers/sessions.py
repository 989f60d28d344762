from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException
from adsgen.schemas import SessionResponse, UploadImagesRequest, UpdateSettingsRequest
from adsgen.services.campaign import CampaignService
from adsgen.services.session import (
    CampaignSession, SessionBusyError, SessionError, SessionNotFoundError, SessionStore, get_session_store
)
from adsgen.logging_config import setup_logger

logger = setup_logger(__name__)
router = APIRouter()

def get_campaign_service() -> CampaignService:
    return CampaignService()

def _get_session(store: SessionStore, session_id: str) -> CampaignSession:
    try:
        return store.get(session_id)
    except SessionNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))

@router.post("", response_model=SessionResponse, status_code=201)
async def create_session(store: SessionStore = Depends(get_session_store)):
    """Start a new campaign session"""
    return store.create().to_response()

@router.get("/{session_id}", response_model=SessionResponse)
async def get_session(session_id: str, store: SessionStore = Depends(get_session_store)):
    """Current phase, progress and results of a session"""
    return _get_session(store, session_id).to_response()

@router.delete("/{session_id}")
async def delete_session(session_id: str, store: SessionStore = Depends(get_session_store)):
    try:
        store.delete(session_id)
    except SessionNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return {"message": "Session deleted"}

@router.post("/{session_id}/images", response_model=SessionResponse)
async def add_images(
    session_id: str,
    request: UploadImagesRequest,
    store: SessionStore = Depends(get_session_store)
):
    """Upload one or more base64 / data-URL images; non-images are dropped"""
    session = _get_session(store, session_id)
    try:
        session.add_images(request.images)
    except SessionBusyError as e:
        raise HTTPException(status_code=409, detail=str(e))
    except SessionError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return session.to_response()

@router.delete("/{session_id}/images/{index}", response_model=SessionResponse)
async def remove_image(
    session_id: str,
    index: int,
    store: SessionStore = Depends(get_session_store)
):
    session = _get_session(store, session_id)
    try:
        session.remove_image(index)
    except SessionBusyError as e:
        raise HTTPException(status_code=409, detail=str(e))
    except SessionError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return session.to_response()

@router.put("/{session_id}/settings", response_model=SessionResponse)
async def update_settings(
    session_id: str,
    request: UpdateSettingsRequest,
    store: SessionStore = Depends(get_session_store)
):
    """Set asset counts per aspect ratio and the optional custom instruction"""
    session = _get_session(store, session_id)
    try:
        session.update_settings(request.user_instruction, request.counts)
    except SessionError as e:
        raise HTTPException(status_code=409, detail=str(e))
    return session.to_response()

@router.post("/{session_id}/generate", response_model=SessionResponse, status_code=202)
async def generate(
    session_id: str,
    background_tasks: BackgroundTasks,
    store: SessionStore = Depends(get_session_store),
    service: CampaignService = Depends(get_campaign_service)
):
    """Kick off the campaign run; poll GET /sessions/{id} for progress"""
    session = _get_session(store, session_id)
    try:
        session.begin()
    except SessionBusyError as e:
        raise HTTPException(status_code=409, detail=str(e))
    except SessionError as e:
        raise HTTPException(status_code=400, detail=str(e))

    logger.info(f"Session {session_id}: generating {session.counts.total} assets")
    background_tasks.add_task(service.run, session)
    return session.to_response()

@router.post("/{session_id}/reset", response_model=SessionResponse)
async def reset_session(session_id: str, store: SessionStore = Depends(get_session_store)):
    """Start over: clear uploads, instruction and results"""
    session = _get_session(store, session_id)
    try:
        session.reset()
    except SessionBusyError as e:
        raise HTTPException(status_code=409, detail=str(e))
    return session.to_response()
