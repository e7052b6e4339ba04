"""API routes for schedcast."""

import logging
from typing import Optional

from fastapi import APIRouter, HTTPException
from fastapi.responses import HTMLResponse
from pydantic import BaseModel

from ..broadcast import HookResult, PublishOptions, PublishResult
from ..config import settings
from ..errors import AuthError, BroadcastError, CaptureError, StoreError
from ..table import EditorState, InlineSourceProvider, SourceDocument

logger = logging.getLogger(__name__)

router = APIRouter()


def get_service():
    """Get the global broadcast service instance."""
    from .app import get_service as _get_service

    return _get_service()


class PublishRequest(BaseModel):
    """Request to publish the schedule."""

    title: Optional[str] = None
    auto_update: Optional[bool] = None
    document: Optional[SourceDocument] = None  # Posted table; overrides the configured source
    state: Optional[EditorState] = None


class RefreshRequest(BaseModel):
    """Request to re-publish now."""

    document: Optional[SourceDocument] = None
    state: Optional[EditorState] = None


class AutoPublishSetting(BaseModel):
    """Auto-publish toggle."""

    enabled: bool


class BroadcastInfo(BaseModel):
    """Public metadata of a broadcast."""

    code: str
    url: str
    title: str
    auto_update: bool
    updated_at: str


def _source_for(document: Optional[SourceDocument], state: Optional[EditorState]):
    if document is None:
        return None
    return InlineSourceProvider(document, state)


def _raise_http(e: BroadcastError):
    if isinstance(e, AuthError):
        raise HTTPException(status_code=401, detail=str(e))
    if isinstance(e, CaptureError):
        raise HTTPException(status_code=422, detail=str(e))
    if isinstance(e, StoreError):
        raise HTTPException(status_code=502, detail=str(e))
    raise HTTPException(status_code=500, detail=str(e))


# Health check


@router.get("/health")
async def health_check():
    """Health check endpoint with non-secret configuration."""
    config = {
        "viewer_base_url": settings.viewer_base_url,
        "blob_backend": settings.blob_backend,
        "storage_bucket": settings.storage_bucket,
        "user_configured": bool(settings.broadcast_user_id),
        "supabase_key_present": bool(settings.supabase_key),
        "source_configured": settings.source_path is not None,
    }

    return {
        "status": "ok",
        "service": "schedcast",
        "config": config,
    }


# Publishing endpoints


@router.post("/broadcast/publish", response_model=PublishResult)
async def publish(request: PublishRequest):
    """Publish the schedule and return its share code and URL."""
    service = get_service()
    options = PublishOptions(title=request.title, auto_update=request.auto_update)
    try:
        return await service.publish(options, source=_source_for(request.document, request.state))
    except BroadcastError as e:
        logger.error(f"Publish failed ({e.kind}): {e}")
        _raise_http(e)


@router.post("/broadcast/refresh", response_model=PublishResult)
async def refresh(request: Optional[RefreshRequest] = None):
    """Re-publish the schedule now."""
    service = get_service()
    request = request or RefreshRequest()
    try:
        return await service.refresh(source=_source_for(request.document, request.state))
    except BroadcastError as e:
        logger.error(f"Refresh failed ({e.kind}): {e}")
        _raise_http(e)


@router.get("/broadcast/auto", response_model=AutoPublishSetting)
async def get_auto_publish():
    """Get the auto-publish toggle."""
    service = get_service()
    return AutoPublishSetting(enabled=service.is_auto_publish_enabled())


@router.put("/broadcast/auto", response_model=AutoPublishSetting)
async def set_auto_publish(request: AutoPublishSetting):
    """Turn auto-publish on or off."""
    service = get_service()
    try:
        await service.set_auto_publish_enabled(request.enabled)
    except StoreError as e:
        raise HTTPException(status_code=502, detail=str(e))
    return AutoPublishSetting(enabled=service.is_auto_publish_enabled())


@router.post("/broadcast/hook/save", response_model=HookResult)
async def on_save():
    """Notify that the schedule was saved; auto-publishes if enabled."""
    service = get_service()
    return await service.on_save_hook()


# Viewer endpoints


@router.get("/broadcast/{code}", response_model=BroadcastInfo)
async def get_broadcast(code: str):
    """Look up a broadcast by its share code."""
    service = get_service()
    try:
        found = await service.lookup(code)
    except StoreError as e:
        raise HTTPException(status_code=502, detail=str(e))
    if found is None:
        raise HTTPException(status_code=404, detail="Broadcast not found")

    record, _ = found
    return BroadcastInfo(
        code=record.code,
        url=service.url_for(record.code),
        title=record.title,
        auto_update=record.auto_update,
        updated_at=record.updated_at.isoformat(),
    )


@router.get("/broadcast/{code}/snapshot", response_class=HTMLResponse)
async def get_snapshot(code: str):
    """Return the published snapshot HTML for a share code."""
    service = get_service()
    try:
        found = await service.lookup(code)
    except StoreError as e:
        raise HTTPException(status_code=502, detail=str(e))
    if found is None or found[1] is None:
        raise HTTPException(status_code=404, detail="Broadcast not found")

    return HTMLResponse(content=found[1], headers={"Cache-Control": f"max-age={settings.cache_control}"})
