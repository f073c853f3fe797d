"""Signed delivery of objects held by the filesystem storage backend."""

from __future__ import annotations

import logging

from fastapi import APIRouter, HTTPException, Query, Request, status
from fastapi.responses import FileResponse

from ..api.errors import error_detail
from ..ingest.ingest_errors import PublishError
from ..ingest.ingest_models import FailureReason
from .object_store import LocalObjectStore

router = APIRouter(tags=["storage"])
logger = logging.getLogger(__name__)


def get_local_store(request: Request) -> LocalObjectStore:
    store = getattr(request.app.state, "object_store", None)
    if not isinstance(store, LocalObjectStore):  # pragma: no cover - route mounted only for local
        raise RuntimeError("LocalObjectStore is not configured")
    return store


@router.get("/storage/{key:path}")
def serve_object(
    key: str,
    request: Request,
    expires: int = Query(...),
    signature: str = Query(...),
) -> FileResponse:
    store = get_local_store(request)
    if not store.verify(key, expires, signature):
        logger.warning("storage.local.signature_rejected", extra={"key": key})
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=error_detail(FailureReason.FORBIDDEN, "Invalid or expired signature"),
        )
    try:
        path = store.path_for(key)
    except PublishError as exc:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=error_detail(FailureReason.FORBIDDEN, str(exc)),
        ) from exc
    if not path.is_file():
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=error_detail(FailureReason.NOT_FOUND, "Object not found"),
        )
    return FileResponse(path)
