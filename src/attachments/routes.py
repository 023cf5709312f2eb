"""Attachment upload URLs."""

import logging

from fastapi import APIRouter, Depends, Query

from src.attachments.storage import AttachmentStorage, build_object_key, get_attachment_storage
from src.auth.dependencies import get_current_identity
from src.utils.validators import CamelModel

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/attachments", tags=["Attachments"], dependencies=[Depends(get_current_identity)])


class PresignedUrlResponse(CamelModel):
    object_key: str
    url: str


@router.get("/presigned", response_model=PresignedUrlResponse, summary="Get a presigned upload URL", description="Returns a public-read PUT URL for a new object key.")
def presigned(content_type: str | None = Query(default=None, alias="contentType"), storage: AttachmentStorage = Depends(get_attachment_storage)):
    object_key = build_object_key(content_type)
    url = storage.presign_upload(object_key, content_type)
    logger.debug("Issued upload URL for %s", object_key)
    return {"object_key": object_key, "url": url}
