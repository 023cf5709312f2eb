"""Conversation metadata endpoints."""

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from src.auth.dependencies import CurrentIdentity, get_current_identity
from src.db.client import get_db
from src.metadata import service
from src.metadata.schemas import MetadataResponse, UpsertMetadataRequest

router = APIRouter(prefix="/api/v1/metadata", tags=["Metadata"])


@router.get("/conversation/{device_identity_id}/{conversation_id}", response_model=MetadataResponse, summary="Get conversation metadata", description="Returns the stored flags, creating a default row on first access.")
def get_one(device_identity_id: str, conversation_id: str, db: Session = Depends(get_db), caller: CurrentIdentity = Depends(get_current_identity)):
    return service.get_conversation_metadata(db, caller, device_identity_id, conversation_id)


@router.get("/conversations/{device_identity_id}", response_model=list[MetadataResponse], summary="Get metadata for many conversations")
def get_many(
    device_identity_id: str,
    conversation_ids: str = Query(alias="conversationIds", description="Comma-separated conversation ids"),
    db: Session = Depends(get_db),
    caller: CurrentIdentity = Depends(get_current_identity),
):
    ids = [conversation_id.strip() for conversation_id in conversation_ids.split(",") if conversation_id.strip()]
    if not ids:
        raise HTTPException(status_code=400, detail="conversationIds is required")
    return service.get_conversations_metadata(db, caller, device_identity_id, ids)


@router.post("/conversation", status_code=201, response_model=MetadataResponse, summary="Create or update conversation metadata")
def upsert(body: UpsertMetadataRequest, db: Session = Depends(get_db), caller: CurrentIdentity = Depends(get_current_identity)):
    return service.upsert_conversation_metadata(db, caller, body.model_dump())
