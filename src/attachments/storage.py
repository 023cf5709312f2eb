"""S3-compatible storage for attachment uploads."""

import mimetypes
import uuid
from dataclasses import dataclass

import boto3
from botocore.config import Config

from src.config.settings import get_settings


def build_object_key(content_type: str | None) -> str:
    """New UUID, suffixed with the extension registered for the content type."""
    key = str(uuid.uuid4())
    extension = mimetypes.guess_extension(content_type) if content_type else None
    return f"{key}{extension}" if extension else key


@dataclass
class AttachmentStorage:
    bucket: str
    region: str
    endpoint: str
    access_key_id: str
    secret_access_key: str
    expires_in: int = 3600

    def __post_init__(self):
        self._client = boto3.client(
            "s3",
            endpoint_url=self.endpoint,
            region_name=self.region,
            aws_access_key_id=self.access_key_id,
            aws_secret_access_key=self.secret_access_key,
            config=Config(signature_version="s3v4"),
        )

    def presign_upload(self, object_key: str, content_type: str | None = None) -> str:
        params = {"Bucket": self.bucket, "Key": object_key, "ACL": "public-read"}
        if content_type:
            params["ContentType"] = content_type
        return self._client.generate_presigned_url(
            ClientMethod="put_object",
            Params=params,
            ExpiresIn=self.expires_in,
        )


_storage: AttachmentStorage | None = None


def get_attachment_storage() -> AttachmentStorage:
    global _storage
    if _storage is None:
        settings = get_settings()
        _storage = AttachmentStorage(
            bucket=settings.ATTACHMENTS_BUCKET,
            region=settings.ATTACHMENTS_REGION,
            endpoint=settings.ATTACHMENTS_ENDPOINT,
            access_key_id=settings.ATTACHMENTS_ACCESS_KEY_ID,
            secret_access_key=settings.ATTACHMENTS_SECRET_ACCESS_KEY,
            expires_in=settings.ATTACHMENTS_URL_EXPIRE_SECONDS,
        )
    return _storage
