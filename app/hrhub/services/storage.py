from __future__ import annotations

import logging
import re
import uuid
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from pathlib import PurePosixPath
from urllib.parse import urlparse

import boto3
from botocore.client import Config
from botocore.exceptions import BotoCoreError, ClientError

from app.hrhub.core.config import settings
from app.hrhub.core.error_catalog import bad_request, forbidden, service_unavailable

logger = logging.getLogger("hrhub.storage")

_SAFE_SEGMENT = re.compile(r"[^A-Za-z0-9._-]+")


@dataclass(frozen=True)
class PresignedUrl:
    url: str
    key: str
    method: str
    expires_in: int


def company_prefix(company_id) -> str:
    return f"companies/{company_id}/"


def _safe_segment(value: str) -> str:
    cleaned = _SAFE_SEGMENT.sub("-", value.strip()).strip("-.")
    return cleaned or "file"


def build_object_key(company_id, folder: str, filename: str) -> str:
    name = PurePosixPath(filename).name
    return f"{company_prefix(company_id)}{_safe_segment(folder)}/{uuid.uuid4().hex}-{_safe_segment(name)}"


class StorageService:
    """Presigned URL issuer; object bytes never pass through the API."""

    def __init__(self, client=None) -> None:
        self._access_key = settings.S3_ACCESS_KEY_ID
        self._secret_key = settings.S3_SECRET_ACCESS_KEY
        self._bucket = settings.S3_BUCKET
        self._region = settings.S3_REGION
        self._endpoint = settings.S3_ENDPOINT
        self._expires_in = settings.S3_PRESIGN_EXPIRES_SEC
        self._client = client

    def _validate_settings(self) -> None:
        required = {
            "S3_ACCESS_KEY_ID": self._access_key,
            "S3_SECRET_ACCESS_KEY": self._secret_key,
            "S3_BUCKET": self._bucket,
        }
        missing = [name for name, value in required.items() if not value]
        if missing:
            logger.warning("storage_not_configured", extra={"missing": missing})
            raise service_unavailable("Object storage is not configured")

    def _normalized_endpoint_url(self) -> str | None:
        endpoint = (self._endpoint or "").strip()
        if not endpoint:
            return None
        parsed = urlparse(endpoint)
        if parsed.scheme:
            return f"{parsed.scheme}://{parsed.netloc}{parsed.path}".rstrip("/")
        return f"https://{endpoint.lstrip('/')}".rstrip("/")

    def _get_client(self):
        if self._client is None:
            self._validate_settings()
            self._client = boto3.client(
                "s3",
                region_name=self._region,
                endpoint_url=self._normalized_endpoint_url(),
                aws_access_key_id=self._access_key,
                aws_secret_access_key=self._secret_key,
                config=Config(signature_version="s3v4"),
            )
        return self._client

    def _presign(self, operation: str, params: dict, *, trace_id: str | None) -> str:
        client = self._get_client()
        try:
            return client.generate_presigned_url(operation, Params=params, ExpiresIn=self._expires_in)
        except (ClientError, BotoCoreError) as exc:
            logger.exception(
                "storage_presign_error",
                extra={"operation": operation, "key": params.get("Key"), "trace_id": trace_id},
            )
            raise service_unavailable("Object storage is unavailable") from exc

    def presign_upload(
        self,
        *,
        company_id,
        folder: str,
        filename: str,
        content_type: str,
        trace_id: str | None = None,
    ) -> PresignedUrl:
        key = build_object_key(company_id, folder, filename)
        url = self._presign(
            "put_object",
            {"Bucket": self._bucket, "Key": key, "ContentType": content_type},
            trace_id=trace_id,
        )
        return PresignedUrl(url=url, key=key, method="PUT", expires_in=self._expires_in)

    def presign_download(self, *, key: str, allowed_company_id=None, trace_id: str | None = None) -> PresignedUrl:
        if ".." in key.split("/") or not key.startswith("companies/"):
            raise bad_request("Invalid object key")
        if allowed_company_id is not None and not key.startswith(company_prefix(allowed_company_id)):
            raise forbidden("Object belongs to another company")
        url = self._presign("get_object", {"Bucket": self._bucket, "Key": key}, trace_id=trace_id)
        return PresignedUrl(url=url, key=key, method="GET", expires_in=self._expires_in)


def expires_at(presigned: PresignedUrl) -> datetime:
    return datetime.now(timezone.utc).replace(microsecond=0) + timedelta(seconds=presigned.expires_in)
