import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv


_ENV_PATH = Path(__file__).resolve().parents[1] / ".env"
load_dotenv(_ENV_PATH, override=False)

DEFAULT_UPLOAD_EXPIRATION_SEC = 600


def _get_env(name: str) -> str | None:
    value = os.getenv(name)
    if value is None:
        return None
    stripped = value.strip()
    return stripped or None


def get_cors_allow_origins() -> list[str]:
    raw = _get_env("CORS_ALLOW_ORIGINS") or "http://localhost:3000"
    return [origin.strip() for origin in raw.split(",") if origin.strip()]


def get_s3_bucket() -> str | None:
    return _get_env("S3_BUCKET")


def get_s3_region() -> str:
    return _get_env("S3_REGION") or "ap-northeast-2"


def get_s3_access_key_id() -> str | None:
    return _get_env("S3_ACCESS_KEY_ID")


def get_s3_secret_access_key() -> str | None:
    return _get_env("S3_SECRET_ACCESS_KEY")


def get_s3_endpoint_url() -> str | None:
    return _get_env("S3_ENDPOINT_URL")


def get_s3_upload_expiration_sec() -> int:
    """Return how long a signed upload form stays valid, in seconds."""
    raw = _get_env("S3_UPLOAD_EXPIRATION_SEC")
    if raw is None:
        return DEFAULT_UPLOAD_EXPIRATION_SEC
    try:
        value = int(raw)
    except ValueError as exc:
        raise ValueError(f"S3_UPLOAD_EXPIRATION_SEC must be an integer, got {raw!r}") from exc
    if value <= 0:
        raise ValueError("S3_UPLOAD_EXPIRATION_SEC must be positive")
    return value


@dataclass(frozen=True)
class S3UploadConfig:
    bucket: str | None
    access_key_id: str | None
    secret_access_key: str | None
    expiration_sec: int = DEFAULT_UPLOAD_EXPIRATION_SEC
    region: str = "ap-northeast-2"
    endpoint_url: str | None = None


def load_s3_upload_config() -> S3UploadConfig:
    """Snapshot the S3 upload settings from the environment.

    Missing credentials are kept as ``None``; the signing code decides
    whether that is fatal for a given call.
    """
    return S3UploadConfig(
        bucket=get_s3_bucket(),
        access_key_id=get_s3_access_key_id(),
        secret_access_key=get_s3_secret_access_key(),
        expiration_sec=get_s3_upload_expiration_sec(),
        region=get_s3_region(),
        endpoint_url=get_s3_endpoint_url(),
    )
