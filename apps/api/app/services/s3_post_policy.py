"""Browser-based S3 uploads via signed POST policies.

See https://docs.aws.amazon.com/AmazonS3/latest/API/sigv4-HTTPPOSTForms.html
for the policy document format. Signatures use the HMAC-SHA1 scheme of the
``AWSAccessKeyId``/``signature`` form fields.
"""

from __future__ import annotations

import base64
import hashlib
import hmac
import json
import re
from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta
from typing import Any

from app.config import S3UploadConfig

Condition = dict[str, str] | list[Any]

EXPIRATION_FORMAT = "%Y-%m-%dT%H:%M:%SZ"


class S3UploadError(ValueError):
    """Base class for errors raised while signing an upload form."""


class ConfigurationError(S3UploadError):
    pass


class ValidationError(S3UploadError):
    pass


@dataclass(frozen=True)
class PresignedPostForm:
    url: str
    bucket: str
    expiration: str
    fields: list[dict[str, str]] = field(default_factory=list)


def starts_with_condition(field_name: str, prefix: str) -> list[str]:
    name = field_name if field_name.startswith("$") else f"${field_name}"
    return ["starts-with", name, prefix]


def content_length_range_condition(min_bytes: int, max_bytes: int) -> list[Any]:
    if min_bytes < 0 or max_bytes < min_bytes:
        raise ValidationError(f"invalid content-length-range: {min_bytes}..{max_bytes}")
    return ["content-length-range", min_bytes, max_bytes]


def sanitize_filename(filename: str) -> str:
    cleaned = re.sub(r"[^a-zA-Z0-9._-]+", "-", filename).strip("-")
    return cleaned or "file"


def format_expiration(value: datetime) -> str:
    if value.tzinfo is None:
        value = value.replace(tzinfo=UTC)
    return value.astimezone(UTC).strftime(EXPIRATION_FORMAT)


def _strip_newlines(value: bytes) -> str:
    return value.decode("ascii").replace("\n", "")


def _copy_condition(condition: Condition) -> Condition:
    if isinstance(condition, dict):
        return {name: str(value) for name, value in condition.items()}
    return list(condition)


def _resolve_expiration_window(config: S3UploadConfig, expires_in_sec: int | None) -> int:
    window = config.expiration_sec if expires_in_sec is None else expires_in_sec
    if isinstance(window, bool) or not isinstance(window, int) or window <= 0:
        raise ValidationError(f"expiration window must be a positive number of seconds, got {window!r}")
    return window


def resolve_bucket(bucket: str | None, config: S3UploadConfig) -> str:
    resolved = bucket or config.bucket
    if not resolved:
        raise ConfigurationError("S3 bucket not defined: pass bucket or set S3_BUCKET")
    return resolved


def build_policy_conditions(
    *,
    key_prefix: str,
    bucket: str,
    acl: str,
    success_action_status: int,
    conditions: list[Condition] | None = None,
) -> list[Condition]:
    """Return caller conditions followed by the fixed form-field conditions.

    Every field the form submits with a literal value needs an exact-match
    entry. The ``$key`` prefix clause is only added for a non-empty prefix,
    which leaves the key unconstrained otherwise.
    """
    result: list[Condition] = [_copy_condition(item) for item in conditions or []]
    result += [
        {"acl": str(acl)},
        {"success_action_status": str(success_action_status)},
        {"bucket": str(bucket)},
    ]
    if key_prefix:
        result.append(starts_with_condition("key", key_prefix))
    return result


def build_policy_document(
    *,
    key_prefix: str,
    bucket: str,
    acl: str,
    success_action_status: int,
    expires_at: datetime,
    conditions: list[Condition] | None = None,
) -> dict[str, Any]:
    return {
        "expiration": format_expiration(expires_at),
        "conditions": build_policy_conditions(
            key_prefix=key_prefix,
            bucket=bucket,
            acl=acl,
            success_action_status=success_action_status,
            conditions=conditions,
        ),
    }


def encode_policy(document: dict[str, Any]) -> str:
    payload = json.dumps(document, separators=(",", ":"), ensure_ascii=False).encode("utf-8")
    return _strip_newlines(base64.b64encode(payload))


def build_policy(
    *,
    config: S3UploadConfig,
    key_prefix: str = "",
    bucket: str | None = None,
    acl: str = "private",
    success_action_status: int = 201,
    conditions: list[Condition] | None = None,
    expires_in_sec: int | None = None,
    now: datetime | None = None,
) -> str:
    """Return the base64 policy a client submits as the ``policy`` field."""
    resolved_bucket = resolve_bucket(bucket, config)
    window = _resolve_expiration_window(config, expires_in_sec)

    issued_at = now or datetime.now(UTC)
    document = build_policy_document(
        key_prefix=key_prefix,
        bucket=resolved_bucket,
        acl=acl,
        success_action_status=success_action_status,
        expires_at=issued_at + timedelta(seconds=window),
        conditions=conditions,
    )
    return encode_policy(document)


def decode_policy(encoded_policy: str) -> dict[str, Any]:
    return json.loads(base64.b64decode(encoded_policy, validate=True).decode("utf-8"))


def sign_policy(encoded_policy: str, secret_key: str | None) -> str:
    if not secret_key:
        raise ConfigurationError("S3 secret access key not defined: set S3_SECRET_ACCESS_KEY")
    digest = hmac.new(
        secret_key.encode("utf-8"),
        encoded_policy.encode("utf-8"),
        hashlib.sha1,
    ).digest()
    return _strip_newlines(base64.b64encode(digest))


def assemble_form_fields(
    *,
    key: str,
    access_key_id: str | None,
    acl: str,
    encoded_policy: str,
    encoded_signature: str,
    success_action_status: int,
    content_type: str | None = None,
) -> list[dict[str, str]]:
    if not access_key_id:
        raise ConfigurationError("S3 access key id not defined: set S3_ACCESS_KEY_ID")
    required = {
        "key": key,
        "acl": acl,
        "policy": encoded_policy,
        "signature": encoded_signature,
    }
    missing = [name for name, value in required.items() if not value]
    if missing:
        raise ValidationError(f"missing upload form values: {', '.join(missing)}")

    fields = [
        {"name": "key", "value": key},
        {"name": "AWSAccessKeyId", "value": access_key_id},
        {"name": "acl", "value": acl},
        {"name": "policy", "value": encoded_policy},
        {"name": "signature", "value": encoded_signature},
        {"name": "success_action_status", "value": str(success_action_status)},
    ]
    if content_type:
        fields.append({"name": "Content-Type", "value": content_type})
    return fields


def build_post_url(*, bucket: str, region: str, endpoint_url: str | None = None) -> str:
    if endpoint_url:
        return f"{endpoint_url.rstrip('/')}/{bucket}"
    return f"https://{bucket}.s3.{region}.amazonaws.com"


def generate_upload_form(
    *,
    config: S3UploadConfig,
    key: str,
    key_prefix: str = "",
    bucket: str | None = None,
    acl: str = "private",
    success_action_status: int = 201,
    content_type: str | None = None,
    conditions: list[Condition] | None = None,
    expires_in_sec: int | None = None,
    now: datetime | None = None,
) -> PresignedPostForm:
    """Build, sign and package everything a browser needs for one upload."""
    resolved_bucket = resolve_bucket(bucket, config)
    if not config.access_key_id:
        raise ConfigurationError("S3 access key id not defined: set S3_ACCESS_KEY_ID")
    if not config.secret_access_key:
        raise ConfigurationError("S3 secret access key not defined: set S3_SECRET_ACCESS_KEY")
    if key_prefix and key and not key.startswith(key_prefix):
        raise ValidationError(f"key {key!r} does not start with prefix {key_prefix!r}")

    policy_conditions: list[Condition] = list(conditions or [])
    if content_type:
        policy_conditions.append({"Content-Type": content_type})

    issued_at = now or datetime.now(UTC)
    expires_at = issued_at + timedelta(seconds=_resolve_expiration_window(config, expires_in_sec))
    encoded_policy = build_policy(
        config=config,
        key_prefix=key_prefix,
        bucket=resolved_bucket,
        acl=acl,
        success_action_status=success_action_status,
        conditions=policy_conditions,
        expires_in_sec=expires_in_sec,
        now=issued_at,
    )
    signature = sign_policy(encoded_policy, config.secret_access_key)
    fields = assemble_form_fields(
        key=key,
        access_key_id=config.access_key_id,
        acl=acl,
        encoded_policy=encoded_policy,
        encoded_signature=signature,
        success_action_status=success_action_status,
        content_type=content_type,
    )
    return PresignedPostForm(
        url=build_post_url(bucket=resolved_bucket, region=config.region, endpoint_url=config.endpoint_url),
        bucket=resolved_bucket,
        expiration=format_expiration(expires_at),
        fields=fields,
    )
