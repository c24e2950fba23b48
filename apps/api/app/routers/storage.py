import logging

from fastapi import APIRouter, HTTPException, status

from app.config import load_s3_upload_config
from app.schemas.storage import S3FormField, S3PresignPostRequest, S3PresignPostResponse
from app.services.s3_post_policy import (
    ConfigurationError,
    ValidationError,
    content_length_range_condition,
    generate_upload_form,
    sanitize_filename,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/storage", tags=["storage"])

_FILENAME_PLACEHOLDER = "${filename}"


def _resolve_object_key(key_prefix: str, filename: str | None) -> str:
    # S3 replaces ${filename} with the name of the uploaded file.
    if filename:
        return f"{key_prefix}{sanitize_filename(filename)}"
    return f"{key_prefix}{_FILENAME_PLACEHOLDER}"


@router.post("/s3/presign-post", response_model=S3PresignPostResponse)
def presign_s3_post(payload: S3PresignPostRequest) -> S3PresignPostResponse:
    conditions = []
    if payload.max_size_bytes is not None:
        conditions.append(content_length_range_condition(0, payload.max_size_bytes))

    try:
        config = load_s3_upload_config()
        form = generate_upload_form(
            config=config,
            key=_resolve_object_key(payload.key_prefix, payload.filename),
            key_prefix=payload.key_prefix,
            acl=payload.acl,
            success_action_status=payload.success_action_status,
            content_type=payload.content_type,
            conditions=conditions,
            expires_in_sec=payload.expires_in_sec,
        )
    except ConfigurationError as exc:
        logger.error("S3 upload signing is misconfigured: %s", exc)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=str(exc),
        ) from exc
    except ValidationError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(exc),
        ) from exc

    return S3PresignPostResponse(
        url=form.url,
        bucket=form.bucket,
        expiration=form.expiration,
        fields=[S3FormField(**item) for item in form.fields],
    )
