from app.services.s3_post_policy import (
    ConfigurationError,
    PresignedPostForm,
    S3UploadError,
    ValidationError,
    assemble_form_fields,
    build_policy,
    build_policy_conditions,
    build_policy_document,
    build_post_url,
    content_length_range_condition,
    decode_policy,
    encode_policy,
    format_expiration,
    generate_upload_form,
    sanitize_filename,
    sign_policy,
    starts_with_condition,
)

__all__ = [
    "S3UploadError",
    "ConfigurationError",
    "ValidationError",
    "PresignedPostForm",
    "build_policy_conditions",
    "build_policy_document",
    "build_policy",
    "encode_policy",
    "decode_policy",
    "format_expiration",
    "starts_with_condition",
    "content_length_range_condition",
    "sanitize_filename",
    "sign_policy",
    "assemble_form_fields",
    "build_post_url",
    "generate_upload_form",
]
