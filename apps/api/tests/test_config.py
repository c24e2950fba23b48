import pytest

from app import config


def test_get_s3_bucket_treats_blank_value_as_unset(monkeypatch):
    monkeypatch.setenv("S3_BUCKET", "   ")

    assert config.get_s3_bucket() is None


def test_get_s3_upload_expiration_sec_defaults_when_unset(monkeypatch):
    monkeypatch.delenv("S3_UPLOAD_EXPIRATION_SEC", raising=False)

    assert config.get_s3_upload_expiration_sec() == config.DEFAULT_UPLOAD_EXPIRATION_SEC


def test_get_s3_upload_expiration_sec_rejects_non_integer(monkeypatch):
    monkeypatch.setenv("S3_UPLOAD_EXPIRATION_SEC", "ten minutes")

    with pytest.raises(ValueError):
        config.get_s3_upload_expiration_sec()


def test_get_cors_allow_origins_splits_comma_separated_list(monkeypatch):
    monkeypatch.setenv("CORS_ALLOW_ORIGINS", "https://a.example.com, https://b.example.com,")

    assert config.get_cors_allow_origins() == ["https://a.example.com", "https://b.example.com"]


def test_load_s3_upload_config_reads_environment(monkeypatch):
    monkeypatch.setenv("S3_BUCKET", "uploads-bucket")
    monkeypatch.setenv("S3_ACCESS_KEY_ID", "AKIDEXAMPLE")
    monkeypatch.setenv("S3_SECRET_ACCESS_KEY", "secret")
    monkeypatch.setenv("S3_UPLOAD_EXPIRATION_SEC", "900")
    monkeypatch.delenv("S3_REGION", raising=False)
    monkeypatch.delenv("S3_ENDPOINT_URL", raising=False)

    loaded = config.load_s3_upload_config()

    assert loaded == config.S3UploadConfig(
        bucket="uploads-bucket",
        access_key_id="AKIDEXAMPLE",
        secret_access_key="secret",
        expiration_sec=900,
        region="ap-northeast-2",
        endpoint_url=None,
    )
