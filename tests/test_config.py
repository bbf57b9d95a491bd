"""Tests for configuration loading, validation and client wiring."""

import json
import logging
from unittest.mock import patch

import pytest
from pydantic import ValidationError
from pythonjsonlogger.json import JsonFormatter

from s3_client import (
    BucketDoesNotExistError,
    ClientConfig,
    EmptyAccessKeyError,
    EmptyAccessSecretError,
    EmptyBucketNameError,
    EmptyHostError,
    IntegrityConfig,
    MinioConfig,
    create_client,
    load_config,
    setup_logging,
)
from s3_client.minio import get_minio_client


def minio_config(**overrides):
    values = {
        "endpoint": "localhost:9000",
        "user": "admin",
        "password": "password",
        "bucket_name": "test-bucket",
    }
    values.update(overrides)
    return MinioConfig(**values)


class TestMinioConfig:
    @pytest.mark.parametrize(
        "field, error",
        [
            ("endpoint", EmptyHostError),
            ("user", EmptyAccessKeyError),
            ("password", EmptyAccessSecretError),
            ("bucket_name", EmptyBucketNameError),
        ],
    )
    def test_missing_details(self, field, error):
        with pytest.raises(error):
            minio_config(**{field: ""}).validate_details()

    def test_complete_details(self):
        minio_config().validate_details()

    def test_config_is_frozen(self):
        config = minio_config()

        with pytest.raises(ValidationError):
            config.endpoint = "other:9000"


class TestLoadConfig:
    def test_defaults(self, monkeypatch):
        for name in (
            "MINIO_ENDPOINT",
            "MINIO_SECURE",
            "S3_USE_CRC32C",
            "S3_USE_MD5",
            "S3_HEALTH_CHECK_INTERVAL",
            "S3_MAX_WORKERS",
        ):
            monkeypatch.delenv(name, raising=False)

        config = load_config()

        assert config.minio.endpoint == "minio:9000"
        assert config.minio.secure is False
        assert config.integrity == IntegrityConfig(use_crc32c=True, use_md5=False)
        assert config.health_check_interval is None
        assert config.max_workers is None

    def test_from_environment(self, monkeypatch):
        monkeypatch.setenv("MINIO_ENDPOINT", "s3.local:9000")
        monkeypatch.setenv("MINIO_USER", "admin")
        monkeypatch.setenv("MINIO_PASSWORD", "secret")
        monkeypatch.setenv("MINIO_BUCKET", "documents")
        monkeypatch.setenv("MINIO_SECURE", "true")
        monkeypatch.setenv("S3_USE_CRC32C", "false")
        monkeypatch.setenv("S3_USE_MD5", "1")
        monkeypatch.setenv("S3_HEALTH_CHECK_INTERVAL", "2.5")
        monkeypatch.setenv("S3_MAX_WORKERS", "8")

        config = load_config()

        assert config.minio == MinioConfig(
            endpoint="s3.local:9000",
            user="admin",
            password="secret",
            bucket_name="documents",
            secure=True,
        )
        assert config.integrity == IntegrityConfig(use_crc32c=False, use_md5=True)
        assert config.health_check_interval == 2.5
        assert config.max_workers == 8

    def test_invalid_max_workers(self):
        with pytest.raises(ValidationError):
            ClientConfig(minio=minio_config(), max_workers=0)


class TestClientWiring:
    def test_get_minio_client_validates_first(self):
        with pytest.raises(EmptyHostError):
            get_minio_client(minio_config(endpoint=""))

    @patch("s3_client.minio.Minio")
    def test_create_client(self, minio_cls):
        minio_cls.return_value.bucket_exists.return_value = True

        client = create_client(
            ClientConfig(
                minio=minio_config(), integrity=IntegrityConfig(use_md5=True)
            )
        )

        minio_cls.assert_called_once_with(
            endpoint="localhost:9000",
            access_key="admin",
            secret_key="password",
            secure=False,
        )
        assert client.bucket_name == "test-bucket"
        assert client.integrity_config.use_md5
        client.close()

    @patch("s3_client.minio.Minio")
    def test_create_client_missing_bucket(self, minio_cls):
        minio_cls.return_value.bucket_exists.return_value = False

        with pytest.raises(BucketDoesNotExistError):
            create_client(ClientConfig(minio=minio_config()))


class TestSetupLogging:
    def test_json_output(self, capsys):
        root = logging.getLogger()
        previous_handlers, previous_level = root.handlers[:], root.level
        try:
            logger = setup_logging()
            logging.getLogger("s3_client.test").info(
                "File uploaded", extra={"object_name": "folder/a"}
            )
            assert logger is root
            assert isinstance(root.handlers[0].formatter, JsonFormatter)
        finally:
            root.handlers = previous_handlers
            root.setLevel(previous_level)

        line = capsys.readouterr().out.strip().splitlines()[-1]
        record = json.loads(line)
        assert record["message"] == "File uploaded"
        assert record["object_name"] == "folder/a"
        assert record["levelname"] == "INFO"
