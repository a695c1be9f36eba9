"""Tests for image storage helpers and input sanitisation."""

from __future__ import annotations

import pytest
from botocore.exceptions import ClientError
from fastapi import HTTPException

from callcenter import config, storage
from callcenter.security_utils import sanitize_filename, sanitize_text
from callcenter.shared.validators import validate_time_of_day


class MissingBucketClient:
    def put_object(self, **kwargs):
        raise ClientError({"Error": {"Code": "NoSuchBucket", "Message": "missing"}}, "PutObject")

    def delete_object(self, **kwargs):
        raise ClientError({"Error": {"Code": "AccessDenied", "Message": "denied"}}, "DeleteObject")


class TestUrls:
    def test_public_url_uses_public_domain(self, monkeypatch):
        monkeypatch.setattr(config, "R2_PUBLIC_URL", "https://cdn.example.com/")
        assert storage.public_url("abc.png") == "https://cdn.example.com/abc.png"

    def test_public_url_falls_back_to_endpoint(self, monkeypatch):
        monkeypatch.setattr(config, "R2_PUBLIC_URL", "")
        monkeypatch.setattr(config, "R2_ENDPOINT_URL", "http://localhost:9000")
        monkeypatch.setattr(config, "R2_BUCKET_NAME", "question-images")
        assert storage.public_url("abc.png") == "http://localhost:9000/question-images/abc.png"

    @pytest.mark.parametrize(
        "url,key",
        [
            ("https://cdn.example.com/abc.png", "abc.png"),
            ("https://cdn.example.com/abc.png?v=2", "abc.png"),
            ("https://cdn.example.com/", None),
            ("", None),
            (None, None),
        ],
    )
    def test_key_from_url(self, url, key):
        assert storage.key_from_url(url) == key


class TestUpload:
    def test_extension_from_content_type_when_name_has_none(self, fake_storage):
        url = storage.upload_image(b"data", "photo", "image/webp")
        assert url.endswith(".webp")

    def test_missing_bucket_is_503(self, monkeypatch):
        monkeypatch.setattr(storage, "get_r2_client", lambda: MissingBucketClient())
        monkeypatch.setattr(config, "R2_BUCKET_NAME", "question-images")
        with pytest.raises(HTTPException) as exc_info:
            storage.upload_image(b"data", "photo.png", "image/png")
        assert exc_info.value.status_code == 503
        assert '"question-images" bucket' in exc_info.value.detail

    def test_other_storage_errors_are_500(self, monkeypatch):
        monkeypatch.setattr(storage, "get_r2_client", lambda: MissingBucketClient())
        with pytest.raises(HTTPException) as exc_info:
            storage.remove_objects(["abc.png"])
        assert exc_info.value.status_code == 500
        assert exc_info.value.detail == "Image removal failed"

    def test_discard_logs_and_skips_failures(self, monkeypatch, fake_storage):
        fake_storage.fail_deletes = True
        assert storage.discard_objects(["a.png", "b.png"]) == 0

        fake_storage.fail_deletes = False
        assert storage.discard_objects(["a.png", None]) == 1
        assert fake_storage.deleted == ["a.png"]

    def test_remove_nothing_skips_client(self, monkeypatch):
        def _explode():
            raise AssertionError("client should not be created")

        monkeypatch.setattr(storage, "get_r2_client", _explode)
        assert storage.remove_objects([None, ""]) == 0


class TestSanitize:
    def test_strips_tags(self):
        assert sanitize_text("  <i>Hello</i> ") == "Hello"

    def test_none_is_empty(self):
        assert sanitize_text(None) == ""

    def test_too_long(self):
        with pytest.raises(ValueError):
            sanitize_text("x" * 11, max_length=10)

    def test_filename_drops_path(self):
        assert sanitize_filename("../../etc/passwd.png") == "passwd.png"
        assert sanitize_filename("...") == "upload"


class TestValidators:
    @pytest.mark.parametrize("value", ["00:00", "09:30", "23:59", "", None, " 08:15 "])
    def test_valid_times(self, value):
        assert validate_time_of_day(value) == (value or "").strip()

    @pytest.mark.parametrize("value", ["9:30", "24:00", "12:5", "ab:cd", 930])
    def test_invalid_times(self, value):
        with pytest.raises(ValueError):
            validate_time_of_day(value)

