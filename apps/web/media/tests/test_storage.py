"""Tests for menu image storage."""

import re

from django.core.files.storage import default_storage
from django.core.files.uploadedfile import SimpleUploadedFile

import pytest

from apps.web.core.auth import Caller
from apps.web.core.exceptions import AccessDenied, NotFound, ValidationFailed
from apps.web.media import storage

PNG = b"\x89PNG\r\n\x1a\n" + b"\x00" * 32


@pytest.fixture(autouse=True)
def media_root(settings, tmp_path):
    settings.MEDIA_ROOT = str(tmp_path)
    settings.MEDIA_URL = "/media/"
    return tmp_path


def _png(name: str = "photo.png") -> SimpleUploadedFile:
    return SimpleUploadedFile(name, PNG, content_type="image/png")


class TestValidateImage:
    """Bucket limits on uploads."""

    def test_accepts_allowed_types(self) -> None:
        for content_type in ["image/jpeg", "image/png", "image/webp", "image/gif"]:
            storage.validate_image(SimpleUploadedFile("a", PNG, content_type=content_type))

    def test_rejects_other_types(self) -> None:
        upload = SimpleUploadedFile("notes.pdf", b"%PDF", content_type="application/pdf")

        with pytest.raises(ValidationFailed, match="Please upload an image file"):
            storage.validate_image(upload)

    def test_rejects_oversized(self, settings) -> None:
        settings.MENU_IMAGE_MAX_BYTES = 16

        with pytest.raises(ValidationFailed, match="too large"):
            storage.validate_image(_png())

    def test_default_limit_is_five_mib(self, settings) -> None:
        assert settings.MENU_IMAGE_MAX_BYTES == 5242880


class TestUploadImage:
    """Tests for upload_image."""

    def test_anonymous_denied(self) -> None:
        with pytest.raises(AccessDenied):
            storage.upload_image(Caller.anonymous(), _png())

    def test_any_authenticated_caller_uploads(self, media_root) -> None:
        stored = storage.upload_image(Caller(user_id=42), _png(), field="logo_url")

        assert re.fullmatch(r"menu-images/logo_url-[0-9a-f]{12}-\d{13}\.png", stored.name)
        assert stored.url == f"/media/{stored.name}"
        assert (media_root / stored.name).read_bytes() == PNG

    def test_extension_follows_content_type(self) -> None:
        upload = SimpleUploadedFile("photo.png", PNG, content_type="image/jpeg")

        stored = storage.upload_image(Caller(user_id=1), upload)

        assert stored.name.endswith(".jpg")

    def test_unknown_field_rejected(self) -> None:
        with pytest.raises(ValidationFailed):
            storage.upload_image(Caller(user_id=1), _png(), field="avatar")

    def test_names_do_not_collide(self) -> None:
        first = storage.upload_image(Caller(user_id=1), _png())
        second = storage.upload_image(Caller(user_id=1), _png())

        assert first.name != second.name


class TestReplaceAndDelete:
    """Tests for replace_image and delete_image."""

    def test_replace_keeps_name(self, media_root) -> None:
        stored = storage.upload_image(Caller(user_id=1), _png())
        new_content = PNG + b"v2"

        replaced = storage.replace_image(
            Caller(user_id=2),
            stored.name,
            SimpleUploadedFile("new.png", new_content, content_type="image/png"),
        )

        assert replaced.name == stored.name
        assert (media_root / stored.name).read_bytes() == new_content

    def test_replace_with_other_type_rejected(self, media_root) -> None:
        stored = storage.upload_image(Caller(user_id=1), _png())
        jpeg = SimpleUploadedFile(
            "new.jpg", b"\xff\xd8\xff" + b"\x00" * 8, content_type="image/jpeg"
        )

        with pytest.raises(ValidationFailed) as exc_info:
            storage.replace_image(Caller(user_id=1), stored.name, jpeg)

        assert exc_info.value.details[0]["field"] == "file"
        assert (media_root / stored.name).read_bytes() == PNG

    def test_failed_replace_keeps_previous_content(self, media_root, monkeypatch) -> None:
        stored = storage.upload_image(Caller(user_id=1), _png())
        real_save = default_storage.save
        attempts = []

        def fail_first_save(name, content, *args, **kwargs):
            attempts.append(name)
            if len(attempts) == 1:
                raise OSError("disk full")
            return real_save(name, content, *args, **kwargs)

        monkeypatch.setattr(default_storage, "save", fail_first_save)

        with pytest.raises(OSError):
            storage.replace_image(
                Caller(user_id=1),
                stored.name,
                SimpleUploadedFile("new.png", PNG + b"v2", content_type="image/png"),
            )

        assert attempts == [stored.name, stored.name]
        assert (media_root / stored.name).read_bytes() == PNG

    def test_replace_missing_is_not_found(self) -> None:
        with pytest.raises(NotFound):
            storage.replace_image(Caller(user_id=1), "menu-images/missing.png", _png())

    def test_delete(self) -> None:
        stored = storage.upload_image(Caller(user_id=1), _png())

        storage.delete_image(Caller(user_id=1), stored.name)

        assert not default_storage.exists(stored.name)

    def test_anonymous_delete_denied(self) -> None:
        stored = storage.upload_image(Caller(user_id=1), _png())

        with pytest.raises(AccessDenied):
            storage.delete_image(Caller.anonymous(), stored.name)

        assert default_storage.exists(stored.name)

    def test_names_outside_bucket_rejected(self) -> None:
        with pytest.raises(NotFound):
            storage.delete_image(Caller(user_id=1), "other/secret.png")
        with pytest.raises(NotFound):
            storage.delete_image(Caller(user_id=1), "menu-images/../secret.png")
