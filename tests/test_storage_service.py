# =============================================================================
# tests/test_storage_service.py - Image Storage Tests
# =============================================================================
# Tests for the Supabase Storage upload adapter and image resizing.
# Supabase is replaced by a MagicMock; images are generated with Pillow.
# =============================================================================

import io
from unittest.mock import MagicMock

import pytest
from PIL import Image

from app.exceptions import AttachmentUploadError
from core.models.business import Attachment
from core.services.storage_service import StorageService
from lib.images import UnsupportedImageError, fit_within


def png_bytes(width: int, height: int) -> bytes:
    buffer = io.BytesIO()
    Image.new("RGB", (width, height), (200, 30, 30)).save(buffer, format="PNG")
    return buffer.getvalue()


@pytest.fixture
def supabase_client():
    client = MagicMock()
    bucket = client.storage.from_.return_value
    bucket.get_public_url.side_effect = (
        lambda path: f"https://test-project.supabase.co/storage/v1/object/public/business-images/{path}"
    )
    return client


@pytest.fixture
def storage_service(supabase_client):
    return StorageService(
        supabase_client,
        bucket="business-images",
        allowed_content_types=["image/png", "image/jpeg"],
        max_size_bytes=1024 * 1024,
        max_dimensions=(100, 100),
    )


# =============================================================================
# Upload Tests
# =============================================================================

class TestUpload:
    """Test uploading attachments to the bucket."""

    def test_returns_public_url(self, storage_service, supabase_client):
        attachment = Attachment(png_bytes(10, 10), "Logo.PNG", "image/png")

        url = storage_service.upload(attachment)

        supabase_client.storage.from_.assert_called_with("business-images")
        upload_call = supabase_client.storage.from_.return_value.upload.call_args
        path = upload_call.kwargs["path"]
        assert path.startswith("businesses/")
        assert path.endswith(".png")
        assert upload_call.kwargs["file_options"]["content-type"] == "image/png"
        assert url.endswith(path)

    def test_paths_are_unique(self, storage_service):
        attachment = Attachment(png_bytes(10, 10), "logo.png", "image/png")

        assert storage_service.upload(attachment) != storage_service.upload(attachment)

    def test_large_image_is_shrunk_before_upload(self, storage_service, supabase_client):
        storage_service.upload(Attachment(png_bytes(400, 200), "wide.png", "image/png"))

        stored = supabase_client.storage.from_.return_value.upload.call_args.kwargs["file"]
        with Image.open(io.BytesIO(stored)) as img:
            assert img.size == (100, 50)

    def test_storage_error_raises(self, storage_service, supabase_client):
        supabase_client.storage.from_.return_value.upload.side_effect = RuntimeError("Bucket not found")

        with pytest.raises(AttachmentUploadError) as exc_info:
            storage_service.upload(Attachment(png_bytes(10, 10), "logo.png", "image/png"))

        assert exc_info.value.reason == "Bucket not found"
        assert exc_info.value.filename == "logo.png"


# =============================================================================
# Validation Tests
# =============================================================================

class TestValidation:
    """Test attachments rejected before reaching storage."""

    @pytest.mark.parametrize("attachment, reason", [
        (Attachment(b"", "empty.png", "image/png"), "empty"),
        (Attachment(b"%PDF-1.4", "menu.pdf", "application/pdf"), "Unsupported content type"),
        (Attachment(b"x" * (1024 * 1024 + 1), "huge.png", "image/png"), "too large"),
        (Attachment(b"not an image", "fake.png", "image/png"), "Not a readable image"),
    ])
    def test_rejected(self, storage_service, supabase_client, attachment, reason):
        with pytest.raises(AttachmentUploadError) as exc_info:
            storage_service.upload(attachment)

        assert reason in exc_info.value.reason
        supabase_client.storage.from_.return_value.upload.assert_not_called()


# =============================================================================
# fit_within Tests
# =============================================================================

class TestFitWithin:
    """Test bounding-box resizing."""

    def test_small_image_unchanged(self):
        content = png_bytes(50, 40)

        assert fit_within(content, (100, 100)) is content

    def test_keeps_aspect_ratio(self):
        resized = fit_within(png_bytes(300, 600), (100, 100))

        with Image.open(io.BytesIO(resized)) as img:
            assert img.size == (50, 100)
            assert img.format == "PNG"

    def test_gif_passes_through(self):
        buffer = io.BytesIO()
        Image.new("P", (500, 500)).save(buffer, format="GIF")
        content = buffer.getvalue()

        assert fit_within(content, (100, 100)) is content

    def test_garbage_raises(self):
        with pytest.raises(UnsupportedImageError):
            fit_within(b"definitely not an image", (100, 100))


# =============================================================================
# Readiness Tests
# =============================================================================

def test_check_looks_up_bucket(storage_service, supabase_client):
    storage_service.check()

    supabase_client.storage.get_bucket.assert_called_once_with("business-images")


def test_check_propagates_errors(storage_service, supabase_client):
    supabase_client.storage.get_bucket.side_effect = RuntimeError("Bucket not found")

    with pytest.raises(RuntimeError):
        storage_service.check()
