"""Tests for image metadata, spec checks and blur placeholders."""

from __future__ import annotations

import base64
from io import BytesIO
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest
import requests
from PIL import Image

from pubgate.config.guidelines import ImageSpec
from pubgate.domain.types import Severity
from pubgate.infrastructure.images import (
    generate_blur_placeholder,
    get_image_metadata,
    is_remote,
    load_image,
    validate_image_spec,
)
from tests.conftest import make_image, make_oversized_png

SPEC = ImageSpec(required=True, width=800, height=450, max_size_kb=500)


class TestLoadImage:
    def test_is_remote(self) -> None:
        assert is_remote("https://cdn.example.com/a.jpg")
        assert is_remote("http://cdn.example.com/a.jpg")
        assert not is_remote("/images/a.jpg")

    def test_local(self, tmp_path: Path) -> None:
        path = make_image(tmp_path / "a.jpg", (10, 10))
        assert load_image(path) == path.read_bytes()

    def test_local_missing(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            load_image(tmp_path / "missing.jpg")

    def test_remote(self) -> None:
        response = MagicMock(content=b"bytes")
        with patch("pubgate.infrastructure.images.requests.get", return_value=response) as get:
            assert load_image("https://cdn.example.com/a.jpg", timeout=3) == b"bytes"
        get.assert_called_once_with("https://cdn.example.com/a.jpg", timeout=3)
        response.raise_for_status.assert_called_once()

    def test_remote_failure_propagates(self) -> None:
        with (
            patch(
                "pubgate.infrastructure.images.requests.get",
                side_effect=requests.ConnectionError("down"),
            ),
            pytest.raises(requests.RequestException),
        ):
            load_image("https://cdn.example.com/a.jpg")


class TestMetadata:
    def test_from_path(self, tmp_path: Path) -> None:
        meta = get_image_metadata(make_image(tmp_path / "a.jpg", (800, 450)))
        assert (meta.width, meta.height) == (800, 450)
        assert meta.format == "jpeg"
        assert meta.aspect_ratio == "16:9"

    def test_from_bytes(self, tmp_path: Path) -> None:
        data = make_image(tmp_path / "a.png", (40, 30), fmt="PNG").read_bytes()
        meta = get_image_metadata(data)
        assert meta.format == "png"
        assert meta.aspect_ratio == "4:3"


class TestValidateImageSpec:
    def test_conforming(self, tmp_path: Path) -> None:
        path = make_image(tmp_path / "a.jpg", (800, 450))
        assert validate_image_spec(path, SPEC, field="thumbnail") == []

    def test_wrong_dimensions_is_error(self, tmp_path: Path) -> None:
        path = make_image(tmp_path / "a.jpg", (640, 480))
        [issue] = validate_image_spec(path, SPEC, field="thumbnail")
        assert issue.severity is Severity.ERROR
        assert issue.message == "Incorrect dimensions: 640x480 (expected 800x450)"
        assert issue.field == "thumbnail"

    def test_non_jpeg_is_warning(self, tmp_path: Path) -> None:
        path = make_image(tmp_path / "a.png", (800, 450), fmt="PNG")
        [issue] = validate_image_spec(path, SPEC, field="hero")
        assert issue.severity is Severity.WARNING
        assert "Non-JPEG format: png" in issue.message

    def test_oversized_is_warning(self, tmp_path: Path) -> None:
        path = make_image(tmp_path / "a.jpg", (800, 450))
        tiny = ImageSpec(width=800, height=450, max_size_kb=0)
        with path.open("ab") as fh:
            fh.write(b"\0" * 4096)
        [issue] = validate_image_spec(path, tiny, field="hero")
        assert issue.severity is Severity.WARNING
        assert issue.message.startswith("Large file size:")

    def test_unreadable_is_warning(self, tmp_path: Path) -> None:
        path = tmp_path / "a.jpg"
        path.write_bytes(b"not an image")
        [issue] = validate_image_spec(path, SPEC, field="hero")
        assert issue.severity is Severity.WARNING
        assert issue.message.startswith("Failed to validate hero image")

    def test_oversized_pixel_count_is_warning(self, tmp_path: Path) -> None:
        path = make_oversized_png(tmp_path / "bomb.jpg")
        [issue] = validate_image_spec(path, SPEC, field="hero")
        assert issue.severity is Severity.WARNING
        assert issue.message.startswith("Failed to validate hero image")


class TestBlurPlaceholder:
    def test_data_url(self, tmp_path: Path) -> None:
        data = make_image(tmp_path / "a.jpg", (1600, 900)).read_bytes()
        placeholder = generate_blur_placeholder(data)
        assert placeholder.startswith("data:image/jpeg;base64,")

        raw = base64.b64decode(placeholder.split(",", 1)[1])
        with Image.open(BytesIO(raw)) as img:
            assert img.size == (10, 10)
            assert img.format == "JPEG"

    def test_custom_size(self, tmp_path: Path) -> None:
        data = make_image(tmp_path / "a.png", (64, 64), fmt="PNG").read_bytes()
        raw = base64.b64decode(generate_blur_placeholder(data, size=16).split(",", 1)[1])
        with Image.open(BytesIO(raw)) as img:
            assert img.size == (16, 16)

    def test_invalid_data(self) -> None:
        with pytest.raises(OSError):
            generate_blur_placeholder(b"garbage")
