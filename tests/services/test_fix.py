"""Tests for FixService — blur injection and calendar sync."""

from __future__ import annotations

import json
from pathlib import Path
from unittest.mock import patch

import pytest
import requests

from pubgate.domain.content import Document, parse_frontmatter
from pubgate.domain.types import ImageRole
from pubgate.infrastructure.site import Site
from pubgate.services.fix import BlurInjectResult, CalendarSyncResult, FixService
from tests.conftest import make_image, make_oversized_png, write_plan, write_post


def _topic(site_root: Path, slug: str) -> dict:
    plan = json.loads((site_root / ".content" / "calendar" / "content-plan.json").read_text())
    return next(t for t in plan["topics"] if t["slug"] == slug)


# ---------------------------------------------------------------------------
# Blur placeholders
# ---------------------------------------------------------------------------


class TestInjectBlurPlaceholders:
    def test_injects_both_after_their_image(self, site_root: Path, site: Site) -> None:
        path = write_post(site_root, "alpha", blur=False, links=["beta", "gamma"])
        result = FixService(site).inject_blur_placeholders("alpha")

        assert result.updated is True
        assert result.thumbnail_injected is True
        assert result.hero_injected is True
        assert result.errors == []

        fm, _ = parse_frontmatter(path.read_text(encoding="utf-8"))
        keys = list(fm.keys())
        assert keys.index("thumbnailBlur") == keys.index("thumbnail") + 1
        assert keys.index("heroBlur") == keys.index("hero") + 1
        assert fm["thumbnailBlur"].startswith("data:image/jpeg;base64,")

    def test_body_untouched(self, site_root: Path, site: Site) -> None:
        path = write_post(site_root, "alpha", blur=False, links=["beta", "gamma"])
        _, body_before = parse_frontmatter(path.read_text(encoding="utf-8"))
        FixService(site).inject_blur_placeholders("alpha")
        _, body_after = parse_frontmatter(path.read_text(encoding="utf-8"))
        assert body_after == body_before

    def test_idempotent(self, site_root: Path, site: Site) -> None:
        path = write_post(site_root, "alpha", blur=False, links=["beta", "gamma"])
        service = FixService(site)
        assert service.inject_blur_placeholders("alpha").updated is True
        content = path.read_text(encoding="utf-8")

        second = service.inject_blur_placeholders("alpha")
        assert second.updated is False
        assert second.summary() is None
        assert path.read_text(encoding="utf-8") == content

    def test_existing_blur_kept(self, site_root: Path, site: Site) -> None:
        path = site_root / "content" / "posts" / "alpha.mdx"
        before = path.read_text(encoding="utf-8")
        result = FixService(site).inject_blur_placeholders("alpha")
        assert result == BlurInjectResult()
        assert path.read_text(encoding="utf-8") == before

    def test_invalidates_site_cache(self, site_root: Path, site: Site) -> None:
        write_post(site_root, "alpha", blur=False, links=["beta", "gamma"])
        stale = site.posts.get_by_slug("alpha")
        assert isinstance(stale, Document)
        FixService(site).inject_blur_placeholders("alpha")
        fresh = site.posts.get_by_slug("alpha")
        assert isinstance(fresh, Document)
        assert fresh.frontmatter.blur(ImageRole.HERO) is not None

    def test_missing_image_recorded(self, site_root: Path, site: Site) -> None:
        write_post(site_root, "alpha", blur=False, links=["beta", "gamma"])
        (site_root / "public" / "images" / "posts" / "alpha" / "hero.jpg").unlink()
        result = FixService(site).inject_blur_placeholders("alpha")
        assert result.updated is True
        assert result.thumbnail_injected is True
        assert result.hero_injected is False
        assert result.errors == ["Hero image not found: /images/posts/alpha/hero.jpg"]
        assert result.summary() == (
            "Injected: thumbnailBlur | Errors: Hero image not found: /images/posts/alpha/hero.jpg"
        )

    def test_corrupt_image_recorded(self, site_root: Path, site: Site) -> None:
        write_post(site_root, "alpha", blur=False, links=["beta", "gamma"])
        (site_root / "public" / "images" / "posts" / "alpha" / "thumbnail.jpg").write_bytes(b"x")
        result = FixService(site).inject_blur_placeholders("alpha")
        assert result.thumbnail_injected is False
        assert result.errors[0].startswith("Failed to generate thumbnail blur:")

    def test_oversized_image_recorded(self, site_root: Path, site: Site) -> None:
        write_post(site_root, "alpha", blur=False, links=["beta", "gamma"])
        make_oversized_png(site_root / "public" / "images" / "posts" / "alpha" / "hero.jpg")
        result = FixService(site).inject_blur_placeholders("alpha")
        assert result.thumbnail_injected is True
        assert result.hero_injected is False
        assert result.errors[0].startswith("Failed to generate hero blur:")

    def test_remote_image(self, site_root: Path, site: Site, tmp_path: Path) -> None:
        data = make_image(tmp_path / "remote.jpg", (1600, 900)).read_bytes()
        path = site_root / "content" / "posts" / "alpha.mdx"
        path.write_text(
            "---\ntitle: T\nhero: https://cdn.example.com/h.jpg\n---\n\nBody\n", encoding="utf-8"
        )
        with patch("pubgate.services.fix.load_image", return_value=data) as load:
            result = FixService(site).inject_blur_placeholders("alpha")
        load.assert_called_once_with("https://cdn.example.com/h.jpg", timeout=10.0)
        assert result.hero_injected is True

    def test_remote_failure_recorded(self, site_root: Path, site: Site) -> None:
        path = site_root / "content" / "posts" / "alpha.mdx"
        path.write_text("---\nhero: https://cdn.example.com/h.jpg\n---\n\nBody\n", encoding="utf-8")
        with patch(
            "pubgate.services.fix.load_image", side_effect=requests.Timeout("slow")
        ):
            result = FixService(site).inject_blur_placeholders("alpha")
        assert result.updated is False
        assert result.errors == ["Failed to generate hero blur: slow"]

    def test_missing_post(self, site: Site) -> None:
        result = FixService(site).inject_blur_placeholders("nope")
        assert result.updated is False
        assert result.errors[0].startswith("Post file not found:")

    def test_configured_blur_size(self, site_root: Path) -> None:
        from pubgate.config.settings import PubgateSettings

        (site_root / "pubgate.toml").write_text("[images]\nblur_size = 4\n")
        site = Site(PubgateSettings.from_cli(site_root=site_root))
        write_post(site_root, "alpha", blur=False, links=["beta", "gamma"])
        with patch("pubgate.services.fix.generate_blur_placeholder", return_value="data:x") as gen:
            FixService(site).inject_blur_placeholders("alpha")
        assert gen.call_args.kwargs == {"size": 4, "quality": 50}


# ---------------------------------------------------------------------------
# Calendar sync
# ---------------------------------------------------------------------------


class TestSyncCalendarStatus:
    def test_passed_moves_to_ready(self, site_root: Path, site: Site) -> None:
        result = FixService(site).sync_calendar_status("alpha", passed=True)
        assert result == CalendarSyncResult(
            updated=True, previous_status="draft", new_status="ready"
        )
        topic = _topic(site_root, "alpha")
        assert topic["status"] == "ready"
        assert "updated_at" in topic
        assert topic["target_date"] == "2024-03-03"
        assert result.summary() == "draft -> ready"

    def test_failed_moves_to_review(self, site_root: Path, site: Site) -> None:
        result = FixService(site).sync_calendar_status("gamma", passed=False)
        assert result.updated is True
        assert result.previous_status == "ready"
        assert _topic(site_root, "gamma")["status"] == "review"

    @pytest.mark.parametrize("passed", [True, False])
    def test_published_never_changes(self, site_root: Path, site: Site, passed: bool) -> None:
        plan = site_root / ".content" / "calendar" / "content-plan.json"
        before = plan.read_text()
        result = FixService(site).sync_calendar_status("beta", passed=passed)
        assert result.updated is False
        assert result.previous_status == "published"
        assert result.summary() == "Skipped (already published)"
        assert plan.read_text() == before

    def test_same_status_is_noop(self, site_root: Path, site: Site) -> None:
        plan = site_root / ".content" / "calendar" / "content-plan.json"
        before = plan.read_text()
        result = FixService(site).sync_calendar_status("gamma", passed=True)
        assert result.updated is False
        assert result.new_status == "ready"
        assert result.summary() == "No change needed"
        assert plan.read_text() == before

    def test_unknown_slug(self, site: Site) -> None:
        result = FixService(site).sync_calendar_status("nope", passed=True)
        assert result == CalendarSyncResult()
        assert result.summary() == "No calendar topic"

    def test_missing_plan(self, site_root: Path, site: Site) -> None:
        (site_root / ".content" / "calendar" / "content-plan.json").unlink()
        assert FixService(site).sync_calendar_status("alpha", passed=True).updated is False

    def test_invalid_plan_left_alone(self, site_root: Path, site: Site) -> None:
        plan = site_root / ".content" / "calendar" / "content-plan.json"
        plan.write_text("{broken")
        assert FixService(site).sync_calendar_status("alpha", passed=True).updated is False
        assert plan.read_text() == "{broken"

    def test_other_topics_preserved(self, site_root: Path, site: Site) -> None:
        write_plan(
            site_root,
            [
                {"slug": "alpha", "status": "draft", "notes": "keep me", "extra": [1, 2]},
                {"slug": "beta", "status": "published"},
            ],
        )
        FixService(site).sync_calendar_status("alpha", passed=True)
        plan = json.loads((site_root / ".content" / "calendar" / "content-plan.json").read_text())
        assert plan["version"] == 2
        assert plan["topics"][0]["notes"] == "keep me"
        assert plan["topics"][1] == {"slug": "beta", "status": "published"}
