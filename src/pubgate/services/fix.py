"""FixService — the two write-back repairs the pipeline can apply.

* Blur injection: fill missing ``thumbnailBlur`` / ``heroBlur`` fields
  with a tiny blurred JPEG data URL generated from the image itself.
* Calendar sync: move the post's content-plan topic to ``ready`` (passed)
  or ``review`` (failed).  A ``published`` topic is never downgraded.

Both are idempotent: a second run with nothing to change writes nothing.
"""

from __future__ import annotations

import json
import logging
from typing import Any

import requests
from PIL import Image
from pydantic import BaseModel, Field
from ruamel.yaml.error import YAMLError

from pubgate.domain.content import insert_after
from pubgate.domain.types import ImageRole, PlanStatus
from pubgate.infrastructure.filesystem import (
    content_path,
    read_content_file,
    resolve_public_path,
    write_content_file,
)
from pubgate.infrastructure.images import generate_blur_placeholder, is_remote, load_image
from pubgate.services._helpers import today_iso
from pubgate.services.base import BaseService

logger = logging.getLogger(__name__)


class BlurInjectResult(BaseModel):
    """Outcome of one blur injection run."""

    model_config = {"frozen": True}

    updated: bool = False
    thumbnail_injected: bool = False
    hero_injected: bool = False
    errors: list[str] = Field(default_factory=list)

    def injected(self, role: ImageRole) -> bool:
        return self.thumbnail_injected if role is ImageRole.THUMBNAIL else self.hero_injected

    def summary(self) -> str | None:
        """One-line description for reports, or None when nothing happened."""
        parts: list[str] = []
        fields = [role.blur_field for role in ImageRole if self.injected(role)]
        if fields:
            parts.append(f"Injected: {', '.join(fields)}")
        if self.errors:
            parts.append(f"Errors: {'; '.join(self.errors)}")
        return " | ".join(parts) or None


class CalendarSyncResult(BaseModel):
    """Outcome of one calendar status sync."""

    model_config = {"frozen": True}

    updated: bool = False
    previous_status: str | None = None
    new_status: str = ""

    def summary(self) -> str:
        if self.updated:
            return f"{self.previous_status} -> {self.new_status}"
        if self.previous_status == PlanStatus.PUBLISHED:
            return "Skipped (already published)"
        if self.previous_status is None:
            return "No calendar topic"
        return "No change needed"


class FixService(BaseService):
    """Write-back repairs for posts and the content plan."""

    # ------------------------------------------------------------------
    # Blur placeholders
    # ------------------------------------------------------------------

    def inject_blur_placeholders(self, slug: str) -> BlurInjectResult:
        """Generate missing blur placeholders for a post's images.

        The file is rewritten only when at least one field was set.
        A failure for one role is recorded in ``errors`` and does not
        stop the other.
        """
        posts = self._site.posts
        try:
            path = content_path(posts.directory, slug, posts.extension)
        except ValueError as exc:
            return BlurInjectResult(errors=[str(exc)])
        if not path.is_file():
            return BlurInjectResult(errors=[f"Post file not found: {path}"])

        try:
            fm, body = read_content_file(path)
        except (OSError, ValueError, YAMLError) as exc:
            return BlurInjectResult(errors=[f"Failed to read {path}: {exc}"])

        injected: dict[ImageRole, bool] = {}
        errors: list[str] = []
        images = self._site.settings.images
        for role in ImageRole:
            source = fm.get(role.value)
            if not source or fm.get(role.blur_field):
                continue
            try:
                data = self._read_image(str(source))
                placeholder = generate_blur_placeholder(
                    data, size=images.blur_size, quality=images.blur_quality
                )
            except FileNotFoundError:
                errors.append(f"{role.value.capitalize()} image not found: {source}")
                continue
            except (
                OSError,
                ValueError,
                Image.DecompressionBombError,
                requests.RequestException,
            ) as exc:
                errors.append(f"Failed to generate {role.value} blur: {exc}")
                continue
            insert_after(fm, role.value, role.blur_field, placeholder)
            injected[role] = True

        updated = bool(injected)
        if updated:
            write_content_file(path, fm, body)
            self._site.invalidate(slug)
            logger.debug("Injected %s into %s", sorted(injected), path)

        return BlurInjectResult(
            updated=updated,
            thumbnail_injected=injected.get(ImageRole.THUMBNAIL, False),
            hero_injected=injected.get(ImageRole.HERO, False),
            errors=errors,
        )

    def _read_image(self, source: str) -> bytes:
        if is_remote(source):
            return load_image(source, timeout=self._site.fetch_timeout)
        return load_image(resolve_public_path(self._site.public_dir, source))

    # ------------------------------------------------------------------
    # Content calendar
    # ------------------------------------------------------------------

    def sync_calendar_status(self, slug: str, passed: bool) -> CalendarSyncResult:
        """Set the topic for *slug* to ``ready`` or ``review``.

        A missing plan file, an unreadable plan or an unknown slug is a
        no-op with ``previous_status`` None.
        """
        path = self._site.calendar_path
        if not path.is_file():
            return CalendarSyncResult()

        try:
            plan: dict[str, Any] = json.loads(path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as exc:
            logger.warning("Content plan is not valid JSON: %s: %s", path, exc)
            return CalendarSyncResult()

        topics = plan.get("topics") if isinstance(plan, dict) else None
        topic = next(
            (t for t in topics or [] if isinstance(t, dict) and t.get("slug") == slug),
            None,
        )
        if topic is None:
            return CalendarSyncResult()

        previous = topic.get("status")
        if previous == PlanStatus.PUBLISHED:
            return CalendarSyncResult(previous_status=previous, new_status=previous)

        target = PlanStatus.READY if passed else PlanStatus.REVIEW
        if previous == target:
            return CalendarSyncResult(previous_status=previous, new_status=str(target))

        topic["status"] = str(target)
        topic["updated_at"] = today_iso()
        path.write_text(json.dumps(plan, indent=2, ensure_ascii=False) + "\n", encoding="utf-8")
        logger.debug("Calendar topic %s: %s -> %s", slug, previous, target)
        return CalendarSyncResult(updated=True, previous_status=previous, new_status=str(target))
