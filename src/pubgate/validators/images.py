"""Image checks — existence, spec conformance and blur placeholders.

INVARIANT: environment failures (missing files, unreadable images,
failed fetches) are warnings.  Only a readable image with the wrong
pixel dimensions is an error.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import requests

from pubgate.domain.issues import ValidationIssue, ValidationResult
from pubgate.domain.types import Category, ImageRole, Severity
from pubgate.infrastructure.filesystem import resolve_public_path
from pubgate.infrastructure.images import is_remote, load_image, validate_image_spec

if TYPE_CHECKING:
    from pathlib import Path

    from pubgate.config.guidelines import GuidelineConfig, ImageSpec
    from pubgate.domain.content import PostFrontmatter

logger = logging.getLogger(__name__)


def _check_role(
    role: ImageRole,
    source: str,
    spec: ImageSpec,
    *,
    public_dir: Path,
    timeout: float,
) -> list[ValidationIssue]:
    label = role.value.capitalize()

    if is_remote(source):
        try:
            data = load_image(source, timeout=timeout)
        except requests.RequestException as exc:
            logger.debug("Fetching %s failed: %s", source, exc)
            return [
                ValidationIssue.warning(
                    Category.IMAGES,
                    f"{label} image could not be fetched: {source}",
                    field=role.value,
                    suggestion="Check the URL or host the image locally",
                )
            ]
        return validate_image_spec(data, spec, field=role.value)

    try:
        path = resolve_public_path(public_dir, source)
    except ValueError:
        path = None
    if path is None or not path.is_file():
        return [
            ValidationIssue.warning(
                Category.IMAGES,
                f"{label} image not found: {source}",
                field=role.value,
                suggestion=f"Add {role.value} image ({spec.width}x{spec.height}) to the specified path",
            )
        ]
    return validate_image_spec(path, spec, field=role.value)


def validate_images(
    fm: PostFrontmatter,
    guidelines: GuidelineConfig,
    *,
    public_dir: Path,
    timeout: float = 10.0,
) -> ValidationResult:
    specs = guidelines.validation_rules.images
    issues: list[ValidationIssue] = []
    warnings: list[ValidationIssue] = []

    for role in ImageRole:
        source = fm.image_path(role)
        if not source:
            continue
        for finding in _check_role(
            role, source, specs.for_role(role), public_dir=public_dir, timeout=timeout
        ):
            (issues if finding.severity is Severity.ERROR else warnings).append(finding)

    for role in ImageRole:
        if fm.image_path(role) and not fm.blur(role):
            warnings.append(
                ValidationIssue.warning(
                    Category.IMAGES,
                    f"Missing blur placeholder for {role.value}",
                    field=role.blur_field,
                    suggestion="Run `pubgate publish-prepare --fix` to generate blur data",
                )
            )

    return ValidationResult.from_findings(issues, warnings)
