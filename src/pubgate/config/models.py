"""Pydantic configuration models with code-baked defaults.

Sparse TOML contract: defaults baked here, pubgate.toml only contains
overrides. A site following the default layout needs no config file.
All paths are relative to the site root.
"""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel

# --- pubgate.toml sections ---


class ContentConfig(BaseModel):
    """[content] section."""

    model_config = {"frozen": True}

    posts_dir: Path = Path("content/posts")
    patterns_dir: Path = Path("content/patterns")
    public_dir: Path = Path("public")
    extension: str = ".mdx"


class GuidelinesConfig(BaseModel):
    """[guidelines] section."""

    model_config = {"frozen": True}

    path: Path = Path(".content/brand/guidelines.json")


class CalendarConfig(BaseModel):
    """[calendar] section."""

    model_config = {"frozen": True}

    path: Path = Path(".content/calendar/content-plan.json")


class ReportConfig(BaseModel):
    """[report] section."""

    model_config = {"frozen": True}

    path: Path = Path(".content/validation-report.json")


class ImagesConfig(BaseModel):
    """[images] section."""

    model_config = {"frozen": True}

    fetch_timeout: float = 10.0
    blur_size: int = 10
    blur_quality: int = 50
