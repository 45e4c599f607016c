"""Filesystem operations for site content.

INVARIANT: Files are truth. Fixers write back through
:func:`write_content_file`, which re-renders frontmatter without
touching the body.

Pure parsing/rendering utilities live in :mod:`pubgate.domain.content`
(correct dependency direction: infrastructure -> domain). This module
handles actual file I/O, path resolution, and file discovery.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from pubgate.domain.content import parse_frontmatter, render_frontmatter

# ---------------------------------------------------------------------------
# File I/O
# ---------------------------------------------------------------------------


def read_content_file(path: Path) -> tuple[dict[str, Any], str]:
    """Read an MDX file, returning ``(frontmatter, body)``."""
    content = path.read_text(encoding="utf-8")
    return parse_frontmatter(content)


def write_content_file(path: Path, frontmatter: dict[str, Any], body: str) -> None:
    """Write frontmatter + body to an MDX file.

    Creates parent directories if they don't exist.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    rendered = render_frontmatter(frontmatter, body)
    path.write_text(rendered, encoding="utf-8")


# ---------------------------------------------------------------------------
# Path resolution
# ---------------------------------------------------------------------------


def content_path(directory: Path, slug: str, extension: str = ".mdx") -> Path:
    """Resolve the file for *slug* inside *directory*.

    Raises:
        ValueError: If the slug would escape *directory*.
    """
    result = directory / f"{slug}{extension}"
    if not result.resolve().is_relative_to(directory.resolve()):
        msg = f"Path escapes content directory: {result}"
        raise ValueError(msg)
    return result


def resolve_public_path(public_dir: Path, web_path: str) -> Path:
    """Map a site path such as ``/images/posts/x/hero.jpg`` onto disk.

    Raises:
        ValueError: If the path would escape *public_dir*.
    """
    result = public_dir / web_path.lstrip("/")
    if not result.resolve().is_relative_to(public_dir.resolve()):
        msg = f"Path escapes public directory: {web_path}"
        raise ValueError(msg)
    return result


def find_content_files(directory: Path, extension: str = ".mdx") -> list[Path]:
    """Top-level content files in *directory*, sorted by name.

    Returns an empty list if the directory does not exist.
    """
    if not directory.is_dir():
        return []
    return sorted(p for p in directory.iterdir() if p.is_file() and p.suffix == extension)
