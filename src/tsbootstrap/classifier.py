"""Decides which template files an update may overwrite."""

from __future__ import annotations

from pathlib import PurePosixPath

from .manifest import MANIFEST_FILENAME
from .models import TemplateName

# Directory that only ever holds user-authored code.
USER_CODE_DIR = "src"

# Configuration surface owned by every template. Kept as an explicit list:
# template trees also contain example sources and a test bootstrap file
# that must survive updates.
MANAGED_FILES: tuple[str, ...] = (
    "tsconfig.json",
    "tsconfig.node.json",
    "vite.config.ts",
    "vitest.config.ts",
    ".vscode/settings.json",
)

# Files only some templates ship.
TEMPLATE_MANAGED_FILES: dict[TemplateName, tuple[str, ...]] = {
    TemplateName.TYPESCRIPT: (),
    TemplateName.REACT: ("index.html",),
}


def normalize_path(relative_path: str | PurePosixPath) -> str:
    """Return ``relative_path`` with forward slashes and no ``./`` prefix."""
    text = str(relative_path).replace("\\", "/")
    parts = [part for part in text.split("/") if part not in ("", ".")]
    return "/".join(parts)


def managed_files(template: TemplateName | str) -> tuple[str, ...]:
    """Return the allow-list of managed paths for a template."""
    name = TemplateName.parse(template)
    return MANAGED_FILES + TEMPLATE_MANAGED_FILES[name]


def is_managed(relative_path: str | PurePosixPath, template: TemplateName | str) -> bool:
    """Check whether a template-relative path may be overwritten by an update.

    The user code directory is excluded before the allow-list is consulted,
    and package.json is never managed (it is merged instead). Anything not
    on the allow-list is treated as user-owned.

    Args:
        relative_path: Path of the file relative to the project root
        template: Template the project was generated from

    Returns:
        True when the file is owned by the template
    """
    path = normalize_path(relative_path)
    if not path:
        return False

    if path.split("/", 1)[0] == USER_CODE_DIR:
        return False

    if path == MANIFEST_FILENAME:
        return False

    return any(
        path == pattern or path.endswith(f"/{pattern}")
        for pattern in managed_files(template)
    )
