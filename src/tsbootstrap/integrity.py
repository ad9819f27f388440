"""Integrity manifest: content hashes of the managed files in a project.

The manifest is regenerated in full after every init and update. Nothing
reads it yet; it exists so later tooling can detect drift.
"""

from __future__ import annotations

import hashlib
import json
from pathlib import Path

from .models import IntegrityManifest, TemplateName
from .renderer import iter_managed_template_files, iter_shared_resources
from .sources import SourceRoot

INTEGRITY_DIR = ".typescript-bootstrap"
INTEGRITY_FILENAME = "integrity.json"
HASH_ALGORITHM = "sha256"


def integrity_path(target_dir: Path) -> Path:
    """Location of the integrity manifest inside a project."""
    return target_dir / INTEGRITY_DIR / INTEGRITY_FILENAME


def managed_paths(source_root: SourceRoot, template: TemplateName) -> list[str]:
    """All project-relative paths the template owns, sorted.

    Covers managed template files and shared resources, excluding
    resources that are only written on init.
    """
    paths = {path for path, _ in iter_managed_template_files(source_root, template)}
    paths.update(path for path, _ in iter_shared_resources(source_root, include_seed=False))
    return sorted(paths)


def hash_file(path: Path) -> str:
    """Hex digest of a file's bytes."""
    return hashlib.new(HASH_ALGORITHM, path.read_bytes()).hexdigest()


def build_integrity_manifest(
    target_dir: Path,
    source_root: SourceRoot,
    template: TemplateName,
) -> IntegrityManifest:
    """Hash every managed file that exists in ``target_dir``."""
    files = [path for path in managed_paths(source_root, template) if (target_dir / path).is_file()]
    return IntegrityManifest(
        algorithm=HASH_ALGORITHM,
        files=files,
        hashes={path: hash_file(target_dir / path) for path in files},
    )


def write_integrity_manifest(
    target_dir: Path,
    source_root: SourceRoot,
    template: TemplateName,
) -> Path:
    """Regenerate the integrity manifest of a project.

    Args:
        target_dir: Project root
        source_root: Source the project was rendered from
        template: Template the project uses

    Returns:
        Path of the written manifest
    """
    manifest = build_integrity_manifest(target_dir, source_root, template)
    path = integrity_path(target_dir)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(
        json.dumps(manifest.model_dump(mode="json"), indent=2) + "\n",
        encoding="utf-8",
    )
    return path


def read_integrity_manifest(target_dir: Path) -> IntegrityManifest | None:
    """Load a project's integrity manifest, or None when it has none."""
    path = integrity_path(target_dir)
    if not path.exists():
        return None
    return IntegrityManifest.model_validate_json(path.read_text(encoding="utf-8"))
