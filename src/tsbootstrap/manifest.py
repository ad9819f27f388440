"""package.json loading and field-level merging.

package.json is the one file that mixes template-owned and user-owned
content. Template-owned fields are the ``scripts``, ``dependencies`` and
``devDependencies`` entries the template defines, plus the
``typescriptBootstrap`` marker recording which template generated the
project. Everything else belongs to the user.
"""

from __future__ import annotations

import copy
import json
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from .exceptions import ManifestParseError, ManifestValidationError
from .schemas import validate_against_schema
from .substitution import substitute

MANIFEST_FILENAME = "package.json"
TEMPLATE_MARKER = "typescriptBootstrap"

# Merged key by key; the template's value wins on conflict.
MERGED_CATEGORIES: tuple[str, ...] = ("scripts", "dependencies", "devDependencies")

Manifest = dict[str, Any]


def _parse(text: str, path: Path, role: str) -> Manifest:
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        msg = (
            f"Failed to parse {MANIFEST_FILENAME} ({role}) at {path}: "
            f"{e.msg} at line {e.lineno} column {e.colno}. "
            "Please make sure the file is in valid JSON format and try again."
        )
        raise ManifestParseError(
            msg,
            details={"path": str(path), "role": role},
        ) from e

    validate_against_schema(data, "manifest", ManifestValidationError, path)
    return data


def load_manifest(path: Path, role: str = "project") -> Manifest:
    """Read and validate a package.json.

    Args:
        path: File to read
        role: Which manifest this is ("project" or "template"), for messages

    Returns:
        Parsed manifest

    Raises:
        ManifestParseError: If the file is not valid JSON
        ManifestValidationError: If template-owned fields have the wrong shape
    """
    return _parse(path.read_text(encoding="utf-8"), path, role)


def render_template_manifest(path: Path, replacements: Mapping[str, str]) -> Manifest:
    """Load a template's package.json with placeholders resolved.

    Substitution runs on the serialized document so placeholders in nested
    fields are resolved too. Values are JSON-escaped first, so a project
    name containing quotes or backslashes cannot break the document.

    Args:
        path: Template package.json
        replacements: Placeholder values

    Returns:
        The substituted manifest
    """
    template = load_manifest(path, role="template")
    serialized = json.dumps(template, indent=2, ensure_ascii=False)
    escaped = {
        token: json.dumps(value, ensure_ascii=False)[1:-1]
        for token, value in replacements.items()
    }
    return _parse(substitute(serialized, escaped), path, "template")


def template_identity(manifest: Mapping[str, Any]) -> str | None:
    """Return the template name recorded in a manifest, if any."""
    marker = manifest.get(TEMPLATE_MARKER)
    if isinstance(marker, Mapping):
        return marker.get("template")
    return None


def merge_manifest_data(template: Mapping[str, Any], target: Mapping[str, Any]) -> Manifest:
    """Merge a rendered template manifest into a project manifest.

    - ``scripts``, ``dependencies``, ``devDependencies``: union of keys,
      template value wins; a category absent from both stays absent
    - ``typescriptBootstrap``: copied from the template only when the
      project has none
    - every other field: the project's value, untouched

    Key order follows the project manifest; new keys are appended.

    Args:
        template: Rendered template manifest
        target: Current project manifest

    Returns:
        A new merged manifest; neither input is modified
    """
    merged: Manifest = copy.deepcopy(dict(target))

    for category in MERGED_CATEGORIES:
        if category not in template and category not in target:
            continue
        merged[category] = {
            **target.get(category, {}),
            **copy.deepcopy(template.get(category, {})),
        }

    if TEMPLATE_MARKER not in target and TEMPLATE_MARKER in template:
        merged[TEMPLATE_MARKER] = copy.deepcopy(template[TEMPLATE_MARKER])

    return merged


def dump_manifest(manifest: Mapping[str, Any]) -> str:
    """Serialize a manifest the way npm writes package.json."""
    return json.dumps(manifest, indent=2, ensure_ascii=False) + "\n"


def write_manifest(path: Path, manifest: Mapping[str, Any]) -> None:
    """Overwrite ``path`` with the serialized manifest."""
    path.write_text(dump_manifest(manifest), encoding="utf-8")


def merge_manifest(
    template_path: Path,
    target_path: Path,
    replacements: Mapping[str, str],
) -> Manifest:
    """Merge a template's package.json into a project's package.json in place.

    Both files are parsed before anything is written, so a malformed file
    leaves the project untouched.

    Args:
        template_path: Template package.json
        target_path: Project package.json
        replacements: Placeholder values for the template

    Returns:
        The merged manifest that was written
    """
    target = load_manifest(target_path, role="project")
    template = render_template_manifest(template_path, replacements)
    merged = merge_manifest_data(template, target)
    write_manifest(target_path, merged)
    return merged
