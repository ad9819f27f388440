"""Template source root: locates template trees and shared resources."""

from __future__ import annotations

from pathlib import Path

import yaml
from pydantic import ValidationError

from .exceptions import ConfigurationError, TemplateNotFoundError
from .manifest import MANIFEST_FILENAME
from .models import SharedResource, SourceLayout, TemplateName
from .schemas import validate_against_schema

BUNDLED_SOURCE_ROOT = Path(__file__).parent / "resources"
LAYOUT_FILENAME = "bootstrap.yaml"


class SourceRoot:
    """Read-only view of a directory holding templates and shared resources."""

    def __init__(self, root: Path | None = None) -> None:
        """Initialize with a source root path.

        Args:
            root: Directory containing ``bootstrap.yaml`` and the template
                trees; defaults to the resources bundled with the package
        """
        self.root = Path(root) if root is not None else BUNDLED_SOURCE_ROOT
        self._layout: SourceLayout | None = None

    @property
    def layout(self) -> SourceLayout:
        """Source layout, loaded on first access."""
        if self._layout is None:
            self._layout = self.load_layout()
        return self._layout

    def load_layout(self) -> SourceLayout:
        """Load and validate ``bootstrap.yaml``.

        A missing file means the default layout.

        Raises:
            ConfigurationError: If the file cannot be read or is invalid
        """
        layout_path = self.root / LAYOUT_FILENAME
        if not layout_path.exists():
            return SourceLayout()

        try:
            with layout_path.open(encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            msg = f"Failed to parse layout YAML: {e}"
            raise ConfigurationError(msg) from e
        except OSError as e:
            msg = f"Failed to read layout file: {e}"
            raise ConfigurationError(msg) from e

        validate_against_schema(data, "layout", ConfigurationError, layout_path)

        try:
            return SourceLayout.model_validate(data)
        except ValidationError as e:
            msg = f"Layout validation failed: {e}"
            raise ConfigurationError(msg) from e

    @property
    def templates_root(self) -> Path:
        return self.root / self.layout.templates_dir

    def available_templates(self) -> list[TemplateName]:
        """Templates whose source tree is present."""
        return [t for t in TemplateName if (self.templates_root / t.value).is_dir()]

    def template_dir(self, template: TemplateName) -> Path:
        """Return the source tree of a template.

        Raises:
            TemplateNotFoundError: If the tree does not exist
        """
        path = self.templates_root / template.value
        if not path.is_dir():
            msg = f'Template "{template.value}" not found at {path}'
            raise TemplateNotFoundError(msg, details={"path": str(path)})
        return path

    def template_manifest(self, template: TemplateName) -> Path:
        """Return the template's package.json path."""
        return self.template_dir(template) / MANIFEST_FILENAME

    def describe(self, template: TemplateName) -> str:
        """Human-readable description of a template for prompts."""
        return self.layout.templates.get(template.value, template.value)

    def resource_path(self, resource: SharedResource) -> Path:
        return self.root / resource.source

    def shared_resources(self, include_seed: bool = True) -> list[SharedResource]:
        """Shared resources present in this source root.

        Args:
            include_seed: Whether to include resources written on init only

        Returns:
            Resources in layout order; missing sources are skipped
        """
        return [
            resource
            for resource in self.layout.shared_resources
            if (include_seed or not resource.seed_only)
            and self.resource_path(resource).exists()
        ]
