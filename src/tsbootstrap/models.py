"""Core data models for TypeScript Bootstrap."""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import UTC, datetime
from enum import Enum
from pathlib import Path

from pydantic import BaseModel, Field, field_validator

from .exceptions import InvalidTemplateError


class TemplateName(str, Enum):
    """Templates a project can be generated from."""

    TYPESCRIPT = "typescript"
    REACT = "react"

    @classmethod
    def parse(cls, value: str | TemplateName) -> TemplateName:
        """Resolve a user-supplied template identifier.

        Raises:
            InvalidTemplateError: If the value names no known template
        """
        try:
            return cls(value)
        except ValueError as e:
            msg = f"Invalid template: {value}"
            raise InvalidTemplateError(
                msg,
                details={"choices": [t.value for t in cls]},
            ) from e


DEFAULT_TEMPLATE = TemplateName.REACT


class ResourceKind(str, Enum):
    """Shape of a shared resource in the source root."""

    FILE = "file"
    DIRECTORY = "directory"


class SharedResource(BaseModel):
    """A file or directory copied into every project regardless of template."""

    source: str = Field(..., description="Path relative to the source root")
    target: str | None = Field(
        default=None,
        description="Path relative to the project root (defaults to source)",
    )
    kind: ResourceKind = Field(default=ResourceKind.FILE)
    exclude: list[str] = Field(
        default_factory=list,
        description="Entry names skipped inside a directory resource",
    )
    seed_only: bool = Field(
        default=False,
        description="Written on init only; the project owns it afterwards",
    )

    @property
    def target_path(self) -> str:
        """Project-relative location this resource is written to."""
        return self.target or self.source


def _default_shared_resources() -> list[SharedResource]:
    return [
        SharedResource(
            source="shared/github/workflows",
            target=".github/workflows",
            kind=ResourceKind.DIRECTORY,
            exclude=["publish.yml"],
        ),
        SharedResource(
            source="shared/github/copilot-instructions.md",
            target=".github/copilot-instructions.md",
        ),
        SharedResource(
            source="shared/github/pull_request_template.md",
            target=".github/pull_request_template.md",
        ),
        SharedResource(
            source="shared/husky",
            target=".husky",
            kind=ResourceKind.DIRECTORY,
        ),
        SharedResource(
            source="shared/scripts",
            target="scripts",
            kind=ResourceKind.DIRECTORY,
        ),
        SharedResource(source="shared/eslint.config.js", target="eslint.config.js"),
        SharedResource(source="shared/_gitignore", target=".gitignore"),
        SharedResource(
            source="shared/test.setup.ts",
            target="src/test.setup.ts",
            seed_only=True,
        ),
    ]


class SourceLayout(BaseModel):
    """Describes where templates and shared resources live in a source root."""

    version: str = Field(default="1.0.0", description="Layout format version")
    templates_dir: str = Field(
        default="templates",
        description="Directory holding one subdirectory per template",
    )
    shared_resources: list[SharedResource] = Field(
        default_factory=_default_shared_resources,
    )
    renames: dict[str, str] = Field(
        default_factory=lambda: {"_gitignore": ".gitignore", "_vscode": ".vscode"},
        description="Stored entry names mapped to the names written to projects",
    )
    templates: dict[str, str] = Field(
        default_factory=dict,
        description="Human-readable description per template",
    )

    @field_validator("version")
    @classmethod
    def validate_semver(cls, v: str) -> str:
        """Validate version follows semantic versioning."""
        if not re.match(r"^\d+\.\d+\.\d+$", v):
            msg = "Version must follow semantic versioning (e.g., 1.0.0)"
            raise ValueError(msg)
        return v


class InitOptions(BaseModel):
    """Options for creating a new project."""

    project_name: str | None = None
    project_title: str | None = None
    target_dir: Path = Field(default_factory=Path.cwd)
    template: str | None = None


class UpdateOptions(BaseModel):
    """Options for refreshing an existing project."""

    target_dir: Path = Field(default_factory=Path.cwd)
    template: str | None = None


class SyncOptions(InitOptions):
    """Options for create-or-update."""

    force: bool = Field(
        default=False,
        description="Update a project without the template marker without asking",
    )

    def for_init(self) -> InitOptions:
        """Narrow to the options init understands."""
        return InitOptions(
            project_name=self.project_name,
            project_title=self.project_title,
            target_dir=self.target_dir,
            template=self.template,
        )

    def for_update(self) -> UpdateOptions:
        """Narrow to the options update understands."""
        return UpdateOptions(
            target_dir=self.target_dir,
            template=self.template,
        )


@dataclass(frozen=True)
class RenderedFile:
    """A template file after placeholder substitution."""

    relative_path: str
    content: str
    mode: int | None = None


class IntegrityManifest(BaseModel):
    """Content hashes of the managed files written to a project."""

    format_version: int = Field(default=1)
    algorithm: str = Field(default="sha256")
    generated_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
    files: list[str] = Field(default_factory=list)
    hashes: dict[str, str] = Field(default_factory=dict)


class BootstrapReport(BaseModel):
    """Outcome of an init or update run."""

    template: TemplateName
    files: list[str] = Field(default_factory=list)
    integrity_path: Path | None = None
