"""Custom exceptions for TypeScript Bootstrap."""

from typing import Any


class BootstrapError(Exception):
    """Base exception for all TypeScript Bootstrap errors."""

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.details = details or {}


class ConfigurationError(BootstrapError):
    """Raised when the template source root is missing or malformed."""


class TemplateNotFoundError(ConfigurationError):
    """Raised when a template's source tree does not exist."""


class InvalidTemplateError(BootstrapError):
    """Raised when a template identifier is not a known template."""


class ManifestError(BootstrapError):
    """Base class for package.json problems."""


class ManifestParseError(ManifestError):
    """Raised when a package.json cannot be parsed as JSON."""


class ManifestValidationError(ManifestError):
    """Raised when a package.json has the wrong shape for merging."""


class NotAProjectError(BootstrapError):
    """Raised when the target directory has no package.json."""


class UnmarkedProjectError(BootstrapError):
    """Raised when an unmarked project cannot be confirmed for update."""


class PromptUnavailableError(BootstrapError):
    """Raised when a prompt is needed but interaction is disabled."""
