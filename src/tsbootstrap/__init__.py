"""TypeScript Bootstrap: project scaffolding with template-aware updates."""

__version__ = "0.1.0"
__author__ = "TypeScript Bootstrap Contributors"
__description__ = "Create TypeScript projects and keep them up to date with their template"

from .bootstrapper import Bootstrapper, create_or_update, init, update
from .classifier import is_managed
from .manifest import merge_manifest
from .models import InitOptions, SyncOptions, TemplateName, UpdateOptions
from .sources import SourceRoot
from .substitution import substitute

__all__ = [
    "Bootstrapper",
    "InitOptions",
    "SourceRoot",
    "SyncOptions",
    "TemplateName",
    "UpdateOptions",
    "create_or_update",
    "init",
    "is_managed",
    "merge_manifest",
    "substitute",
    "update",
]
