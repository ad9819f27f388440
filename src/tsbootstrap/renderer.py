"""Renders template trees and shared resources and writes them to a project."""

from __future__ import annotations

import stat
from collections.abc import Collection, Iterable, Iterator, Mapping
from pathlib import Path

from .classifier import is_managed, normalize_path
from .manifest import MANIFEST_FILENAME, dump_manifest, render_template_manifest
from .models import RenderedFile, ResourceKind, TemplateName
from .sources import SourceRoot
from .substitution import substitute

# Only execute permission is carried over from the source tree.
EXECUTABLE_BITS = stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH


def iter_tree(
    root: Path,
    renames: Mapping[str, str] | None = None,
    exclude: Collection[str] = (),
) -> Iterator[tuple[str, Path]]:
    """Walk a directory in sorted order.

    Args:
        root: Directory to walk
        renames: Stored entry names mapped to the names written to projects
        exclude: Entry names to skip at any depth

    Yields:
        ``(relative_path, source_file)`` with renames applied to the path
    """
    renames = renames or {}

    def walk(directory: Path, prefix: str) -> Iterator[tuple[str, Path]]:
        for entry in sorted(directory.iterdir(), key=lambda p: p.name):
            if entry.name in exclude:
                continue
            name = renames.get(entry.name, entry.name)
            relative = f"{prefix}/{name}" if prefix else name
            if entry.is_dir():
                yield from walk(entry, relative)
            else:
                yield relative, entry

    yield from walk(root, "")


def render_file(
    source: Path,
    relative_path: str,
    replacements: Mapping[str, str],
) -> RenderedFile:
    """Read a source file and substitute its placeholders."""
    content = source.read_text(encoding="utf-8")
    return RenderedFile(
        relative_path=normalize_path(relative_path),
        content=substitute(content, replacements),
        mode=stat.S_IMODE(source.stat().st_mode),
    )


def render_manifest(source: Path, replacements: Mapping[str, str]) -> RenderedFile:
    """Render a template package.json with JSON-escaped placeholder values."""
    return RenderedFile(
        relative_path=MANIFEST_FILENAME,
        content=dump_manifest(render_template_manifest(source, replacements)),
        mode=stat.S_IMODE(source.stat().st_mode),
    )


def render_tree(
    root: Path,
    replacements: Mapping[str, str],
    renames: Mapping[str, str] | None = None,
    exclude: Collection[str] = (),
) -> Iterator[RenderedFile]:
    """Lazily render every file under ``root``.

    A package.json at the top of ``root`` is rendered as JSON so values
    needing escapes keep the document valid.
    """
    for relative_path, source in iter_tree(root, renames, exclude):
        if relative_path == MANIFEST_FILENAME:
            yield render_manifest(source, replacements)
        else:
            yield render_file(source, relative_path, replacements)


def iter_shared_resources(
    source_root: SourceRoot,
    include_seed: bool = True,
) -> Iterator[tuple[str, Path]]:
    """Walk the shared resources present in a source root.

    Args:
        source_root: Where the resources live
        include_seed: Whether to include resources written on init only

    Yields:
        ``(project_relative_path, source_file)`` in layout order
    """
    renames = source_root.layout.renames
    for resource in source_root.shared_resources(include_seed=include_seed):
        path = source_root.resource_path(resource)
        if resource.kind is ResourceKind.DIRECTORY:
            for relative_path, source in iter_tree(path, renames, resource.exclude):
                yield normalize_path(f"{resource.target_path}/{relative_path}"), source
        else:
            yield normalize_path(resource.target_path), path


def render_shared_resources(
    source_root: SourceRoot,
    replacements: Mapping[str, str],
    include_seed: bool = True,
) -> Iterator[RenderedFile]:
    """Lazily render the shared resources at their project-relative paths."""
    for relative_path, source in iter_shared_resources(source_root, include_seed):
        yield render_file(source, relative_path, replacements)


def write_files(target_dir: Path, files: Iterable[RenderedFile]) -> Iterator[str]:
    """Write rendered files under ``target_dir``, creating directories.

    Each file is written as the sequence is consumed.

    Yields:
        Relative path of each file written
    """
    for rendered in files:
        destination = target_dir / rendered.relative_path
        destination.parent.mkdir(parents=True, exist_ok=True)
        destination.write_text(rendered.content, encoding="utf-8", newline="")
        if rendered.mode is not None and rendered.mode & EXECUTABLE_BITS:
            destination.chmod(destination.stat().st_mode | (rendered.mode & EXECUTABLE_BITS))
        yield rendered.relative_path


def materialize(
    source_root: SourceRoot,
    template: TemplateName,
    target_dir: Path,
    replacements: Mapping[str, str],
) -> Iterator[str]:
    """Write a complete project: the template tree, then every shared resource.

    Nothing is written until the returned sequence is consumed.

    Raises:
        TemplateNotFoundError: If the template tree is missing (raised before
            the first file is written)
    """
    template_root = source_root.template_dir(template)
    renames = source_root.layout.renames

    def run() -> Iterator[str]:
        yield from write_files(
            target_dir,
            render_tree(template_root, replacements, renames),
        )
        yield from write_files(
            target_dir,
            render_shared_resources(source_root, replacements, include_seed=True),
        )

    return run()


def iter_managed_template_files(
    source_root: SourceRoot,
    template: TemplateName,
) -> Iterator[tuple[str, Path]]:
    """Walk only the template files an update may overwrite."""
    template_root = source_root.template_dir(template)
    for relative_path, source in iter_tree(template_root, source_root.layout.renames):
        if is_managed(relative_path, template):
            yield relative_path, source


def managed_template_files(
    source_root: SourceRoot,
    template: TemplateName,
    replacements: Mapping[str, str],
) -> Iterator[RenderedFile]:
    """Lazily render only the template files an update may overwrite."""
    for relative_path, source in iter_managed_template_files(source_root, template):
        yield render_file(source, relative_path, replacements)


def selective_update(
    source_root: SourceRoot,
    template: TemplateName,
    target_dir: Path,
    replacements: Mapping[str, str],
) -> list[str]:
    """Rewrite the managed template files and all non-seed shared resources.

    Files in ``target_dir`` that are not produced here are left alone and
    nothing is deleted. package.json is never written here.

    Returns:
        Relative paths written, in write order
    """
    written = list(
        write_files(target_dir, managed_template_files(source_root, template, replacements)),
    )
    written.extend(
        write_files(
            target_dir,
            render_shared_resources(source_root, replacements, include_seed=False),
        ),
    )
    return written
