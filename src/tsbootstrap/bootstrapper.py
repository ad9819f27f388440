"""Project initialization and update orchestration."""

from __future__ import annotations

import os
from pathlib import Path

from rich.console import Console
from rich.markup import escape

from .exceptions import (
    ManifestError,
    NotAProjectError,
    PromptUnavailableError,
    TemplateNotFoundError,
    UnmarkedProjectError,
)
from .integrity import write_integrity_manifest
from .manifest import (
    MANIFEST_FILENAME,
    TEMPLATE_MARKER,
    Manifest,
    load_manifest,
    merge_manifest_data,
    render_template_manifest,
    template_identity,
    write_manifest,
)
from .models import (
    DEFAULT_TEMPLATE,
    BootstrapReport,
    InitOptions,
    SyncOptions,
    TemplateName,
    UpdateOptions,
)
from .prompts import NonInteractivePrompter, Prompter
from .renderer import materialize, selective_update
from .sources import SourceRoot

PROJECT_NAME_TOKEN = "PROJECT_NAME"
PROJECT_TITLE_TOKEN = "PROJECT_TITLE"

INIT_NEXT_STEPS = [
    "  1. npm install",
    "  2. npm run dev",
    "",
    "Available commands:",
    "  npm run dev           - Start development server",
    "  npm run build         - Build for production",
    "  npm test              - Run tests",
    "  npm run test:coverage - Generate coverage report",
    "  npm run lint          - Lint code",
    "  npm run lint:fix      - Fix linting issues",
]

UPDATE_NEXT_STEPS = [
    "  1. npm install  (to update dependencies)",
    "  2. Review changes and test your project",
]


def build_replacements(project_name: str, project_title: str) -> dict[str, str]:
    """Placeholder values for a project."""
    return {
        PROJECT_NAME_TOKEN: project_name,
        PROJECT_TITLE_TOKEN: project_title,
    }


class Bootstrapper:
    """Creates projects from templates and keeps them in sync with the templates."""

    def __init__(
        self,
        source_root: SourceRoot | None = None,
        prompter: Prompter | None = None,
        console: Console | None = None,
    ) -> None:
        """Initialize with collaborators.

        Args:
            source_root: Where templates and shared resources are read from;
                defaults to the bundled resources
            prompter: Used for choices the caller did not supply; defaults to
                a prompter that refuses, so defaults are used instead
            console: Where progress is printed
        """
        self.source_root = source_root or SourceRoot()
        self.prompter = prompter or NonInteractivePrompter()
        self.console = console or Console()

    def init(self, options: InitOptions | None = None) -> BootstrapReport:
        """Create a new project in ``options.target_dir``.

        Raises:
            InvalidTemplateError: If the template name is unknown
            TemplateNotFoundError: If the template tree is missing
            OSError: If a file cannot be written
        """
        options = options or InitOptions()
        try:
            return self._init(options)
        except Exception as e:
            self._report_failure("initializing project", e)
            raise

    def update(self, options: UpdateOptions | None = None) -> BootstrapReport:
        """Refresh managed files and package.json of an existing project.

        Raises:
            NotAProjectError: If the target has no package.json
            ManifestError: If a package.json cannot be parsed or has the
                wrong shape; nothing is written in that case
            TemplateNotFoundError: If the recorded template does not exist
            OSError: If a file cannot be written
        """
        options = options or UpdateOptions()
        try:
            return self._update(options)
        except Exception as e:
            self._report_failure("updating project", e)
            raise

    def create_or_update(self, options: SyncOptions | None = None) -> BootstrapReport | None:
        """Update the project in ``options.target_dir``, or create one.

        A package.json without the template marker may belong to an
        unrelated project, so updating it needs confirmation unless
        ``options.force`` is set.

        Returns:
            The run report, or None when the user declined the update

        Raises:
            UnmarkedProjectError: If confirmation is needed but prompts are
                disabled
        """
        options = options or SyncOptions()
        manifest_path = options.target_dir / MANIFEST_FILENAME
        if not manifest_path.exists():
            return self.init(options.for_init())

        try:
            project = load_manifest(manifest_path)
            if template_identity(project) is None and not options.force:
                if not self._confirm_unmarked(manifest_path):
                    self.console.print("[yellow]Aborted.[/yellow]")
                    return None
        except (ManifestError, UnmarkedProjectError) as e:
            self._report_failure("updating project", e)
            raise

        return self.update(options.for_update())

    def _init(self, options: InitOptions) -> BootstrapReport:
        target_dir = Path(options.target_dir)
        template = self._resolve_template(options.template)
        project_name = options.project_name or self._ask("Project name", target_dir.name)
        project_title = options.project_title or project_name
        replacements = build_replacements(project_name, project_title)

        self.console.print(
            f"\n[bold blue]Initializing TypeScript Bootstrap for: "
            f"{escape(project_name)}[/bold blue]\n",
        )

        created: list[str] = []
        for relative_path in materialize(self.source_root, template, target_dir, replacements):
            created.append(relative_path)
            self.console.print(f"Created: {escape(self._display_path(target_dir / relative_path))}")

        self._stamp_template_identity(target_dir / MANIFEST_FILENAME, template)
        integrity = write_integrity_manifest(target_dir, self.source_root, template)

        self.console.print("\n[green]✓[/green] Project initialized successfully!")
        self.console.print("\nNext steps:")
        for line in INIT_NEXT_STEPS:
            self.console.print(line)

        return BootstrapReport(template=template, files=created, integrity_path=integrity)

    def _update(self, options: UpdateOptions) -> BootstrapReport:
        target_dir = Path(options.target_dir)
        manifest_path = target_dir / MANIFEST_FILENAME
        if not manifest_path.is_file():
            msg = (
                f"No {MANIFEST_FILENAME} found in {target_dir}. "
                "This doesn't appear to be a valid project."
            )
            raise NotAProjectError(msg, details={"target_dir": str(target_dir)})

        project = load_manifest(manifest_path, role="project")
        template = self._resolve_recorded_template(project, options.template)

        project_name = str(project.get("name") or target_dir.name)
        project_title = str(project.get("description") or project_name)
        replacements = build_replacements(project_name, project_title)

        template_manifest = self._load_template_manifest(template, replacements)

        self.console.print(
            f"\n[bold blue]Updating TypeScript Bootstrap project: "
            f"{escape(project_name)}[/bold blue]\n",
        )

        updated = selective_update(self.source_root, template, target_dir, replacements)

        write_manifest(manifest_path, merge_manifest_data(template_manifest, project))
        updated.append(MANIFEST_FILENAME)

        integrity = write_integrity_manifest(target_dir, self.source_root, template)

        self.console.print("[green]✓[/green] Updated files:")
        for relative_path in updated:
            self.console.print(f"   - {escape(relative_path)}")
        self.console.print("\n[green]✓[/green] Project updated successfully!")
        self.console.print("\nNext steps:")
        for line in UPDATE_NEXT_STEPS:
            self.console.print(line)

        return BootstrapReport(template=template, files=updated, integrity_path=integrity)

    def _load_template_manifest(
        self,
        template: TemplateName,
        replacements: dict[str, str],
    ) -> Manifest:
        """Rendered template package.json, always carrying the template marker."""
        path = self.source_root.template_manifest(template)
        manifest = render_template_manifest(path, replacements) if path.is_file() else {}
        manifest.setdefault(TEMPLATE_MARKER, {"template": template.value})
        return manifest

    def _stamp_template_identity(self, manifest_path: Path, template: TemplateName) -> None:
        """Record the template in a freshly written package.json lacking it."""
        if not manifest_path.is_file():
            return
        manifest = load_manifest(manifest_path)
        if template_identity(manifest) is None:
            manifest[TEMPLATE_MARKER] = {"template": template.value}
            write_manifest(manifest_path, manifest)

    def _resolve_template(self, requested: str | None) -> TemplateName:
        if requested is not None:
            return TemplateName.parse(requested)

        choices = ", ".join(t.value for t in TemplateName)
        answer = self._ask(f"Template [{choices}]", DEFAULT_TEMPLATE.value)
        return TemplateName.parse(answer)

    def _resolve_recorded_template(
        self,
        project: Manifest,
        requested: str | None,
    ) -> TemplateName:
        """Pick the template for an update.

        The template recorded in package.json wins over a requested one.
        """
        requested_template = TemplateName.parse(requested) if requested is not None else None
        recorded = template_identity(project)
        if recorded is None:
            return requested_template or self._resolve_template(None)

        try:
            template = TemplateName(recorded)
        except ValueError as e:
            msg = f'Template "{recorded}" not found. Check "{TEMPLATE_MARKER}" in {MANIFEST_FILENAME}.'
            raise TemplateNotFoundError(msg, details={"template": recorded}) from e

        if requested_template is not None and requested_template is not template:
            self.console.print(
                f"[yellow]Warning:[/yellow] project was generated from the "
                f"'{template.value}' template; ignoring requested '{requested_template.value}'",
            )
        return template

    def _confirm_unmarked(self, manifest_path: Path) -> bool:
        self.console.print(
            f"[yellow]Warning:[/yellow] {escape(str(manifest_path))} has no "
            f"{TEMPLATE_MARKER} marker.",
        )
        self.console.print(
            "Managed configuration files will be overwritten and package.json merged.\n",
        )
        try:
            return self.prompter.confirm("Do you want to continue?")
        except PromptUnavailableError as e:
            msg = (
                f"{manifest_path} was not generated by TypeScript Bootstrap; "
                "rerun interactively or pass --force to update it anyway"
            )
            raise UnmarkedProjectError(msg, details={"path": str(manifest_path)}) from e

    def _ask(self, question: str, default: str) -> str:
        """Ask the prompter, falling back to ``default`` when prompts are disabled."""
        try:
            return self.prompter.ask(question, default=default) or default
        except PromptUnavailableError:
            return default

    def _display_path(self, path: Path) -> str:
        """Path relative to the invocation directory, as printed to the user."""
        try:
            return os.path.relpath(path, Path.cwd())
        except ValueError:
            return str(path)

    def _report_failure(self, action: str, error: Exception) -> None:
        self.console.print(f"[red]Error:[/red] {action} failed: {escape(str(error))}")


def init(
    options: InitOptions | None = None,
    *,
    source_root: SourceRoot | None = None,
    prompter: Prompter | None = None,
    console: Console | None = None,
) -> BootstrapReport:
    """Create a new project. See :meth:`Bootstrapper.init`."""
    return Bootstrapper(source_root, prompter, console).init(options)


def update(
    options: UpdateOptions | None = None,
    *,
    source_root: SourceRoot | None = None,
    prompter: Prompter | None = None,
    console: Console | None = None,
) -> BootstrapReport:
    """Update an existing project. See :meth:`Bootstrapper.update`."""
    return Bootstrapper(source_root, prompter, console).update(options)


def create_or_update(
    options: SyncOptions | None = None,
    *,
    source_root: SourceRoot | None = None,
    prompter: Prompter | None = None,
    console: Console | None = None,
) -> BootstrapReport | None:
    """Update a project, or create it. See :meth:`Bootstrapper.create_or_update`."""
    return Bootstrapper(source_root, prompter, console).create_or_update(options)
