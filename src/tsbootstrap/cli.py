"""TypeScript Bootstrap command-line interface."""

from __future__ import annotations

import re
from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as get_version
from pathlib import Path

import typer
from rich.console import Console
from rich.table import Table

from .bootstrapper import Bootstrapper
from .exceptions import BootstrapError
from .models import InitOptions, SyncOptions, UpdateOptions
from .prompts import NonInteractivePrompter, Prompter, TyperPrompter
from .sources import SourceRoot

app = typer.Typer(
    name="ts-bootstrap",
    help="TypeScript Bootstrap: create TypeScript projects and keep them up to date",
    add_completion=False,
)
console = Console()


def _get_version_string() -> str:
    """Get version string from package metadata or pyproject.toml."""
    try:
        return get_version("typescript-bootstrap")
    except PackageNotFoundError:
        pass

    pyproject_path = Path(__file__).parent.parent.parent / "pyproject.toml"
    if pyproject_path.exists():
        content = pyproject_path.read_text()
        match = re.search(r'version\s*=\s*["\']([^"\']+)["\']', content)
        if match:
            return f"{match.group(1)} (development)"

    return "unknown"


def version_callback(value: bool) -> None:
    """Callback for --version flag."""
    if value:
        console.print(f"TypeScript Bootstrap version {_get_version_string()}")
        raise typer.Exit


@app.callback()
def main_callback(
    version: bool = typer.Option(
        False,
        "--version",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit",
    ),
) -> None:
    """TypeScript Bootstrap: create TypeScript projects and keep them up to date."""


def _bootstrapper(source: Path | None, yes: bool) -> Bootstrapper:
    prompter: Prompter = NonInteractivePrompter() if yes else TyperPrompter()
    return Bootstrapper(SourceRoot(source), prompter, console)


SOURCE_OPTION = typer.Option(
    None,
    "--source",
    help="Template source root (defaults to the bundled templates)",
    exists=True,
    file_okay=False,
    dir_okay=True,
)
YES_OPTION = typer.Option(
    False,
    "--yes",
    "-y",
    help="Never prompt; use defaults for anything not given",
)


@app.command()
def init(
    target_dir: Path | None = typer.Option(
        None,
        "--dir",
        "-d",
        help="Directory to create the project in (defaults to the current directory)",
    ),
    name: str | None = typer.Option(None, "--name", "-n", help="Project name"),
    title: str | None = typer.Option(None, "--title", help="Project title"),
    template: str | None = typer.Option(
        None,
        "--template",
        "-t",
        help="Template to use (typescript or react)",
    ),
    source: Path | None = SOURCE_OPTION,
    yes: bool = YES_OPTION,
) -> None:
    """Create a new project from a template."""
    options = InitOptions(
        project_name=name,
        project_title=title,
        target_dir=target_dir or Path.cwd(),
        template=template,
    )
    try:
        _bootstrapper(source, yes).init(options)
    except (BootstrapError, OSError) as e:
        raise typer.Exit(1) from e


@app.command()
def update(
    target_dir: Path | None = typer.Option(
        None,
        "--dir",
        "-d",
        help="Project to update",
    ),
    template: str | None = typer.Option(
        None,
        "--template",
        "-t",
        help="Template to use when package.json does not record one",
    ),
    source: Path | None = SOURCE_OPTION,
    yes: bool = YES_OPTION,
) -> None:
    """Refresh configuration files and package.json from the template.

    Files under src/ and package.json fields the template does not define
    are never touched.
    """
    options = UpdateOptions(target_dir=target_dir or Path.cwd(), template=template)
    try:
        _bootstrapper(source, yes).update(options)
    except (BootstrapError, OSError) as e:
        raise typer.Exit(1) from e


@app.command()
def sync(
    target_dir: Path | None = typer.Option(
        None,
        "--dir",
        "-d",
        help="Project directory",
    ),
    name: str | None = typer.Option(None, "--name", "-n", help="Project name"),
    title: str | None = typer.Option(None, "--title", help="Project title"),
    template: str | None = typer.Option(
        None,
        "--template",
        "-t",
        help="Template to use (typescript or react)",
    ),
    force: bool = typer.Option(
        False,
        "--force",
        "-f",
        help="Update a package.json without the typescriptBootstrap marker without asking",
    ),
    source: Path | None = SOURCE_OPTION,
    yes: bool = YES_OPTION,
) -> None:
    """Update the project if one exists, otherwise create it."""
    options = SyncOptions(
        project_name=name,
        project_title=title,
        target_dir=target_dir or Path.cwd(),
        template=template,
        force=force,
    )
    try:
        _bootstrapper(source, yes).create_or_update(options)
    except (BootstrapError, OSError) as e:
        raise typer.Exit(1) from e


@app.command()
def templates(source: Path | None = SOURCE_OPTION) -> None:
    """List the available templates."""
    source_root = SourceRoot(source)
    try:
        available = source_root.available_templates()
        table = Table(title="Templates")
        table.add_column("Name", style="cyan")
        table.add_column("Description")
        for template in available:
            table.add_row(template.value, source_root.describe(template))
    except BootstrapError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1) from e

    console.print(table)
