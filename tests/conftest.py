"""Shared fixtures: a small template source root and a quiet console."""

import io
import json
from pathlib import Path

import pytest
from rich.console import Console

from tsbootstrap.sources import SourceRoot


def write_tree(root: Path, files: dict[str, str]) -> None:
    """Create files under root from a relative-path to content mapping."""
    for relative_path, content in files.items():
        path = root / relative_path
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")


def template_package_json(template: str, extra_deps: dict[str, str] | None = None) -> str:
    """Template package.json with placeholders and the template marker."""
    data = {
        "name": "{{PROJECT_NAME}}",
        "version": "0.1.0",
        "description": "{{PROJECT_TITLE}}",
        "scripts": {
            "dev": "tsx watch src/main.ts" if template == "typescript" else "vite",
            "build": "vite build",
            "test": "vitest",
        },
        "devDependencies": {"typescript": "^5.7.2", "vitest": "^2.1.8"},
        "typescriptBootstrap": {"template": template},
    }
    if extra_deps:
        data["dependencies"] = extra_deps
    return json.dumps(data, indent=2)


SOURCE_FILES = {
    "templates/typescript/package.json": template_package_json("typescript"),
    "templates/typescript/tsconfig.json": '{"compilerOptions": {"strict": true}}\n',
    "templates/typescript/vite.config.ts": "// vite config for {{PROJECT_NAME}}\n",
    "templates/typescript/vitest.config.ts": "// vitest config\n",
    "templates/typescript/README.md": "# {{PROJECT_TITLE}}\n",
    "templates/typescript/src/main.ts": "console.log('{{PROJECT_TITLE}}');\n",
    "templates/typescript/_vscode/settings.json": '{"editor.formatOnSave": true}\n',
    "templates/react/package.json": template_package_json(
        "react",
        {"react": "^18.3.1", "react-dom": "^18.3.1"},
    ),
    "templates/react/tsconfig.json": '{"compilerOptions": {"jsx": "react-jsx"}}\n',
    "templates/react/vite.config.ts": "// react vite config\n",
    "templates/react/vitest.config.ts": "// react vitest config\n",
    "templates/react/index.html": "<title>{{PROJECT_TITLE}}</title>\n",
    "templates/react/src/main.tsx": "<h1>{{PROJECT_TITLE}}</h1>\n",
    "shared/github/workflows/ci.yml": "name: CI\n",
    "shared/github/workflows/publish.yml": "name: Publish\n",
    "shared/github/copilot-instructions.md": "# Instructions for {{PROJECT_TITLE}}\n",
    "shared/husky/pre-commit": "node .husky/pre-commit.cjs\n",
    "shared/scripts/prepare.cjs": "// prepare\n",
    "shared/eslint.config.js": "export default [];\n",
    "shared/_gitignore": "node_modules/\n",
    "shared/test.setup.ts": "// test setup\n",
}


@pytest.fixture
def source_dir(tmp_path: Path) -> Path:
    """A template source root using the default layout."""
    root = tmp_path / "source"
    write_tree(root, SOURCE_FILES)
    return root


@pytest.fixture
def source_root(source_dir: Path) -> SourceRoot:
    return SourceRoot(source_dir)


@pytest.fixture
def project_dir(tmp_path: Path) -> Path:
    """An empty directory to generate a project into."""
    path = tmp_path / "demo"
    path.mkdir()
    return path


@pytest.fixture
def output() -> io.StringIO:
    return io.StringIO()


@pytest.fixture
def console(output: io.StringIO) -> Console:
    """Console capturing output without wrapping or colour."""
    return Console(file=output, width=200, soft_wrap=True, no_color=True, highlight=False)
