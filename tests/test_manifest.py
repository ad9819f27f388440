"""Tests for package.json loading and merging."""

import json
from pathlib import Path

import pytest

from tsbootstrap.exceptions import ManifestParseError, ManifestValidationError
from tsbootstrap.manifest import (
    TEMPLATE_MARKER,
    dump_manifest,
    load_manifest,
    merge_manifest,
    merge_manifest_data,
    render_template_manifest,
    template_identity,
)


class TestMergeManifestData:
    """Test the field-level merge rules."""

    @pytest.fixture
    def template(self) -> dict:
        return {
            "name": "template-name",
            "version": "0.0.0",
            "scripts": {"build": "vite build", "test": "vitest"},
            "devDependencies": {"typescript": "^5.7.2", "vitest": "^2.1.8"},
            TEMPLATE_MARKER: {"template": "typescript"},
        }

    @pytest.fixture
    def target(self) -> dict:
        return {
            "name": "my-app",
            "version": "3.2.1",
            "description": "Mine",
            "scripts": {"build": "tsc", "deploy": "./deploy.sh"},
            "devDependencies": {"typescript": "^4.0.0", "prettier": "^3.0.0"},
            "license": "MIT",
        }

    def test_template_wins_on_conflict(self, template: dict, target: dict) -> None:
        """Test template values replace the project's for shared keys."""
        merged = merge_manifest_data(template, target)
        assert merged["scripts"]["build"] == "vite build"
        assert merged["devDependencies"]["typescript"] == "^5.7.2"

    def test_custom_entries_survive(self, template: dict, target: dict) -> None:
        """Test keys only the project has are kept."""
        merged = merge_manifest_data(template, target)
        assert merged["scripts"]["deploy"] == "./deploy.sh"
        assert merged["devDependencies"]["prettier"] == "^3.0.0"
        assert merged["scripts"]["test"] == "vitest"

    def test_other_fields_are_untouched(self, template: dict, target: dict) -> None:
        """Test non-category fields keep the project's values."""
        merged = merge_manifest_data(template, target)
        assert merged["name"] == "my-app"
        assert merged["version"] == "3.2.1"
        assert merged["description"] == "Mine"
        assert merged["license"] == "MIT"

    def test_marker_added_when_missing(self, template: dict, target: dict) -> None:
        """Test the template marker is recorded on first merge."""
        merged = merge_manifest_data(template, target)
        assert merged[TEMPLATE_MARKER] == {"template": "typescript"}

    def test_existing_marker_is_kept(self, template: dict, target: dict) -> None:
        """Test the first recorded template is never replaced."""
        target[TEMPLATE_MARKER] = {"template": "react"}
        merged = merge_manifest_data(template, target)
        assert merged[TEMPLATE_MARKER] == {"template": "react"}

    def test_category_absent_from_both_stays_absent(self, template: dict, target: dict) -> None:
        """Test no empty category is introduced."""
        merged = merge_manifest_data(template, target)
        assert "dependencies" not in merged

    def test_category_only_in_template(self, template: dict, target: dict) -> None:
        """Test a category the project lacks is copied from the template."""
        template["dependencies"] = {"react": "^18.3.1"}
        merged = merge_manifest_data(template, target)
        assert merged["dependencies"] == {"react": "^18.3.1"}

    def test_category_only_in_target(self, template: dict, target: dict) -> None:
        """Test a category the template lacks is kept as is."""
        target["dependencies"] = {"lodash": "^4.17.21"}
        merged = merge_manifest_data(template, target)
        assert merged["dependencies"] == {"lodash": "^4.17.21"}

    def test_inputs_are_not_modified(self, template: dict, target: dict) -> None:
        """Test merging returns a new document."""
        before_template = json.loads(json.dumps(template))
        before_target = json.loads(json.dumps(target))
        merge_manifest_data(template, target)
        assert template == before_template
        assert target == before_target

    def test_key_order_follows_target(self, template: dict, target: dict) -> None:
        """Test project key order is kept and new keys are appended."""
        merged = merge_manifest_data(template, target)
        assert list(merged)[:6] == list(target)
        assert list(merged)[-1] == TEMPLATE_MARKER

    def test_merge_is_idempotent(self, template: dict, target: dict) -> None:
        """Test merging the result again changes nothing."""
        once = merge_manifest_data(template, target)
        assert merge_manifest_data(template, once) == once


class TestLoadManifest:
    """Test reading package.json files."""

    def test_valid(self, tmp_path: Path) -> None:
        """Test a valid manifest is parsed."""
        path = tmp_path / "package.json"
        path.write_text('{"name": "x", "scripts": {"dev": "vite"}}')
        assert load_manifest(path) == {"name": "x", "scripts": {"dev": "vite"}}

    def test_invalid_json(self, tmp_path: Path) -> None:
        """Test malformed JSON raises a parse error with guidance."""
        path = tmp_path / "package.json"
        path.write_text("{ invalid json }")
        with pytest.raises(ManifestParseError) as exc_info:
            load_manifest(path)
        message = str(exc_info.value)
        assert "Failed to parse package.json" in message
        assert "valid JSON format" in message
        assert exc_info.value.details["role"] == "project"

    def test_wrong_category_shape(self, tmp_path: Path) -> None:
        """Test a merged category that is not an object is rejected."""
        path = tmp_path / "package.json"
        path.write_text('{"scripts": ["build"]}')
        with pytest.raises(ManifestValidationError, match="scripts"):
            load_manifest(path)

    def test_non_object_document(self, tmp_path: Path) -> None:
        """Test a top-level array is rejected."""
        path = tmp_path / "package.json"
        path.write_text("[]")
        with pytest.raises(ManifestValidationError):
            load_manifest(path)

    def test_template_identity(self) -> None:
        """Test reading the recorded template."""
        assert template_identity({TEMPLATE_MARKER: {"template": "react"}}) == "react"
        assert template_identity({"name": "x"}) is None


class TestRenderTemplateManifest:
    """Test placeholder resolution in template manifests."""

    def test_placeholders_resolved(self, tmp_path: Path) -> None:
        """Test name and description placeholders are substituted."""
        path = tmp_path / "package.json"
        path.write_text(
            json.dumps({"name": "{{PROJECT_NAME}}", "description": "{{PROJECT_TITLE}}"}),
        )
        rendered = render_template_manifest(
            path,
            {"PROJECT_NAME": "demo", "PROJECT_TITLE": "Demo App"},
        )
        assert rendered == {"name": "demo", "description": "Demo App"}

    def test_values_are_json_escaped(self, tmp_path: Path) -> None:
        """Test quotes and backslashes in values keep the document valid."""
        path = tmp_path / "package.json"
        path.write_text(json.dumps({"description": "{{PROJECT_TITLE}}"}))
        rendered = render_template_manifest(path, {"PROJECT_TITLE": 'A "quoted" \\ title'})
        assert rendered["description"] == 'A "quoted" \\ title'


class TestMergeManifest:
    """Test merging files on disk."""

    def test_merge_writes_target(self, tmp_path: Path) -> None:
        """Test the merged manifest replaces the project file."""
        template_path = tmp_path / "template.json"
        template_path.write_text(
            json.dumps(
                {
                    "name": "{{PROJECT_NAME}}",
                    "scripts": {"dev": "vite"},
                    TEMPLATE_MARKER: {"template": "react"},
                },
            ),
        )
        target_path = tmp_path / "package.json"
        target_path.write_text(json.dumps({"name": "mine", "scripts": {"lint": "eslint ."}}))

        merged = merge_manifest(template_path, target_path, {"PROJECT_NAME": "mine"})

        on_disk = json.loads(target_path.read_text())
        assert on_disk == merged
        assert on_disk["scripts"] == {"lint": "eslint .", "dev": "vite"}
        assert on_disk[TEMPLATE_MARKER] == {"template": "react"}
        assert target_path.read_text().endswith("}\n")

    def test_invalid_target_is_not_written(self, tmp_path: Path) -> None:
        """Test a malformed project manifest is left untouched."""
        template_path = tmp_path / "template.json"
        template_path.write_text("{}")
        target_path = tmp_path / "package.json"
        target_path.write_text("{ broken")

        with pytest.raises(ManifestParseError):
            merge_manifest(template_path, target_path, {})
        assert target_path.read_text() == "{ broken"

    def test_dump_keeps_unicode(self) -> None:
        """Test non-ASCII text is written as is with a trailing newline."""
        text = dump_manifest({"description": "Café"})
        assert text == '{\n  "description": "Café"\n}\n'
