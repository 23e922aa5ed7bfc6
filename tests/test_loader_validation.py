"""Tests for build file loading and strict schema validation."""

import tempfile
from pathlib import Path

import pytest

from buildorch.exceptions import BuildValidationError
from buildorch.loader import BuildLoader


VALID_BUILD = """
version: "1.0"
name: custom-fishing
properties_file: gradle.properties
properties:
  config_version: 38
capabilities: [java, shadow]
repositories: [maven-central]
filtering_charset: UTF-8
strict: true
projects:
  - name: api
  - name: core
    path: modules/core
    resources: resources
    output: out/resources
filters:
  - patterns: ["custom-fishing.properties"]
  - patterns: ["*.yml", "*/*.yml"]
    include: [project_version, config_version]
    overrides:
      channel: stable
"""


class TestBuildLoader:
    """Test build file validation."""

    def setup_method(self):
        self.tmpdir = tempfile.TemporaryDirectory()
        self.workspace = Path(self.tmpdir.name)

    def teardown_method(self):
        self.tmpdir.cleanup()

    def _load(self, content: str):
        build_file = self.workspace / "build.yaml"
        build_file.write_text(content)
        return BuildLoader(self.workspace).load(build_file)

    def _errors(self, content: str):
        with pytest.raises(BuildValidationError) as exc_info:
            self._load(content)
        assert exc_info.value.exit_code == 2
        return [error.message for error in exc_info.value.errors]

    def test_valid_build_loads(self):
        build = self._load(VALID_BUILD)

        assert build['name'] == 'custom-fishing'
        assert build['projects'][1]['path'] == 'modules/core'
        assert build['filters'][1]['include'] == ['project_version', 'config_version']

    def test_minimal_build(self):
        build = self._load('version: "1.0"\nfilters:\n  - patterns: ["*.yml"]\n')
        assert build['filters'] == [{'patterns': ['*.yml']}]

    def test_version_required(self):
        errors = self._errors('filters:\n  - patterns: ["*.yml"]\n')
        assert "'version' field is required" in errors

    def test_unsupported_version(self):
        errors = self._errors('version: "9.9"\nfilters:\n  - patterns: ["*.yml"]\n')
        assert any("Unsupported version '9.9'" in e for e in errors)

    def test_numeric_version_rejected(self):
        errors = self._errors('version: 1.0\nfilters:\n  - patterns: ["*.yml"]\n')
        assert any("must be a string" in e for e in errors)

    def test_unknown_top_level_field(self):
        errors = self._errors('version: "1.0"\nplugins: [x]\nfilters:\n  - patterns: ["*.yml"]\n')
        assert "Unknown field 'plugins' at version '1.0'" in errors

    def test_filters_required(self):
        errors = self._errors('version: "1.0"\n')
        assert "'filters' field is required and must not be empty" in errors

    def test_empty_patterns_rejected(self):
        errors = self._errors('version: "1.0"\nfilters:\n  - patterns: []\n')
        assert "Filter 0: 'patterns' is required and must not be empty" in errors

    def test_unknown_filter_field(self):
        errors = self._errors('version: "1.0"\nfilters:\n  - patterns: ["*.yml"]\n    expand: all\n')
        assert "Filter 0: unknown field 'expand'" in errors

    def test_unsafe_patterns_rejected(self):
        errors = self._errors('version: "1.0"\nfilters:\n  - patterns: ["/etc/*.yml", "../*.yml"]\n')
        assert any("absolute paths not allowed" in e for e in errors)
        assert any("parent directory traversal" in e for e in errors)

    def test_project_validation(self):
        errors = self._errors("""
version: "1.0"
projects:
  - name: api
  - name: api
  - path: nameless
  - name: bad
    path: ../outside
    jar: x
filters:
  - patterns: ["*.yml"]
""")
        assert "Duplicate project name 'api'" in errors
        assert "Project 2 missing required 'name' field" in errors
        assert "Project 'bad': unknown field 'jar'" in errors
        assert any("project 'bad' path" in e and ".." in e for e in errors)

    def test_property_values_must_be_scalars(self):
        errors = self._errors('version: "1.0"\nproperties:\n  nested: {a: 1}\nfilters:\n  - patterns: ["*.yml"]\n')
        assert any("property 'nested' must be a scalar value" in e for e in errors)

    def test_unknown_charset(self):
        errors = self._errors('version: "1.0"\nfiltering_charset: klingon-8\nfilters:\n  - patterns: ["*.yml"]\n')
        assert "Unknown filtering charset 'klingon-8'" in errors

    def test_strict_must_be_boolean(self):
        errors = self._errors('version: "1.0"\nstrict: "yes"\nfilters:\n  - patterns: ["*.yml"]\n')
        assert "'strict' must be a boolean" in errors

    def test_capabilities_must_be_strings(self):
        errors = self._errors('version: "1.0"\ncapabilities: [java, 3]\nfilters:\n  - patterns: ["*.yml"]\n')
        assert "'capabilities'[1] must be a non-empty string" in errors

    def test_non_mapping_document(self):
        errors = self._errors("- just\n- a list\n")
        assert errors == ["Build file must be a YAML object/dictionary"]

    def test_invalid_yaml(self):
        errors = self._errors("version: [unclosed\n")
        assert errors[0].startswith("Failed to load build file")

    def test_all_errors_collected(self):
        errors = self._errors('version: "1.0"\nstrict: 1\nbogus: true\n')
        assert len(errors) == 3
