"""Build file loader and strict schema validation."""

import codecs
from pathlib import Path
from typing import Any, Dict, List, Set
import yaml

from buildorch.exceptions import ValidationError, BuildValidationError


class BuildLoader:
    """Loads and validates build YAML with strict schema enforcement."""

    SUPPORTED_VERSIONS = {"1.0"}

    KNOWN_FIELDS = {
        'version', 'name', 'properties', 'properties_file', 'capabilities',
        'declare_capabilities', 'repositories', 'filtering_charset', 'strict',
        'projects', 'filters'
    }
    PROJECT_FIELDS = {'name', 'path', 'resources', 'output'}
    FILTER_FIELDS = {'patterns', 'overrides', 'include'}

    def __init__(self, workspace: Path):
        """Initialize loader with workspace root."""
        self.workspace = workspace.resolve()
        self.errors: List[ValidationError] = []

    def load(self, build_path: Path) -> Dict[str, Any]:
        """Load and validate build YAML."""
        self.errors = []
        try:
            with open(build_path, 'r', encoding='utf-8') as f:
                build = yaml.safe_load(f)
        except (OSError, yaml.YAMLError) as e:
            self._add_error(f"Failed to load build file: {e}")
            self._raise_validation_errors()

        if build is None or not isinstance(build, dict):
            self._add_error("Build file must be a YAML object/dictionary")
            self._raise_validation_errors()

        version = build.get('version')
        if not version:
            self._add_error("'version' field is required")
            version = ""
        elif not isinstance(version, str):
            self._add_error(f"'version' field must be a string, got {type(version).__name__}")
            version = ""
        elif version not in self.SUPPORTED_VERSIONS:
            self._add_error(f"Unsupported version '{version}'. Supported: {sorted(self.SUPPORTED_VERSIONS)}")

        self._validate_top_level(build, version)

        if 'projects' in build:
            self._validate_projects(build['projects'])

        filters = build.get('filters')
        if not filters:
            self._add_error("'filters' field is required and must not be empty")
        else:
            self._validate_filters(filters)

        if self.errors:
            self._raise_validation_errors()

        return build

    def _validate_top_level(self, build: Dict[str, Any], version: str):
        """Validate top-level build fields."""
        if version:
            for key in build.keys():
                if key not in self.KNOWN_FIELDS:
                    self._add_error(f"Unknown field '{key}' at version '{version}'")

        if 'name' in build and not isinstance(build['name'], str):
            self._add_error("'name' must be a string")

        if 'properties' in build:
            self._validate_property_map(build['properties'], "'properties'")

        if 'properties_file' in build:
            if not isinstance(build['properties_file'], str):
                self._add_error("'properties_file' must be a string")
            else:
                self._validate_path_safety(build['properties_file'], "'properties_file'")

        for list_field in ['capabilities', 'repositories']:
            if list_field in build:
                self._validate_string_list(build[list_field], f"'{list_field}'")

        if 'declare_capabilities' in build:
            declared = build['declare_capabilities']
            if not isinstance(declared, dict):
                self._add_error("'declare_capabilities' must be a dictionary of tag to description")

        if 'filtering_charset' in build:
            charset = build['filtering_charset']
            if not isinstance(charset, str):
                self._add_error("'filtering_charset' must be a string")
            else:
                try:
                    codecs.lookup(charset)
                except LookupError:
                    self._add_error(f"Unknown filtering charset '{charset}'")

        if 'strict' in build and not isinstance(build['strict'], bool):
            self._add_error("'strict' must be a boolean")

    def _validate_projects(self, projects: Any):
        """Validate subproject definitions."""
        if not isinstance(projects, list):
            self._add_error("'projects' must be a list")
            return

        project_names: Set[str] = set()

        for i, project in enumerate(projects):
            if not isinstance(project, dict):
                self._add_error(f"Project {i} must be a dictionary")
                continue

            name = project.get('name')
            if not name:
                self._add_error(f"Project {i} missing required 'name' field")
                continue
            if not isinstance(name, str):
                self._add_error(f"Project {i} name must be a string, got {type(name).__name__}")
                continue
            if name in project_names:
                self._add_error(f"Duplicate project name '{name}'")
            project_names.add(name)

            for key in project.keys():
                if key not in self.PROJECT_FIELDS:
                    self._add_error(f"Project '{name}': unknown field '{key}'")

            for path_field in ['path', 'resources', 'output']:
                if path_field in project:
                    value = project[path_field]
                    if not isinstance(value, str) or not value:
                        self._add_error(f"Project '{name}': '{path_field}' must be a non-empty string")
                    else:
                        self._validate_path_safety(value, f"project '{name}' {path_field}")

    def _validate_filters(self, filters: Any):
        """Validate resource filter rules."""
        if not isinstance(filters, list):
            self._add_error("'filters' must be a list")
            return

        for i, rule in enumerate(filters):
            context = f"Filter {i}"
            if not isinstance(rule, dict):
                self._add_error(f"{context} must be a dictionary")
                continue

            for key in rule.keys():
                if key not in self.FILTER_FIELDS:
                    self._add_error(f"{context}: unknown field '{key}'")

            patterns = rule.get('patterns')
            if not patterns:
                self._add_error(f"{context}: 'patterns' is required and must not be empty")
            elif self._validate_string_list(patterns, f"{context} patterns"):
                for pattern in patterns:
                    self._validate_path_safety(pattern, f"{context} pattern '{pattern}'")

            if 'overrides' in rule:
                self._validate_property_map(rule['overrides'], f"{context} overrides")

            if 'include' in rule:
                self._validate_string_list(rule['include'], f"{context} include")

    def _validate_property_map(self, properties: Any, context: str):
        if not isinstance(properties, dict):
            self._add_error(f"{context} must be a dictionary")
            return
        for key, value in properties.items():
            if not isinstance(key, str) or not key:
                self._add_error(f"{context}: property names must be non-empty strings, got {key!r}")
            elif isinstance(value, (dict, list)):
                self._add_error(f"{context}: property '{key}' must be a scalar value")

    def _validate_string_list(self, value: Any, context: str) -> bool:
        """Validate a list of non-empty strings; returns True when valid."""
        if not isinstance(value, list):
            self._add_error(f"{context} must be a list")
            return False
        valid = True
        for i, item in enumerate(value):
            if not isinstance(item, str) or not item:
                self._add_error(f"{context}[{i}] must be a non-empty string")
                valid = False
        return valid

    def _validate_path_safety(self, path: str, context: str):
        """Reject absolute paths and parent directory traversal."""
        if Path(path).is_absolute():
            self._add_error(f"{context}: absolute paths not allowed")

        if '..' in Path(path).parts:
            self._add_error(f"{context}: parent directory traversal ('..') not allowed")

    def _add_error(self, message: str, path: str = "", exit_code: int = 2):
        """Add validation error."""
        self.errors.append(ValidationError(message, path, exit_code))

    def _raise_validation_errors(self):
        """Raise BuildValidationError with accumulated errors."""
        raise BuildValidationError(self.errors)
