"""
Build assembly: turns a validated build definition into projects, filter
rules and property layers, and runs the resource-processing pass.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

from .graph import BuildGraphConfigurator, CapabilityRegistry, FilterRule, ProjectHandle, materialize
from .graph.configurator import DEFAULT_CHARSET, DEFAULT_REPOSITORIES
from .properties import load_properties
from .resources import ProcessingReport
from .variables import PropertyNamespace
from .vcs import BuildProvenance, probe_provenance


logger = logging.getLogger(__name__)

DEFAULT_CAPABILITIES = ["java"]
ROOT_PROJECT_NAME = "root"


def load_project_properties(build: Dict[str, Any], base_dir: Path, charset: str = DEFAULT_CHARSET) -> Dict[str, Any]:
    """Root project properties: properties_file first, inline properties on top."""
    properties: Dict[str, Any] = {}
    if build.get('properties_file'):
        properties.update(load_properties(base_dir / build['properties_file'], encoding=charset))
    properties.update(build.get('properties') or {})
    return properties


def create_projects(build: Dict[str, Any], base_dir: Path) -> List[ProjectHandle]:
    """Root project followed by every declared subproject."""
    root_name = build.get('name') or ROOT_PROJECT_NAME
    projects = [ProjectHandle(name=root_name, directory=base_dir, is_root=True)]

    for definition in build.get('projects') or []:
        kwargs = {}
        if 'resources' in definition:
            kwargs['resources_dir'] = definition['resources']
        if 'output' in definition:
            kwargs['output_dir'] = definition['output']
        projects.append(ProjectHandle(
            name=definition['name'],
            directory=base_dir / definition.get('path', definition['name']),
            **kwargs
        ))
    return projects


def create_filter_rules(build: Dict[str, Any]) -> List[FilterRule]:
    return [
        FilterRule(
            patterns=rule['patterns'],
            overrides=rule.get('overrides') or {},
            include=rule.get('include')
        )
        for rule in build.get('filters') or []
    ]


def compose_layers(
    project_properties: Mapping[str, Any],
    provenance: BuildProvenance,
    cli_properties: Optional[Mapping[str, str]] = None
) -> List[Mapping[str, Any]]:
    """Build-wide layers, lowest priority first."""
    return [project_properties, provenance.as_layer(), dict(cli_properties or {})]


@dataclass
class BuildResult:
    """Everything one build invocation configured and produced."""
    projects: List[ProjectHandle]
    namespace: PropertyNamespace
    reports: Dict[str, List[ProcessingReport]] = field(default_factory=dict)

    @property
    def filtered_count(self) -> int:
        return sum(len(report.filtered_files) for reports in self.reports.values() for report in reports)


class BuildRunner:
    """Configures the build graph for a loaded build definition and materializes resources."""

    def __init__(
        self,
        build: Dict[str, Any],
        base_dir: Path,
        cli_properties: Optional[Mapping[str, str]] = None,
        provenance: Optional[BuildProvenance] = None,
        strict: Optional[bool] = None
    ):
        """
        Initialize runner.

        Args:
            build: Validated build definition
            base_dir: Directory holding the build file (root project directory)
            cli_properties: Highest-priority command-line properties
            provenance: Precomputed VCS values (default: probe git in base_dir)
            strict: Override the build file's strict setting
        """
        self.build = build
        self.base_dir = base_dir
        self.cli_properties = dict(cli_properties or {})
        self.charset = build.get('filtering_charset', DEFAULT_CHARSET)
        self.strict = build.get('strict', True) if strict is None else strict
        # Computed once, before any project is configured
        self.provenance = provenance or probe_provenance(base_dir)

        self.registry = CapabilityRegistry()
        errors = self.registry.register_from_build(build.get('declare_capabilities') or {})
        if errors:
            raise ValueError(f"Invalid capability declarations: {'; '.join(errors)}")

    def layers(self) -> List[Mapping[str, Any]]:
        project_properties = load_project_properties(self.build, self.base_dir, self.charset)
        return compose_layers(project_properties, self.provenance, self.cli_properties)

    def configure(self) -> BuildResult:
        """Create and configure every project; nothing is written yet."""
        projects = create_projects(self.build, self.base_dir)
        configurator = BuildGraphConfigurator(self.registry)
        namespace = configurator.configure(
            projects,
            capabilities=self.build.get('capabilities', DEFAULT_CAPABILITIES),
            layers=self.layers(),
            filter_rules=create_filter_rules(self.build),
            repositories=self.build.get('repositories', list(DEFAULT_REPOSITORIES)),
            strict=self.strict,
            charset=self.charset
        )
        return BuildResult(projects=projects, namespace=namespace)

    def run(self, jobs: int = 1) -> BuildResult:
        """Configure every project, then materialize their resources."""
        result = self.configure()
        result.reports = materialize(result.projects, jobs=jobs)
        logger.info(f"Filtered {result.filtered_count} resource(s) across {len(result.projects)} project(s)")
        return result

    def plan(self) -> Dict[str, Dict[int, List[str]]]:
        """Files each rule would filter, per project, without writing anything."""
        result = self.configure()
        planned: Dict[str, Dict[int, List[str]]] = {}
        for project in result.projects:
            planned[project.name] = {}
            for step in project.steps:
                planned[project.name][step.index] = step.select(project.source_path)
        return planned
