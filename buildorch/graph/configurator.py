"""
Build graph configuration.

Applies one uniform configuration (capabilities, repositories, resource
filter rules) to the root project and every subproject, then materializes
their resources.
"""

import concurrent.futures
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence

from ..exceptions import AlreadyConfigured, ConfigurationError
from ..resources import ProcessingReport, ResourceMatcher, ResourceProcessor
from ..variables import PropertyNamespace
from .capabilities import CapabilityRegistry
from .project import ProjectHandle


logger = logging.getLogger(__name__)

DEFAULT_REPOSITORIES = ("maven-central",)
DEFAULT_CHARSET = "utf-8"


@dataclass
class FilterRule:
    """
    Resource filter rule.

    Attributes:
        patterns: Glob patterns selecting the files to filter
        overrides: Highest-priority properties for this rule only
        include: If set, the only build-wide properties the rule can see
    """
    patterns: Sequence[str]
    overrides: Mapping[str, Any] = field(default_factory=dict)
    include: Optional[Sequence[str]] = None

    def __post_init__(self):
        self.patterns = tuple(self.patterns)
        self.overrides = dict(self.overrides)
        if self.include is not None:
            self.include = tuple(self.include)

    def namespace_for(self, build_namespace: PropertyNamespace) -> PropertyNamespace:
        """
        Compose the namespace this rule substitutes from.

        Included names no layer binds are left out, so a placeholder using
        one is reported by the substitution engine against the file it
        appears in, under the build's strict setting.
        """
        namespace = build_namespace
        if self.include is not None:
            namespace = namespace.restricted(self.include, strict=False)
        return namespace.with_layer(self.overrides)


@dataclass(frozen=True)
class ResourceProcessingStep:
    """One filter rule installed on one project."""
    rule: FilterRule
    build_namespace: PropertyNamespace
    index: int
    strict: bool = True
    charset: str = DEFAULT_CHARSET

    def _processor(self) -> ResourceProcessor:
        return ResourceProcessor(
            ResourceMatcher(self.rule.patterns),
            charset=self.charset,
            strict=self.strict
        )

    def select(self, root: Path) -> List[str]:
        """Files under root the rule would filter."""
        return self._processor().select(root)

    def run(self, project: ProjectHandle, candidates: Optional[List[str]] = None) -> ProcessingReport:
        """Filter the project's materialized resources matched by the rule."""
        namespace = self.rule.namespace_for(self.build_namespace)
        return self._processor().process(
            project.output_path,
            namespace,
            project=project.name,
            rule_index=self.index,
            candidates=candidates
        )


class BuildGraphConfigurator:
    """Configures every project of a build graph exactly once."""

    def __init__(self, registry: Optional[CapabilityRegistry] = None):
        """
        Initialize configurator.

        Args:
            registry: Known capabilities (default: built-ins only)
        """
        self.registry = registry or CapabilityRegistry()

    def configure(
        self,
        projects: Sequence[ProjectHandle],
        capabilities: Iterable[str],
        layers: Sequence[Mapping[str, Any]],
        filter_rules: Sequence[FilterRule],
        repositories: Sequence[str] = DEFAULT_REPOSITORIES,
        strict: bool = True,
        charset: str = DEFAULT_CHARSET
    ) -> PropertyNamespace:
        """
        Apply capabilities, repositories and filter rules to every project.

        All checks run before any project is modified.

        Args:
            projects: Root project and subprojects
            capabilities: Capability tags each project declares
            layers: Build-wide property layers, lowest priority first
            filter_rules: Rules installed as resource-processing steps, in order
            repositories: Package sources each project uses
            strict: Fail on undefined variables instead of leaving them
            charset: Filtering charset

        Returns:
            The build-wide namespace the steps were configured with

        Raises:
            AlreadyConfigured: A project is configured already or listed twice
            ConfigurationError: Unknown capability tag
        """
        capability_tags = list(dict.fromkeys(capabilities))
        unknown = self.registry.unknown(capability_tags)
        if unknown:
            raise ConfigurationError(
                f"Unknown capabilities: {', '.join(unknown)}. Known: {', '.join(self.registry.list_tags())}"
            )

        seen = set()
        for project in projects:
            if project.is_configured or project.name in seen:
                raise AlreadyConfigured(project.name)
            seen.add(project.name)

        build_namespace = PropertyNamespace.compose(layers)
        rules = list(filter_rules)

        for project in projects:
            project.capabilities = list(capability_tags)
            project.repositories = list(repositories)
            project.steps = [
                ResourceProcessingStep(
                    rule=rule,
                    build_namespace=build_namespace,
                    index=index,
                    strict=strict,
                    charset=charset
                )
                for index, rule in enumerate(rules)
            ]
            project.mark_configured()
            logger.debug(
                f"Configured project '{project.name}': capabilities={project.capabilities} "
                f"repositories={project.repositories} filter_rules={len(project.steps)}"
            )

        logger.info(f"Configured {len(projects)} project(s) with {len(rules)} filter rule(s)")
        return build_namespace


def materialize(projects: Sequence[ProjectHandle], jobs: int = 1) -> Dict[str, List[ProcessingReport]]:
    """
    Materialize resources for every project.

    Projects are independent and run on a thread pool when jobs > 1; the
    steps of one project always run sequentially.

    Returns:
        Reports per project name, in project order
    """
    if jobs <= 1 or len(projects) <= 1:
        return {project.name: project.materialize() for project in projects}

    results: Dict[str, List[ProcessingReport]] = {}
    with concurrent.futures.ThreadPoolExecutor(max_workers=jobs) as executor:
        futures = {project.name: executor.submit(project.materialize) for project in projects}
        for project in projects:
            results[project.name] = futures[project.name].result()
    return results
