"""Project handles: one node of the build graph."""

import logging
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import TYPE_CHECKING, List

from ..exceptions import AlreadyConfigured, ConfigurationError
from ..resources import ProcessingReport, copy_resources, list_files

if TYPE_CHECKING:
    from .configurator import ResourceProcessingStep


logger = logging.getLogger(__name__)

DEFAULT_RESOURCES_DIR = "src/main/resources"
DEFAULT_OUTPUT_DIR = "build/resources/main"


class ProjectState(str, Enum):
    """Configuration lifecycle of a project."""
    UNCONFIGURED = "unconfigured"
    CONFIGURED = "configured"


@dataclass(eq=False)
class ProjectHandle:
    """
    A root project or subproject.

    Attributes:
        name: Unique project name
        directory: Project directory
        resources_dir: Resource sources, relative to directory
        output_dir: Materialized resources, relative to directory
        is_root: Whether this is the root project
    """
    name: str
    directory: Path
    resources_dir: str = DEFAULT_RESOURCES_DIR
    output_dir: str = DEFAULT_OUTPUT_DIR
    is_root: bool = False
    state: ProjectState = ProjectState.UNCONFIGURED
    capabilities: List[str] = field(default_factory=list)
    repositories: List[str] = field(default_factory=list)
    steps: List['ResourceProcessingStep'] = field(default_factory=list)

    @property
    def source_path(self) -> Path:
        return self.directory / self.resources_dir

    @property
    def output_path(self) -> Path:
        return self.directory / self.output_dir

    @property
    def is_configured(self) -> bool:
        return self.state == ProjectState.CONFIGURED

    def mark_configured(self) -> None:
        """
        Transition Unconfigured -> Configured.

        Raises:
            AlreadyConfigured: If the project was configured before
        """
        if self.is_configured:
            raise AlreadyConfigured(self.name)
        self.state = ProjectState.CONFIGURED

    def materialize(self) -> List[ProcessingReport]:
        """
        Copy resources to the output location and run every registered
        resource-processing step in registration order.

        Raises:
            ConfigurationError: If the project has not been configured
        """
        if not self.is_configured:
            raise ConfigurationError(f"Project '{self.name}' must be configured before materializing resources")

        copy_resources(self.source_path, self.output_path)
        candidates = list_files(self.source_path)

        reports = []
        for step in self.steps:
            reports.append(step.run(self, candidates))
        return reports
