"""Build graph configuration module."""

from .capabilities import Capability, CapabilityRegistry
from .configurator import BuildGraphConfigurator, FilterRule, ResourceProcessingStep, materialize
from .project import ProjectHandle, ProjectState

__all__ = [
    "Capability",
    "CapabilityRegistry",
    "BuildGraphConfigurator",
    "FilterRule",
    "ResourceProcessingStep",
    "materialize",
    "ProjectHandle",
    "ProjectState",
]
