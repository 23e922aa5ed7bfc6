"""
Capability registry.

A capability is a named build behaviour (compilation, packaging) wired into
a project by the host build system. The orchestrator only records which
capabilities each project declares; this registry holds the known tags.
"""

import logging
from dataclasses import dataclass
from typing import Dict, Iterable, List


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Capability:
    """
    Capability declaration.

    Attributes:
        tag: Capability identifier (e.g., 'java', 'shadow')
        description: Human-readable summary of what the host wires in
    """
    tag: str
    description: str = ""

    def validate(self) -> List[str]:
        errors = []
        if not self.tag or not self.tag.strip():
            errors.append("Capability tag cannot be empty")
        elif self.tag != self.tag.strip():
            errors.append(f"Capability '{self.tag}': tag cannot have surrounding whitespace")
        return errors


class CapabilityRegistry:
    """Known capability tags: built-ins plus those declared by the build file."""

    def __init__(self):
        """Initialize registry with the built-in capabilities."""
        self._capabilities: Dict[str, Capability] = self._load_builtin_capabilities()

    def _load_builtin_capabilities(self) -> Dict[str, Capability]:
        builtins = [
            Capability("java", "compile and package Java sources"),
            Capability("compile", "compile project sources"),
            Capability("package", "bundle compiled output into an artifact"),
            Capability("shadow", "bundle the project and its dependencies into a single artifact"),
        ]
        return {capability.tag: capability for capability in builtins}

    def register(self, capability: Capability) -> None:
        """
        Register a capability.

        Raises:
            ValueError: If the capability is invalid
        """
        errors = capability.validate()
        if errors:
            raise ValueError(f"Invalid capability: {'; '.join(errors)}")

        self._capabilities[capability.tag] = capability
        logger.debug(f"Registered capability: {capability.tag}")

    def register_from_build(self, declared: Dict[str, str]) -> List[str]:
        """
        Register capabilities declared in the build file.

        Returns:
            List of validation errors (empty if all valid)
        """
        errors = []
        for tag, description in declared.items():
            capability = Capability(tag=str(tag), description=str(description or ""))
            validation_errors = capability.validate()
            if validation_errors:
                errors.extend(validation_errors)
            else:
                self.register(capability)
        return errors

    def has(self, tag: str) -> bool:
        return tag in self._capabilities

    def unknown(self, tags: Iterable[str]) -> List[str]:
        """Tags not present in the registry, sorted."""
        return sorted({tag for tag in tags if not self.has(tag)})

    def list_tags(self) -> List[str]:
        return sorted(self._capabilities)
