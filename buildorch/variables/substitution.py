"""
Placeholder substitution for resource filtering.
Replaces ${name} references with values from a PropertyNamespace in a
single left-to-right pass. Inserted values are never re-scanned.
"""

import re
from typing import List, Optional, Set

from ..exceptions import MalformedPlaceholder, UndefinedVariable
from .namespace import PropertyNamespace


class SubstitutionEngine:
    """
    Substitutes ${name} placeholders in text.

    Policy for names no layer binds:
    - strict: raise UndefinedVariable(name, file_path)
    - lenient: leave the placeholder untouched and report it in `unresolved`

    There is no escape syntax: any literal '${...}' is a placeholder.
    """

    # The name runs to the first '}'; a missing '}' leaves group 2 empty
    PLACEHOLDER_PATTERN = re.compile(r'\$\{([^}]*)(\})?')

    def __init__(self):
        """Initialize the engine."""
        self.unresolved: Set[str] = set()

    def apply(
        self,
        content: str,
        namespace: PropertyNamespace,
        strict: bool = True,
        file_path: Optional[str] = None
    ) -> str:
        """
        Substitute every placeholder in content.

        Args:
            content: Text to filter
            namespace: Resolved property namespace
            strict: Fail on undefined names instead of leaving them in place
            file_path: Path reported in errors

        Returns:
            Content with placeholders replaced

        Raises:
            UndefinedVariable: Strict mode and a name is not bound
            MalformedPlaceholder: A '${' is never closed
        """
        self.unresolved.clear()

        if '${' not in content:
            return content

        def replace_placeholder(match):
            if match.group(2) is None:
                raise MalformedPlaceholder(file_path, match.start())

            name = match.group(1)
            try:
                return namespace.resolve(name)
            except UndefinedVariable:
                if strict:
                    raise UndefinedVariable(name, file_path)
                self.unresolved.add(name)
                return match.group(0)

        return self.PLACEHOLDER_PATTERN.sub(replace_placeholder, content)

    def find_placeholders(self, content: str) -> List[str]:
        """Names of well-formed placeholders, in order of appearance."""
        return [
            match.group(1)
            for match in self.PLACEHOLDER_PATTERN.finditer(content)
            if match.group(2) is not None
        ]


def apply(
    content: str,
    namespace: PropertyNamespace,
    strict: bool = True,
    file_path: Optional[str] = None
) -> str:
    """Convenience function running a fresh SubstitutionEngine."""
    return SubstitutionEngine().apply(content, namespace, strict=strict, file_path=file_path)
