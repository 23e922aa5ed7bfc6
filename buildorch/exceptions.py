"""Build orchestrator exceptions."""

from typing import List, Optional
from dataclasses import dataclass


@dataclass
class ValidationError:
    """Single validation error."""
    message: str
    path: str = ""
    exit_code: int = 2


class BuildError(Exception):
    """Base class for every error raised by the build core."""
    exit_code = 1


class BuildValidationError(BuildError):
    """Raised when build file validation fails.

    This exception is raised by the loader when validation errors occur,
    allowing the CLI to catch it and map to appropriate exit codes.
    """

    def __init__(self, errors: List[ValidationError]):
        self.errors = errors
        self.exit_code = 2  # Default validation exit code

        # Construct error message
        messages = []
        for error in errors:
            messages.append(f"Validation error: {error.message}")

        super().__init__("\n".join(messages))


class ExternalToolFailure(BuildError):
    """An external tool could not run or produced no output.

    Only ever raised inside the VCS probe, which converts it to the
    fallback value.
    """

    def __init__(self, command: List[str], reason: str):
        self.command = list(command)
        self.reason = reason
        super().__init__(f"{' '.join(self.command)}: {reason}")


class UndefinedVariable(BuildError):
    """A placeholder referenced a name that no layer binds."""
    exit_code = 2

    def __init__(self, name: str, file_path: Optional[str] = None):
        self.name = name
        self.file_path = file_path
        message = f"Undefined variable '{name}'"
        if file_path:
            message += f" in {file_path}"
        super().__init__(message)


class MalformedPlaceholder(BuildError):
    """A '${' was opened but never closed before end of content."""
    exit_code = 2

    def __init__(self, file_path: Optional[str] = None, offset: int = 0):
        self.file_path = file_path
        self.offset = offset
        location = f"{file_path}, " if file_path else ""
        super().__init__(f"Unterminated placeholder ({location}offset {offset})")


class UnsupportedResource(BuildError):
    """A matched resource is binary or cannot be decoded with the filtering charset."""
    exit_code = 2

    def __init__(self, file_path: str, reason: str):
        self.file_path = file_path
        self.reason = reason
        super().__init__(f"Cannot filter {file_path}: {reason}")


class ConfigurationError(BuildError):
    """Invalid build graph configuration."""
    exit_code = 2


class AlreadyConfigured(ConfigurationError):
    """A project was handed to the configurator a second time."""

    def __init__(self, project: str):
        self.project = project
        super().__init__(f"Project '{project}' is already configured")
