"""
Version-control probe.
Runs git to obtain the short commit hash and the configured user name that
are stamped into filtered resources. A failing probe never aborts the build:
it yields the fallback value instead.
"""

import logging
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional, Sequence

from ..exceptions import ExternalToolFailure


logger = logging.getLogger(__name__)

UNKNOWN = "Unknown"
DEFAULT_TIMEOUT_SEC = 10

VERSION_BANNER_COMMAND = ["git", "rev-parse", "--short=8", "HEAD"]
BUILDER_IDENTITY_COMMAND = ["git", "config", "user.name"]

# Property names the provenance layer binds
GIT_VERSION_PROPERTY = "git_version"
BUILDER_PROPERTY = "builder"


def _run(command: List[str], cwd: Optional[Path], timeout_sec: float) -> str:
    """Run a command once and return its trimmed stdout.

    Raises:
        ExternalToolFailure: If the process cannot start, times out,
            exits non-zero or prints nothing
    """
    try:
        result = subprocess.run(
            command,
            cwd=str(cwd) if cwd else None,
            capture_output=True,
            timeout=timeout_sec,
        )
    except subprocess.TimeoutExpired:
        raise ExternalToolFailure(command, f"timed out after {timeout_sec} seconds")
    except OSError as e:
        raise ExternalToolFailure(command, str(e))

    if result.returncode != 0:
        stderr = result.stderr.decode('utf-8', errors='replace').strip()
        raise ExternalToolFailure(command, f"exit code {result.returncode}: {stderr}")

    output = result.stdout.decode('utf-8', errors='replace').strip()
    if not output:
        raise ExternalToolFailure(command, "no output")
    return output


def probe(
    command: Sequence[str],
    cwd: Optional[Path] = None,
    timeout_sec: float = DEFAULT_TIMEOUT_SEC
) -> str:
    """
    Run an external command and return its trimmed standard output.

    Args:
        command: Command argv (no shell)
        cwd: Working directory (default: current directory)
        timeout_sec: Upper bound on the wait for the process

    Returns:
        Trimmed stdout, or "Unknown" if the command failed in any way
    """
    argv = list(command)
    try:
        return _run(argv, cwd, timeout_sec)
    except ExternalToolFailure as e:
        logger.debug(f"Probe failed, using '{UNKNOWN}': {e}")
        return UNKNOWN


def version_banner(cwd: Optional[Path] = None, timeout_sec: float = DEFAULT_TIMEOUT_SEC) -> str:
    """Short (8 character) hash of HEAD."""
    return probe(VERSION_BANNER_COMMAND, cwd=cwd, timeout_sec=timeout_sec)


def builder_identity(cwd: Optional[Path] = None, timeout_sec: float = DEFAULT_TIMEOUT_SEC) -> str:
    """Configured git user name."""
    return probe(BUILDER_IDENTITY_COMMAND, cwd=cwd, timeout_sec=timeout_sec)


@dataclass(frozen=True)
class BuildProvenance:
    """VCS values computed once per build."""
    git_version: str = UNKNOWN
    builder: str = UNKNOWN

    def as_layer(self) -> Dict[str, str]:
        """Namespace layer binding the provenance properties."""
        return {
            GIT_VERSION_PROPERTY: self.git_version,
            BUILDER_PROPERTY: self.builder,
        }


def probe_provenance(
    cwd: Optional[Path] = None,
    timeout_sec: float = DEFAULT_TIMEOUT_SEC
) -> BuildProvenance:
    """Probe both VCS values for the repository containing cwd."""
    provenance = BuildProvenance(
        git_version=version_banner(cwd, timeout_sec),
        builder=builder_identity(cwd, timeout_sec),
    )
    logger.info(f"Build provenance: git_version={provenance.git_version} builder={provenance.builder}")
    return provenance
