"""Version-control provenance probing."""

from .provenance import (
    UNKNOWN,
    BuildProvenance,
    builder_identity,
    probe,
    probe_provenance,
    version_banner,
)

__all__ = [
    "UNKNOWN",
    "BuildProvenance",
    "builder_identity",
    "probe",
    "probe_provenance",
    "version_banner",
]
