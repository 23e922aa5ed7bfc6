"""Resource selection and filtering module."""

from .matcher import ResourceMatcher, match_pattern, matches
from .processor import ProcessingReport, ResourceProcessor, copy_resources, list_files

__all__ = [
    "ResourceMatcher",
    "match_pattern",
    "matches",
    "ProcessingReport",
    "ResourceProcessor",
    "copy_resources",
    "list_files",
]
