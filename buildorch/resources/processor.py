"""
Resource materialization and filtering.

Resources are first copied byte-for-byte from a project's source tree into
its output tree. Each filter rule then rewrites the files it matches inside
the output tree, so rules registered later see the output of earlier ones.
"""

import logging
import os
import shutil
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Tuple

from ..exceptions import UnsupportedResource
from ..variables import PropertyNamespace, SubstitutionEngine
from .matcher import ResourceMatcher


logger = logging.getLogger(__name__)


@dataclass
class ProcessingReport:
    """Outcome of one filter rule over one project's resources."""
    project: str
    rule_index: int
    filtered_files: List[str] = field(default_factory=list)
    unchanged_files: List[str] = field(default_factory=list)
    unresolved: Dict[str, List[str]] = field(default_factory=dict)  # file -> names

    @property
    def file_count(self) -> int:
        return len(self.filtered_files) + len(self.unchanged_files)


def list_files(root: Path) -> List[str]:
    """All regular files under root as sorted, '/'-separated relative paths."""
    if not root.is_dir():
        return []
    files = []
    for dirpath, _dirnames, filenames in os.walk(root):
        for filename in filenames:
            file_path = Path(dirpath) / filename
            files.append(file_path.relative_to(root).as_posix())
    return sorted(files)


def copy_resources(source_dir: Path, output_dir: Path) -> List[str]:
    """
    Copy every resource file from source_dir into output_dir.

    Existing output files are overwritten so filtering always starts from
    the pristine sources.

    Returns:
        Relative paths of the copied files
    """
    if not source_dir.is_dir():
        logger.debug(f"No resources directory, nothing to copy: {source_dir}")
        return []

    copied = list_files(source_dir)
    for rel_path in copied:
        target = output_dir / rel_path
        target.parent.mkdir(parents=True, exist_ok=True)
        shutil.copyfile(source_dir / rel_path, target)

    logger.debug(f"Copied {len(copied)} resource(s) from {source_dir} to {output_dir}")
    return copied


class ResourceProcessor:
    """Filters the resources one rule selects."""

    def __init__(self, matcher: ResourceMatcher, charset: str = 'utf-8', strict: bool = True):
        """
        Initialize processor.

        Args:
            matcher: Selects the files to filter
            charset: Encoding used to decode and re-encode filtered files
            strict: Fail on undefined variables instead of leaving them
        """
        self.matcher = matcher
        self.charset = charset
        self.strict = strict

    def select(self, root: Path) -> List[str]:
        return self.matcher.select(list_files(root))

    def filter_file(
        self,
        path: Path,
        namespace: PropertyNamespace,
        display_path: Optional[str] = None
    ) -> Tuple[bool, List[str]]:
        """
        Filter one file in place.

        Returns:
            Tuple of (content_changed, names left unresolved). The names are
            always empty in strict mode.

        Raises:
            UnsupportedResource: Binary or undecodable content
            UndefinedVariable: Strict mode and a name is not bound
            MalformedPlaceholder: Unterminated placeholder
        """
        display = display_path or str(path)
        data = path.read_bytes()
        if b'\x00' in data:
            raise UnsupportedResource(display, "binary content")
        try:
            content = data.decode(self.charset)
        except UnicodeDecodeError as e:
            raise UnsupportedResource(display, f"not valid {self.charset} text ({e.reason} at byte {e.start})")

        engine = SubstitutionEngine()
        result = engine.apply(content, namespace, strict=self.strict, file_path=display)
        unresolved = sorted(engine.unresolved)
        if result == content:
            return False, unresolved

        path.write_bytes(result.encode(self.charset))
        return True, unresolved

    def process(
        self,
        output_dir: Path,
        namespace: PropertyNamespace,
        project: str = "",
        rule_index: int = 0,
        candidates: Optional[List[str]] = None
    ) -> ProcessingReport:
        """
        Filter every matched file under output_dir.

        Args:
            output_dir: Materialized resource tree, rewritten in place
            namespace: Properties visible to this rule
            project: Project name for reporting
            rule_index: Position of the rule for reporting
            candidates: Relative paths to consider (default: every file under output_dir)

        Returns:
            ProcessingReport listing filtered and unchanged files
        """
        report = ProcessingReport(project=project, rule_index=rule_index)

        if candidates is None:
            candidates = list_files(output_dir)

        for rel_path in self.matcher.select(candidates):
            changed, unresolved = self.filter_file(output_dir / rel_path, namespace, display_path=rel_path)
            if changed:
                report.filtered_files.append(rel_path)
            else:
                report.unchanged_files.append(rel_path)
            if unresolved:
                report.unresolved[rel_path] = unresolved
                logger.warning(f"{project}: left unresolved placeholders in {rel_path}: {', '.join(unresolved)}")

        logger.info(
            f"{project}: rule {rule_index} filtered {len(report.filtered_files)} of "
            f"{report.file_count} matched resource(s)"
        )
        return report
