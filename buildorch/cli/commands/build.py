"""Build command implementation."""

import logging
from argparse import Namespace
from pathlib import Path

from buildorch.build import BuildRunner
from buildorch.exceptions import BuildError, BuildValidationError
from buildorch.loader import BuildLoader
from buildorch.properties import parse_property_args
from buildorch.vcs import BuildProvenance


logger = logging.getLogger(__name__)


def configure_logging(args: Namespace) -> None:
    """Set up logging from --log-level, --debug and --quiet."""
    log_level = getattr(logging, args.log_level.upper())
    if args.debug:
        log_level = logging.DEBUG
    elif args.quiet:
        log_level = logging.ERROR

    logging.basicConfig(
        level=log_level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )


def create_runner(args: Namespace) -> BuildRunner:
    """
    Load the build file and assemble a runner for it.

    Raises:
        FileNotFoundError: If the build file does not exist
        BuildValidationError: If the build file is invalid
        ValueError: If a --property pair is malformed
    """
    build_path = Path(args.build_file).resolve()
    if not build_path.exists():
        raise FileNotFoundError(f"Build file not found: {build_path}")

    logger.info(f"Loading build file: {build_path}")
    base_dir = build_path.parent
    build = BuildLoader(base_dir).load(build_path)

    cli_properties = parse_property_args(args.property)
    provenance = BuildProvenance() if args.no_vcs else None

    return BuildRunner(
        build,
        base_dir,
        cli_properties=cli_properties,
        provenance=provenance,
        strict=getattr(args, 'strict', None)
    )


def run_build(args: Namespace) -> int:
    """
    Configure every project and materialize filtered resources.

    Exit codes: 0 success, 1 runtime or file errors, 2 validation,
    configuration or substitution errors.
    """
    configure_logging(args)

    try:
        runner = create_runner(args)

        if args.dry_run:
            for project, rules in runner.plan().items():
                for index, files in rules.items():
                    for rel_path in files:
                        logger.info(f"[DRY RUN] {project}: rule {index} would filter {rel_path}")
            logger.info("[DRY RUN] Build validation successful")
            return 0

        result = runner.run(jobs=args.jobs)
        unresolved = sum(len(report.unresolved) for reports in result.reports.values() for report in reports)
        if unresolved:
            logger.warning(f"{unresolved} resource(s) kept unresolved placeholders")
        return 0

    except BuildValidationError as e:
        for error in e.errors:
            logger.error(f"Validation error: {error.message}")
        return e.exit_code
    except FileNotFoundError as e:
        logger.error(f"File not found: {e}")
        return 1
    except BuildError as e:
        logger.error(f"Build failed: {e}")
        return e.exit_code
    except ValueError as e:
        logger.error(f"Validation error: {e}")
        return 2
    except Exception as e:
        logger.error(f"Unexpected error: {e}", exc_info=True)
        return 1
