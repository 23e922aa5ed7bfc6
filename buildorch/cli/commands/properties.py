"""Properties command: print the resolved build-wide namespace."""

import logging
from argparse import Namespace

from buildorch.exceptions import BuildError, BuildValidationError
from buildorch.variables import PropertyNamespace

from .build import configure_logging, create_runner


logger = logging.getLogger(__name__)


def show_properties(args: Namespace) -> int:
    """Print every build-wide property as sorted KEY=VALUE lines."""
    configure_logging(args)

    try:
        runner = create_runner(args)
        namespace = PropertyNamespace.compose(runner.layers())
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

    for name, value in sorted(namespace.resolve_all().items()):
        print(f"{name}={value}")
    return 0
