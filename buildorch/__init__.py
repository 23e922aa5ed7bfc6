"""Multi-module build orchestrator with version stamping and resource filtering."""

__version__ = "0.1.0"
