"""CeptPlane - Codeception test tree, runner and result reconciliation."""

__version__ = "0.1.0"
