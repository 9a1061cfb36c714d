"""CeptPlane CLI."""
