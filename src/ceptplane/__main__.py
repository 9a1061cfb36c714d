"""Allow ``python -m ceptplane``."""

from ceptplane.cli.main import cli

if __name__ == "__main__":
    cli()
