"""Command line entry point for querying the catalog."""

import sys

from mtgsdk.cli import run_from_cli


if __name__ == "__main__":
    sys.exit(run_from_cli())
