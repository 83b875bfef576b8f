"""Entry point for running wellness_record as a module.

This allows the package to be executed as:
    python -m wellness_record
"""

from wellness_record.cli.main import cli

if __name__ == "__main__":
    cli()
