# phind/main.py
"""Main entry point for the phind CLI application."""

from phind.cli.interface import main_cli


def entrypoint():
    """Function to be called by the script defined in pyproject.toml."""
    # click's standalone mode already exits quietly when stdout is a closed pipe.
    main_cli(prog_name="phind")

if __name__ == '__main__':
    entrypoint()
