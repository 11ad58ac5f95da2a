"""Entry point for the i3start CLI."""

import sys


def main() -> int:
    """Main entry point."""
    from i3_project_starter.cli.commands import cli_main
    return cli_main()


if __name__ == "__main__":
    sys.exit(main())
