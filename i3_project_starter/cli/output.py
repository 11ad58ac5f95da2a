"""Terminal output helpers for CLI commands.

Messages for the user go to stdout, errors to stderr. Diagnostics go through
logging instead (see logging_config).
"""

import sys


# ANSI color codes for output
class Colors:
    RESET = "\033[0m"
    GREEN = "\033[32m"
    YELLOW = "\033[33m"
    RED = "\033[31m"
    BLUE = "\033[34m"


def print_success(message: str) -> None:
    """Print success message in green."""
    print(f"{Colors.GREEN}✓{Colors.RESET} {message}")


def print_error(message: str) -> None:
    """Print error message in red."""
    print(f"{Colors.RED}✗{Colors.RESET} {message}", file=sys.stderr)


def print_info(message: str) -> None:
    """Print info message in blue."""
    print(f"{Colors.BLUE}ℹ{Colors.RESET} {message}")


def print_warning(message: str) -> None:
    """Print warning message in yellow."""
    print(f"{Colors.YELLOW}⚠{Colors.RESET} {message}")


def print_error_with_remediation(error: str, remediation: str) -> None:
    """Print error with a hint on how to fix it.

    Examples:
        >>> print_error_with_remediation(
        ...     "configuration is unknown: 'projects/web'",
        ...     "Use 'i3start list' to see existing projects"
        ... )
    """
    print(f"{Colors.RED}✗ Error:{Colors.RESET} {error}", file=sys.stderr)
    print(f"{Colors.BLUE}  Remediation:{Colors.RESET} {remediation}", file=sys.stderr)
