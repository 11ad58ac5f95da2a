"""i3 Project Starter - start i3 window manager projects from TOML configurations.

This package provides:
- Named project and layout configurations stored under an XDG config directory
- Layout restore through the i3 `append_layout` IPC command
- Application launch with working-directory overrides
- Optional text/keystroke input into freshly started applications (xdotool)
- Interactive verification of edited configurations
"""

__version__ = "0.1.0"
__author__ = "i3start contributors"
__license__ = "MIT"

__all__ = ["__version__", "__author__", "__license__"]
