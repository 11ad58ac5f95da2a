"""Shell completion helpers for the i3start CLI (argcomplete).

Provides custom completers for:
- Project names
- Layout names
"""

from typing import List

from ..core.context import ConfigContext


def _matching(names: List[str], prefix: str) -> List[str]:
    if prefix:
        return [name for name in names if name.startswith(prefix)]
    return names


def complete_project_names(prefix: str, parsed_args=None, **kwargs) -> List[str]:
    """Complete project names from the config directory."""
    config_dir = getattr(parsed_args, "config_dir", None)
    try:
        names = ConfigContext.default(config_dir).projects.list()
    except OSError:
        return []
    return _matching(names, prefix)


def complete_layout_names(prefix: str, parsed_args=None, **kwargs) -> List[str]:
    """Complete managed layout names from the config directory."""
    config_dir = getattr(parsed_args, "config_dir", None)
    try:
        names = ConfigContext.default(config_dir).layouts.list()
    except OSError:
        return []
    return _matching(names, prefix)
