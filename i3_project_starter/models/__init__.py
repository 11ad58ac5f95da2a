"""Data models for i3start configurations."""

from .config import (
    Application,
    ApplicationCommand,
    Exec,
    ExecType,
    General,
    LayoutContents,
    LayoutPath,
    LayoutSource,
    ManagedLayoutRef,
    ProjectConfig,
    classify_layout,
)

__all__ = [
    "Application",
    "ApplicationCommand",
    "Exec",
    "ExecType",
    "General",
    "LayoutContents",
    "LayoutPath",
    "LayoutSource",
    "ManagedLayoutRef",
    "ProjectConfig",
    "classify_layout",
]
