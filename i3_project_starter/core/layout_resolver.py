"""Resolve a project's layout into a file for `append_layout`."""

import logging
import tempfile
from contextlib import contextmanager
from pathlib import Path
from typing import TYPE_CHECKING, Iterator

from ..models.config import LayoutContents, LayoutPath, LayoutSource, ManagedLayoutRef

if TYPE_CHECKING:
    from .layouts import LayoutStore


logger = logging.getLogger("i3start.layout_resolver")


@contextmanager
def resolve_layout(layout: LayoutSource, layouts: "LayoutStore") -> Iterator[Path]:
    """Yield a path to a file holding the layout.

    Inline contents are written to a temporary file that is removed when the
    context exits. Managed layouts are looked up by name. Paths are returned
    as-is; their existence is only checked by verification.

    Args:
        layout: Layout from the general section
        layouts: Store used to look up managed layouts

    Yields:
        Path to the layout file

    Raises:
        UnknownConfig: If a managed layout doesn't exist
    """
    if isinstance(layout, LayoutContents):
        with tempfile.NamedTemporaryFile(
            mode="w", encoding="utf-8", prefix="i3start-layout-", suffix=".json"
        ) as f:
            f.write(layout.contents)
            f.flush()
            logger.debug(f"Wrote inline layout to {f.name}")
            yield Path(f.name)
    elif isinstance(layout, ManagedLayoutRef):
        yield layouts.open(layout.name).path
    elif isinstance(layout, LayoutPath):
        yield layout.path
    else:
        raise TypeError(f"Unsupported layout type: {type(layout).__name__}")
