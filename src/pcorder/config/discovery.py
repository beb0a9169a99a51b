"""Locate ``pcorder.toml``.

``PCORDER_CONFIG`` names the file outright; otherwise the search starts in
the given directory and climbs to the filesystem root.
"""

from __future__ import annotations

import os
from pathlib import Path

CONFIG_FILENAME = "pcorder.toml"
CONFIG_ENV_VAR = "PCORDER_CONFIG"


def find_config(start: Path | None = None) -> Path | None:
    """Return the config file governing *start* (default: CWD), or None.

    A ``PCORDER_CONFIG`` pointing at a missing file yields None rather than
    falling back to the directory search.
    """
    override = os.environ.get(CONFIG_ENV_VAR)
    if override:
        path = Path(override)
        return path if path.is_file() else None

    here = (start or Path.cwd()).resolve()
    return next(
        (d / CONFIG_FILENAME for d in (here, *here.parents) if (d / CONFIG_FILENAME).is_file()),
        None,
    )
