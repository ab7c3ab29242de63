"""Config file discovery.

Walk-up finder locates bootkit.toml, similar to how git finds .git/.
The BOOTKIT_CONFIG env var, when set, wins over the walk-up.
"""

from __future__ import annotations

import os
from pathlib import Path

CONFIG_FILENAME = "bootkit.toml"
CONFIG_ENV_VAR = "BOOTKIT_CONFIG"


def find_config(start: Path | None = None) -> Path | None:
    """Walk up from *start* (default: cwd) looking for bootkit.toml.

    Returns the path to the config file, or None if not found. A
    BOOTKIT_CONFIG pointing at a missing file also yields None.
    """
    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        p = Path(env_path)
        return p if p.is_file() else None

    current = (start or Path.cwd()).resolve()
    for directory in (current, *current.parents):
        candidate = directory / CONFIG_FILENAME
        if candidate.is_file():
            return candidate
    return None
