from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import MutableMapping, Optional

logger = logging.getLogger(__name__)


def apply_policy_defaults(path: Path, env: Optional[MutableMapping[str, str]] = None) -> int:
    """Set default environment variables from a policy JSON if not already set.

    Only missing or blank variables are filled. Returns how many were set.
    """
    target = os.environ if env is None else env
    if not path.exists():
        return 0
    try:
        payload = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError):
        logger.warning("Ignoring unreadable policy file %s", path)
        return 0
    env_defaults = payload.get("env_defaults") or {}
    applied = 0
    for key, value in env_defaults.items():
        if str(target.get(key, "")).strip() == "":
            target[key] = str(value)
            applied += 1
    if applied:
        logger.debug("Applied %d policy default(s) from %s", applied, path)
    return applied
