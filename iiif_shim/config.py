from __future__ import annotations

import copy
import os
from pathlib import Path
from typing import Dict, Optional

import yaml

from iiif_shim.parsing import DEFAULT_PID_PATTERN


DEFAULT_CONFIG: Dict = {
    "iiif": {
        "server_root": "http://iiif.lib.virginia.edu/iiif",
        "timeout_s": 10.0,
        "pool_maxsize": 20,
    },
    "identifiers": {"pattern": DEFAULT_PID_PATTERN},
    "logging": {"level": "INFO"},
    "server": {"host": "0.0.0.0", "port": 8000},
}


def merge_config(base: Dict, override: Optional[Dict]) -> Dict:
    out = copy.deepcopy(base)
    for k, v in (override or {}).items():
        if isinstance(v, dict) and isinstance(out.get(k), dict):
            out[k] = merge_config(out[k], v)
        else:
            out[k] = v
    return out


def load_config(path: Optional[str] = None) -> Dict:
    """
    Read YAML config over the built-in defaults.
    Path precedence: `path` arg, env IIIF_SHIM_CONFIG, config/shim.yaml.
    Env IIIF_SERVER_ROOT wins over the file for the server root.
    """
    path = path or os.environ.get("IIIF_SHIM_CONFIG") or "config/shim.yaml"
    override = None
    if Path(path).exists():
        with open(path, "r") as f:
            override = yaml.safe_load(f) or {}
    cfg = merge_config(DEFAULT_CONFIG, override)
    if os.environ.get("IIIF_SERVER_ROOT"):
        cfg["iiif"]["server_root"] = os.environ["IIIF_SERVER_ROOT"]
    return cfg
