from __future__ import annotations

import copy
from pathlib import Path
from typing import Dict

import yaml

DEFAULT_CONFIG: Dict[str, object] = {
    "host": "0.0.0.0",
    "port": 3000,
    "db_path": "expense_tracker.db",
    "log_level": "INFO",
    "output_dir": "data",
    "output_modules": {
        "csv": "expense_tracker.outputs.csv_output.CSVOutput",
    },
}


def _merge_defaults(current: Dict[str, object], defaults: Dict[str, object]) -> Dict[str, object]:
    """Merge missing default keys into the current config recursively."""
    merged = dict(current)
    for key, value in defaults.items():
        if key not in merged:
            merged[key] = copy.deepcopy(value)
        elif isinstance(value, dict) and isinstance(merged[key], dict):
            merged[key] = _merge_defaults(merged[key], value)
    return merged


def load_config(path: str | Path | None = None) -> Dict[str, object]:
    if path is None:
        return copy.deepcopy(DEFAULT_CONFIG)
    target = Path(path)
    if not target.exists():
        return copy.deepcopy(DEFAULT_CONFIG)
    with target.open("r", encoding="utf-8") as fp:
        data = yaml.safe_load(fp) or {}
    return _merge_defaults(data, DEFAULT_CONFIG)
