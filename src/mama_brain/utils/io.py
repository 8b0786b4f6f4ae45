"""I/O helpers for reading structured data files."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, Iterator

import yaml


def load_jsonl(path: Path) -> Iterator[Dict[str, Any]]:
    """Yield objects from a JSON Lines file."""
    with path.open("r", encoding="utf-8") as stream:
        for line in stream:
            line = line.strip()
            if not line:
                continue
            yield json.loads(line)


def load_yaml_or_json(path: Path) -> Any:
    """Load YAML or JSON from ``path`` depending on the file suffix."""
    with path.open("r", encoding="utf-8") as stream:
        if path.suffix.lower() in {".yaml", ".yml"}:
            return yaml.safe_load(stream)
        return json.load(stream)
