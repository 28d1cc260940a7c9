"""Read metric tree JSON files."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from minimaltests.core.models import MetricTree
from minimaltests.metrics.exceptions import MetricTreeReadError, MetricTreeValidationError


def read_metric_json(path: str | Path) -> Any:
    target = Path(path)
    try:
        raw_bytes = target.read_bytes()
    except OSError as error:
        raise MetricTreeReadError(f"Cannot read metric file {target}: {error}") from error

    try:
        return json.loads(raw_bytes)
    except (UnicodeDecodeError, json.JSONDecodeError) as error:
        raise MetricTreeReadError(f"Metric file is not valid JSON: {target} ({error})") from error


def read_metric_tree(path: str | Path, *, named_root: bool = True) -> MetricTree:
    """Load and validate a metric tree file.

    With `named_root` the root space must carry the source file path.
    """
    raw = read_metric_json(path)
    try:
        return MetricTree.from_dict(raw, named_root=named_root)
    except (ValueError, RecursionError) as error:
        raise MetricTreeValidationError(f"Invalid metric tree {path}: {error}") from error
