"""Strict structural comparator for metric tree JSON documents."""

from __future__ import annotations

from typing import Any

from minimaltests.diff.models import RawDifference

_MISSING = object()


def compare_trees(old: Any, new: Any) -> list[RawDifference]:
    """Compare two JSON values field by field.

    Objects are compared key by key in sorted order, arrays by position.
    Paths use `.key` for members and `[i]` for array elements, so a changed
    metric reads `.spaces[0].metrics.loc`. Scalars must match in type as
    well as value, so an integer never equals a float.
    """
    out: list[RawDifference] = []
    _collect_differences(old, new, path="", out=out)
    return out


def _collect_differences(old: Any, new: Any, *, path: str, out: list[RawDifference]) -> None:
    if old is _MISSING:
        out.append(RawDifference(path=path, old=None, new=new, status="missing_old"))
        return

    if new is _MISSING:
        out.append(RawDifference(path=path, old=old, new=None, status="missing_new"))
        return

    if isinstance(old, dict) and isinstance(new, dict):
        keys = sorted(set(old.keys()) | set(new.keys()), key=str)
        for key in keys:
            _collect_differences(
                old.get(key, _MISSING),
                new.get(key, _MISSING),
                path=f"{path}.{key}",
                out=out,
            )
        return

    if isinstance(old, list) and isinstance(new, list):
        max_len = max(len(old), len(new))
        for idx in range(max_len):
            _collect_differences(
                old[idx] if idx < len(old) else _MISSING,
                new[idx] if idx < len(new) else _MISSING,
                path=f"{path}[{idx}]",
                out=out,
            )
        return

    if not _scalars_equal(old, new):
        out.append(RawDifference(path=path, old=old, new=new))


def _scalars_equal(old: Any, new: Any) -> bool:
    # `1` and `1.0` are different JSON numbers; so are `1` and `true`.
    return type(old) is type(new) and old == new
