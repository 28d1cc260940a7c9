"""Parse structural diff paths into navigable segments."""

from __future__ import annotations

import re

from minimaltests.diff.models import IndexSegment, StructuralPath

_SPACE_TOKEN_RE = re.compile(r"spaces\[(\d+)\]")


def parse_structural_path(field_path: str) -> StructuralPath:
    """Extract the ordered `spaces[i]` tokens of a diff path.

    Anything else in the path (metric keys, list positions inside metrics)
    does not address a space and is ignored. A path without any `spaces[...]`
    token yields the empty path, i.e. a file-level change.
    """
    return tuple(
        IndexSegment(int(match.group(1))) for match in _SPACE_TOKEN_RE.finditer(field_path)
    )


def is_global_path(path: StructuralPath) -> bool:
    return not path
