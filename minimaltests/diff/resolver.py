"""Resolve structural paths back to source line ranges."""

from __future__ import annotations

from minimaltests.core.models import MetricTree
from minimaltests.diff.models import IndexSegment, LineRange, StructuralPath


class UnresolvablePathError(LookupError):
    """The addressed space does not exist in the new metric tree."""


def resolve_node(root: MetricTree, path: StructuralPath) -> MetricTree:
    """Descend from `root.spaces` following each index segment."""
    if not path:
        raise UnresolvablePathError("Empty structural path addresses no space")

    node = root
    for depth, segment in enumerate(path):
        if not isinstance(segment, IndexSegment):
            raise UnresolvablePathError(
                f"Segment {segment!r} at depth {depth} is not a space index"
            )
        children = node.spaces
        if not 0 <= segment.index < len(children):
            raise UnresolvablePathError(
                f"Space index {segment.index} out of range at depth {depth} "
                f"({len(children)} spaces in {node.name!r})"
            )
        node = children[segment.index]
    return node


def resolve_line_range(root: MetricTree, path: StructuralPath) -> LineRange:
    node = resolve_node(root, path)
    return line_range_of(node)


def line_range_of(node: MetricTree) -> LineRange:
    # Trees count lines from 1, source lines are indexed from 0.
    return LineRange(start_line=node.start_line - 1, end_line=node.end_line)
