import pytest

from minimaltests.core import MetricTree
from minimaltests.diff import LineRange


def test_metric_tree_round_trips_extra_fields() -> None:
    raw = {
        "name": "a.rs",
        "kind": "unit",
        "start_line": 1,
        "end_line": 3,
        "metrics": {"loc": {"sloc": 3}},
        "spaces": [],
        "language": "rust",
    }

    tree = MetricTree.from_dict(raw)

    assert tree.extra == {"language": "rust"}
    assert tree.to_dict() == raw


@pytest.mark.parametrize(
    ("start_line", "end_line"),
    [(0, 3), (5, 4), ("1", 3), (True, 3)],
)
def test_metric_tree_rejects_bad_line_bounds(start_line: object, end_line: object) -> None:
    with pytest.raises(ValueError):
        MetricTree.from_dict(
            {"name": "a.rs", "start_line": start_line, "end_line": end_line}
        )


def test_metric_tree_rejects_non_list_spaces() -> None:
    with pytest.raises(ValueError, match="spaces"):
        MetricTree.from_dict({"name": "a.rs", "start_line": 1, "end_line": 2, "spaces": {}})


def test_metric_tree_allows_anonymous_child_spaces() -> None:
    child = {"name": None, "start_line": 2, "end_line": 2}

    tree = MetricTree.from_dict({"name": "a.rs", "start_line": 1, "end_line": 3, "spaces": [child]})

    assert tree.spaces[0].name is None
    assert tree.spaces[0].to_dict()["name"] is None


def test_metric_tree_root_name_is_required_unless_disabled() -> None:
    raw = {"name": None, "start_line": 1, "end_line": 3}

    with pytest.raises(ValueError, match="source file path"):
        MetricTree.from_dict(raw)
    assert MetricTree.from_dict(raw, named_root=False).name is None

    with pytest.raises(ValueError, match="string or null"):
        MetricTree.from_dict({"name": 7, "start_line": 1, "end_line": 3})


def test_line_range_equality_ignores_origin() -> None:
    assert LineRange(4, 9) == LineRange(start_line=4, end_line=9)
    assert len({LineRange(4, 9), LineRange(4, 9)}) == 1
    assert LineRange(4, 9).display() == (5, 9)
    assert LineRange(4, 9).line_count == 5
