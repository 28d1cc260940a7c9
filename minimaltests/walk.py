"""Lockstep traversal of two metric directory trees."""

from __future__ import annotations

from dataclasses import dataclass, field
import logging
import os
from pathlib import Path
from typing import Iterator

from minimaltests.core.models import JobItem

logger = logging.getLogger(__name__)

METRIC_FILE_SUFFIX = ".json"


@dataclass(slots=True)
class TreePairing:
    """Files matched by relative path, plus those found on one side only."""

    pairs: list[tuple[Path, Path]] = field(default_factory=list)
    only_old: list[Path] = field(default_factory=list)
    only_new: list[Path] = field(default_factory=list)

    @property
    def is_aligned(self) -> bool:
        return not self.only_old and not self.only_new


def is_hidden(name: str) -> bool:
    return name.startswith(".")


def walk_metric_files(root: str | Path) -> Iterator[Path]:
    """Yield `.json` files under root, depth first and sorted, relative to root.

    Hidden directories are pruned and hidden files skipped.
    """
    root_path = Path(root)
    for current, dirs, files in os.walk(root_path):
        dirs[:] = sorted(name for name in dirs if not is_hidden(name))
        base = Path(current)
        for file_name in sorted(files):
            if is_hidden(file_name):
                continue
            candidate = base / file_name
            if candidate.suffix != METRIC_FILE_SUFFIX or not candidate.is_file():
                continue
            yield candidate.relative_to(root_path)


def pair_metric_files(old_root: str | Path, new_root: str | Path) -> TreePairing:
    """Pair metric files of two trees by identical relative path."""
    old_root = Path(old_root)
    new_root = Path(new_root)
    new_files = set(walk_metric_files(new_root))

    pairing = TreePairing()
    matched: set[Path] = set()
    for relative in walk_metric_files(old_root):
        if relative in new_files:
            pairing.pairs.append((old_root / relative, new_root / relative))
            matched.add(relative)
        else:
            pairing.only_old.append(old_root / relative)

    pairing.only_new = [new_root / relative for relative in sorted(new_files - matched)]

    for path in pairing.only_old:
        logger.warning("no counterpart in %s for %s", new_root, path)
    for path in pairing.only_new:
        logger.warning("no counterpart in %s for %s", old_root, path)
    return pairing


def iter_jobs(
    path_old: str | Path,
    path_new: str | Path,
    output_path: Path | None = None,
    *,
    limit: int | None = None,
) -> Iterator[JobItem]:
    """Yield the jobs for two files, or for every matched pair of two directories."""
    path_old = Path(path_old)
    path_new = Path(path_new)
    if limit is not None and limit <= 0:
        return

    if not (path_old.is_dir() and path_new.is_dir()):
        yield JobItem(path_old=path_old, path_new=path_new, output_path=output_path)
        return

    pairing = pair_metric_files(path_old, path_new)
    for count, (old_file, new_file) in enumerate(pairing.pairs, start=1):
        yield JobItem(path_old=old_file, path_new=new_file, output_path=output_path)
        if limit is not None and count >= limit:
            logger.info("file limit %d reached", limit)
            return
