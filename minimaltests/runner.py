"""Per-job processing and the end-to-end dual-tree run."""

from __future__ import annotations

from dataclasses import dataclass
import logging
from pathlib import Path
import sys
import threading
from typing import Callable, TextIO

from minimaltests.core.models import JobItem, JobOutcome
from minimaltests.diff.models import GroupingPolicy
from minimaltests.diff.noise import NOISE_FIELD_MARKERS
from minimaltests.diff.pipeline import diff_metric_files
from minimaltests.metrics.exceptions import MetricTreeError
from minimaltests.plugins import PluginManager, resolve_plugin_manager
from minimaltests.pool import PoolSummary, WorkerPool
from minimaltests.report import ReportFormat, output_filename, render_report
from minimaltests.source import read_source_text
from minimaltests.walk import iter_jobs

logger = logging.getLogger(__name__)

SourceReader = Callable[[Path], str | None]

_STDOUT_LOCK = threading.Lock()


@dataclass(frozen=True, slots=True)
class PipelineConfig:
    output_path: Path | None = None
    report_format: ReportFormat = "html"
    policy: GroupingPolicy = "additive"
    num_workers: int | None = None
    limit: int | None = None
    noise_markers: tuple[str, ...] = NOISE_FIELD_MARKERS


def process_job(
    job: JobItem,
    *,
    config: PipelineConfig,
    source_reader: SourceReader = read_source_text,
    plugin_manager: PluginManager | None = None,
    stream: TextIO | None = None,
) -> JobOutcome:
    """Diff one file pair and write its report.

    Unloadable metric files, pairs without relevant diffs and unusable
    source files are skipped. Errors while writing the report propagate.
    """
    try:
        result = diff_metric_files(
            job.path_old,
            job.path_new,
            policy=config.policy,
            noise_markers=config.noise_markers,
            plugin_manager=plugin_manager,
        )
    except MetricTreeError as error:
        logger.debug("skipping %s %s: %s", job.path_old, job.path_new, error)
        return JobOutcome(
            job=job,
            status="skipped",
            error_type=error.__class__.__name__,
            error_message=str(error),
        )

    if result is None:
        logger.debug("no relevant diffs between %s and %s", job.path_old, job.path_new)
        return JobOutcome(job=job, status="skipped")

    source_path = Path(result.source_filename)
    source_text = source_reader(source_path)
    if source_text is None:
        logger.debug("skipping %s: source %s unusable", job.path_new, source_path)
        return JobOutcome(job=job, status="skipped")

    report_name = output_filename(source_path, config.report_format)
    report = render_report(
        result,
        source_text,
        report_format=config.report_format,
        title=report_name,
    )

    if job.output_path is not None:
        report_path = job.output_path / report_name
        report_path.write_text(report, encoding="utf-8")
        logger.debug("wrote %s", report_path)
        return JobOutcome(job=job, status="reported", report_path=report_path)

    target = stream if stream is not None else sys.stdout
    with _STDOUT_LOCK:
        target.write(report)
        target.flush()
    return JobOutcome(job=job, status="reported")


def run(
    path_old: str | Path,
    path_new: str | Path,
    *,
    config: PipelineConfig,
    source_reader: SourceReader = read_source_text,
    plugin_manager: PluginManager | None = None,
    stream: TextIO | None = None,
) -> PoolSummary:
    """Diff every matched file pair of two metric trees on a worker pool.

    Without an explicit `plugin_manager` the hooks configured through
    `MINIMALTESTS_PLUGIN_CONFIG` are loaded once here and shared by every
    worker.
    """
    manager = plugin_manager if plugin_manager is not None else resolve_plugin_manager()

    def handler(job: JobItem) -> JobOutcome:
        return process_job(
            job,
            config=config,
            source_reader=source_reader,
            plugin_manager=manager,
            stream=stream,
        )

    pool = WorkerPool(handler, num_workers=config.num_workers, plugin_manager=manager)
    jobs = iter_jobs(path_old, path_new, config.output_path, limit=config.limit)
    summary = pool.run(jobs)
    logger.info(
        "reported=%d skipped=%d failed=%d",
        summary.count("reported"),
        summary.count("skipped"),
        summary.count("failed"),
    )
    return summary
