import json
from pathlib import Path

import pytest

from minimaltests.core import JobItem
from minimaltests.diff import diff_metric_files
from minimaltests.metrics import MetricTreeReadError
from minimaltests.plugins import (
    PLUGIN_CONFIG_ENV_VAR,
    LifecyclePlugin,
    LifecycleTracePlugin,
    PluginConfigError,
    PluginLoadError,
    PluginManager,
    NO_PLUGINS,
    load_plugin_manager_from_file,
    read_plugin_entries,
    resolve_plugin_manager,
)
from minimaltests.pool import WorkerPool
from minimaltests.runner import PipelineConfig, process_job, run


def _write_metric_pair(tmp_path: Path) -> tuple[Path, Path]:
    def unit(loc: int) -> dict:
        return {
            "name": str(tmp_path / "demo.py"),
            "start_line": 1,
            "end_line": 4,
            "spaces": [
                {"name": "f", "start_line": 2, "end_line": 4, "metrics": {"loc": loc}},
            ],
        }

    (tmp_path / "demo.py").write_text("x = 1\ndef f():\n    return 2\n\n", encoding="utf-8")
    old = tmp_path / "old.json"
    new = tmp_path / "new.json"
    old.write_text(json.dumps(unit(2)), encoding="utf-8")
    new.write_text(json.dumps(unit(3)), encoding="utf-8")
    return old, new


def _write_plugin_config(path: Path, *, trace_path: Path, config_version: int = 1) -> Path:
    path.write_text(
        json.dumps(
            {
                "config_version": config_version,
                "plugins": [
                    {
                        "entrypoint": "minimaltests.plugins.reference:LifecycleTracePlugin",
                        "options": {"output_path": str(trace_path)},
                    }
                ],
            }
        ),
        encoding="utf-8",
    )
    return path


def _read_trace(trace_path: Path) -> list[dict]:
    return [
        json.loads(line)
        for line in trace_path.read_text(encoding="utf-8").splitlines()
        if line.strip()
    ]


def test_no_config_resolves_to_disabled_manager() -> None:
    manager = resolve_plugin_manager(environ={})

    assert manager is NO_PLUGINS
    assert manager.enabled is False


def test_trace_plugin_records_job_and_diff_hooks(tmp_path: Path) -> None:
    old, new = _write_metric_pair(tmp_path)
    trace_path = tmp_path / "trace.ndjson"
    manager = PluginManager(plugins=(LifecycleTracePlugin(output_path=str(trace_path)),))
    out_dir = tmp_path / "out"
    out_dir.mkdir()
    config = PipelineConfig(output_path=out_dir)

    def handler(job: JobItem):
        return process_job(job, config=config, plugin_manager=manager)

    summary = WorkerPool(handler, num_workers=1, plugin_manager=manager).run(
        [JobItem(path_old=old, path_new=new, output_path=out_dir)]
    )

    assert summary.count("reported") == 1
    records = _read_trace(trace_path)
    assert [record["hook"] for record in records] == [
        "on_job_start",
        "on_diff_start",
        "on_diff_end",
        "on_job_end",
    ]
    assert records[2]["event"]["status"] == "changed"
    assert records[2]["event"]["region_count"] == 1
    assert records[3]["event"]["status"] == "reported"
    assert records[3]["event"]["worker"] == "Consumer 0"


def test_diff_error_is_traced_before_propagating(tmp_path: Path) -> None:
    old, _ = _write_metric_pair(tmp_path)
    trace_path = tmp_path / "trace.ndjson"
    manager = PluginManager(plugins=(LifecycleTracePlugin(output_path=str(trace_path)),))

    with pytest.raises(MetricTreeReadError):
        diff_metric_files(old, tmp_path / "absent.json", plugin_manager=manager)

    records = _read_trace(trace_path)
    assert records[-1]["hook"] == "on_diff_end"
    assert records[-1]["event"]["status"] == "error"
    assert records[-1]["event"]["error_type"] == "MetricTreeReadError"


def test_plugin_failures_are_isolated(tmp_path: Path) -> None:
    class ExplodingPlugin(LifecyclePlugin):
        name = "exploding"

        def on_diff_start(self, event) -> None:
            raise RuntimeError("boom")

    old, new = _write_metric_pair(tmp_path)
    manager = PluginManager(plugins=(ExplodingPlugin(),))

    with pytest.warns(RuntimeWarning, match="plugin=exploding"):
        result = diff_metric_files(old, new, plugin_manager=manager)

    assert result is not None
    assert manager.diagnostics[0].to_dict() == {
        "plugin_name": "exploding",
        "hook": "on_diff_start",
        "error_type": "RuntimeError",
        "message": "boom",
    }


def test_env_config_activates_plugins(tmp_path: Path) -> None:
    trace_path = tmp_path / "env-trace.ndjson"
    config_path = _write_plugin_config(tmp_path / "plugins.json", trace_path=trace_path)

    manager = resolve_plugin_manager(environ={PLUGIN_CONFIG_ENV_VAR: f" {config_path} "})

    assert manager.enabled is True
    assert manager.plugin_names() == ["lifecycle-trace"]


def test_explicit_config_wins_over_env(tmp_path: Path) -> None:
    config_path = _write_plugin_config(
        tmp_path / "plugins.json", trace_path=tmp_path / "trace.ndjson"
    )

    manager = resolve_plugin_manager(
        config_path,
        environ={PLUGIN_CONFIG_ENV_VAR: str(tmp_path / "absent.json")},
    )

    assert manager.enabled is True


def test_run_resolves_env_plugins_once_for_all_workers(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    old_root = tmp_path / "old"
    new_root = tmp_path / "new"
    for root in (old_root, new_root):
        root.mkdir()
    for name in ("a", "b"):
        old, new = _write_metric_pair(tmp_path)
        (old_root / f"{name}.json").write_bytes(old.read_bytes())
        (new_root / f"{name}.json").write_bytes(new.read_bytes())
    trace_path = tmp_path / "trace.ndjson"
    config_path = _write_plugin_config(tmp_path / "plugins.json", trace_path=trace_path)
    monkeypatch.setenv(PLUGIN_CONFIG_ENV_VAR, str(config_path))
    out_dir = tmp_path / "out"
    out_dir.mkdir()

    summary = run(old_root, new_root, config=PipelineConfig(output_path=out_dir, num_workers=2))

    assert summary.count("reported") == 2
    hooks = [record["hook"] for record in _read_trace(trace_path)]
    assert hooks.count("on_job_start") == 2
    assert hooks.count("on_diff_end") == 2


def test_loader_rejects_unsupported_config_version(tmp_path: Path) -> None:
    config_path = _write_plugin_config(
        tmp_path / "plugins.json",
        trace_path=tmp_path / "trace.ndjson",
        config_version=2,
    )

    with pytest.raises(PluginConfigError, match="config version"):
        load_plugin_manager_from_file(config_path)


def test_loader_rejects_unknown_entrypoint(tmp_path: Path) -> None:
    config_path = tmp_path / "plugins.json"
    config_path.write_text(
        json.dumps(
            {"config_version": 1, "plugins": [{"entrypoint": "minimaltests.nowhere:Plugin"}]}
        ),
        encoding="utf-8",
    )

    with pytest.raises(PluginLoadError, match="failed to import"):
        load_plugin_manager_from_file(config_path)


def test_loader_skips_disabled_entries(tmp_path: Path) -> None:
    config_path = tmp_path / "plugins.json"
    config_path.write_text(
        json.dumps(
            {
                "config_version": 1,
                "plugins": [
                    {"entrypoint": "minimaltests.nowhere:Plugin", "enabled": False},
                ],
            }
        ),
        encoding="utf-8",
    )

    assert load_plugin_manager_from_file(config_path).plugins == ()


def test_entries_are_validated_without_importing(tmp_path: Path) -> None:
    config_path = tmp_path / "plugins.json"
    config_path.write_text(
        json.dumps(
            {
                "config_version": 1,
                "plugins": [
                    {"entrypoint": "minimaltests.nowhere:Plugin", "options": {"x": 1}},
                ],
            }
        ),
        encoding="utf-8",
    )

    [entry] = read_plugin_entries(config_path)

    assert entry.module == "minimaltests.nowhere"
    assert entry.attribute == "Plugin"
    assert entry.options == {"x": 1}
    assert entry.enabled is True


def test_loader_rejects_malformed_entrypoint(tmp_path: Path) -> None:
    config_path = tmp_path / "plugins.json"
    config_path.write_text(
        json.dumps({"config_version": 1, "plugins": [{"entrypoint": "no_colon"}]}),
        encoding="utf-8",
    )

    with pytest.raises(PluginConfigError, match="module:attribute"):
        load_plugin_manager_from_file(config_path)


def test_loader_rejects_object_without_hooks(tmp_path: Path) -> None:
    config_path = tmp_path / "plugins.json"
    config_path.write_text(
        json.dumps({"config_version": 1, "plugins": [{"entrypoint": "json:JSONDecoder"}]}),
        encoding="utf-8",
    )

    with pytest.raises(PluginLoadError, match="defines none of"):
        load_plugin_manager_from_file(config_path)
