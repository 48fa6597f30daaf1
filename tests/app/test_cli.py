from __future__ import annotations

from datetime import timedelta

import pytest

from dirsync.domain.reconciliation import ReconciliationResult
from dirsync.ui import cli as cli_module


def test_once_command_uses_configured_page_size(monkeypatch: pytest.MonkeyPatch) -> None:
    captured: dict[str, object] = {}

    def fake_sync(**kwargs: object) -> ReconciliationResult:
        captured.update(kwargs)
        return ReconciliationResult(completed=True)

    monkeypatch.delenv("DIRSYNC_PAGE_SIZE", raising=False)
    monkeypatch.setattr(cli_module, "sync_directory_once", fake_sync)

    cli_module.main(["once"])

    assert captured["page_size"] == 500


def test_once_command_with_page_size_flag(monkeypatch: pytest.MonkeyPatch) -> None:
    captured: dict[str, object] = {}

    def fake_sync(**kwargs: object) -> ReconciliationResult:
        captured.update(kwargs)
        return ReconciliationResult(completed=True)

    monkeypatch.setattr(cli_module, "sync_directory_once", fake_sync)

    cli_module.main(["--verbose", "once", "--page-size", "25"])

    assert captured["page_size"] == 25


def test_run_command_builds_worker_from_flags(monkeypatch: pytest.MonkeyPatch) -> None:
    captured: dict[str, object] = {}

    def fake_build(**kwargs: object) -> object:
        captured.update(kwargs)
        return object()

    async def fake_serve(worker: object) -> None:
        captured["served"] = worker

    monkeypatch.setattr(cli_module, "build_directory_sync_worker", fake_build)
    monkeypatch.setattr(cli_module, "_serve", fake_serve)

    cli_module.main(["run", "--interval-minutes", "2.5", "--page-size", "100"])

    sync_config = captured["sync_config"]
    assert sync_config.poll_interval == timedelta(minutes=2.5)  # type: ignore[attr-defined]
    assert sync_config.page_size == 100  # type: ignore[attr-defined]
    assert "served" in captured


@pytest.mark.parametrize(
    "argv",
    [
        ["run", "--interval-minutes", "0"],
        ["run", "--page-size", "5000"],
        ["once", "--page-size", "many"],
        [],
    ],
)
def test_invalid_arguments_exit_with_usage_error(
    monkeypatch: pytest.MonkeyPatch, argv: list[str]
) -> None:
    def fake_sync(**_: object) -> ReconciliationResult:
        raise AssertionError("sync must not run")

    monkeypatch.setattr(cli_module, "sync_directory_once", fake_sync)

    with pytest.raises(SystemExit) as excinfo:
        cli_module.main(argv)

    assert excinfo.value.code == 2


def test_failed_pass_exits_with_error(monkeypatch: pytest.MonkeyPatch) -> None:
    def fake_sync(**_: object) -> ReconciliationResult:
        raise RuntimeError("identity provider unreachable")

    monkeypatch.setattr(cli_module, "sync_directory_once", fake_sync)

    with pytest.raises(SystemExit) as excinfo:
        cli_module.main(["once"])

    assert excinfo.value.code == 1
