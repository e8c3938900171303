from __future__ import annotations

from typer.testing import CliRunner

from lhctl import cli
from lhctl.core.config import Config
from lhctl.core.errors import AdapterError
from lhctl.core.model import STANDBY, Command, StateReport
from lhctl.core.service import ScanOutcome, ScanResult


class FakeService:
    calls: list[tuple[Command, tuple[str, ...], str | None]] = []

    def __init__(self) -> None:
        self.config = Config()

    async def scan(self, command, names=(), *, adapter_name=None, echo=print):
        FakeService.calls.append((command, tuple(names), adapter_name))
        report = StateReport(name="LHB-1", current=STANDBY, target=command.target_state, written=False)
        echo(report.line())
        return ScanResult(outcome=ScanOutcome.COMPLETED, reports=(report,))


runner = CliRunner()


def test_scan_command(monkeypatch):
    FakeService.calls = []
    monkeypatch.setattr(cli, "LighthouseService", FakeService)
    result = runner.invoke(cli.app, ["scan"])
    assert result.exit_code == 0
    assert "LHB-1: STANDBY" in result.stdout
    assert FakeService.calls == [(Command.SCAN, (), None)]


def test_set_command_with_names_and_adapter(monkeypatch):
    FakeService.calls = []
    monkeypatch.setattr(cli, "LighthouseService", FakeService)
    result = runner.invoke(cli.app, ["standby", "LHB-1", "LHB-2", "--adapter", "hci1"])
    assert result.exit_code == 0
    assert "LHB-1: STANDBY -> STANDBY" in result.stdout
    assert FakeService.calls == [(Command.STANDBY, ("LHB-1", "LHB-2"), "hci1")]


def test_unknown_command_rejected(monkeypatch):
    monkeypatch.setattr(cli, "LighthouseService", FakeService)
    result = runner.invoke(cli.app, ["reboot"])
    assert result.exit_code == 2


def test_error_is_clean(monkeypatch):
    class FailingService(FakeService):
        async def scan(self, command, names=(), *, adapter_name=None, echo=print):
            raise AdapterError("Could not start BLE scan: no adapter")

    monkeypatch.setattr(cli, "LighthouseService", FailingService)
    result = runner.invoke(cli.app, ["on", "LHB-1"])
    assert result.exit_code == 1
    assert "Error: Could not start BLE scan: no adapter" in result.stderr
    assert "Traceback" not in result.stdout
    assert "Traceback" not in result.stderr


def test_version_option(monkeypatch):
    monkeypatch.setattr(cli, "LighthouseService", FakeService)
    result = runner.invoke(cli.app, ["--version"])
    assert result.exit_code == 0
    assert result.stdout.startswith("lhctl ")
