from __future__ import annotations

from typer.testing import CliRunner

from destctl import cli
from destctl.core.model import (
    IOSDeviceDestination,
    IOSSimulatorDestination,
    MacOSDestination,
    SelectedDestination,
    SimulatorState,
    SimulatorType,
)

IPHONE = IOSSimulatorDestination(
    udid="A1",
    name="iPhone 15",
    is_available=True,
    state=SimulatorState.BOOTED,
    os_version="17.0",
    simulator_type=SimulatorType.IPHONE,
)
DEVICE = IOSDeviceDestination(udid="00008110-E5", name="Work iPhone")
HOST = MacOSDestination(arch="arm64")


class FakeService:
    def __init__(self) -> None:
        self.refresh_warnings: tuple[str, ...] = ()
        self.platform_calls: list = []
        self.selected_destination: SelectedDestination | None = SelectedDestination.from_destination(IPHONE)
        self.counts = {IPHONE.id: 3, HOST.id: 1}

    def refresh(self):
        return self.refresh_warnings

    def list_destinations(self, platforms=None, most_used=False):
        self.platform_calls.append((platforms, most_used))
        if most_used:
            return [IPHONE, DEVICE, HOST]
        return [DEVICE, IPHONE, HOST]

    def list_simulators(self, sort=False):
        return [IPHONE]

    def find(self, destination_id, destination_type=None):
        return {d.id: d for d in (IPHONE, DEVICE, HOST)}.get(destination_id)

    def select(self, destination_id, destination_type=None):
        from destctl.core.errors import DestinationSelectionError

        destination = self.find(destination_id, destination_type)
        if destination is None:
            raise DestinationSelectionError(f"No destination found with id '{destination_id}'.")
        self.counts[destination.id] = self.counts.get(destination.id, 0) + 1
        self.selected_destination = SelectedDestination.from_destination(destination)
        return self.selected_destination

    def usage_count(self, destination_id):
        return self.counts.get(destination_id, 0)

    def clear_selection(self):
        self.selected_destination = None

    def selected(self):
        return self.selected_destination

    def resolve_selected(self):
        if self.selected_destination is None:
            return None
        return self.find(self.selected_destination.id)

    def most_used(self):
        return [(IPHONE, 3), (HOST, 1)]


runner = CliRunner()


def test_list_command_marks_selected(monkeypatch):
    monkeypatch.setattr(cli, "DestinationService", FakeService)
    result = runner.invoke(cli.app, ["list"])
    assert result.exit_code == 0
    lines = result.stdout.splitlines()
    assert lines[0] == "  iosdevice-00008110-E5  Work iPhone  [iOS Device]"
    assert lines[1] == "* iossimulator-A1  iPhone 15 (17.0)  [iOS Simulator]"
    assert "macos-arm64  My Mac  [macOS]" in lines[2]


def test_list_command_passes_filters(monkeypatch):
    service = FakeService()
    monkeypatch.setattr(cli, "DestinationService", lambda: service)
    result = runner.invoke(cli.app, ["list", "--platform", "iphonesimulator", "--platform", "macosx", "--most-used"])
    assert result.exit_code == 0
    platforms, most_used = service.platform_calls[0]
    assert [p.value for p in platforms] == ["iphonesimulator", "macosx"]
    assert most_used is True
    assert result.stdout.splitlines()[0].startswith("* iossimulator-A1")


def test_simulators_command(monkeypatch):
    monkeypatch.setattr(cli, "DestinationService", FakeService)
    result = runner.invoke(cli.app, ["simulators", "--sort"])
    assert result.exit_code == 0
    assert "iossimulator-A1  iPhone 15 (17.0)  booted" in result.stdout


def test_find_command(monkeypatch):
    monkeypatch.setattr(cli, "DestinationService", FakeService)
    result = runner.invoke(cli.app, ["find", "iosdevice-00008110-E5"])
    assert result.exit_code == 0
    assert "Work iPhone" in result.stdout
    assert "Type: iOS Device" in result.stdout


def test_find_command_not_found(monkeypatch):
    monkeypatch.setattr(cli, "DestinationService", FakeService)
    result = runner.invoke(cli.app, ["find", "nonexistent-udid"])
    assert result.exit_code == 1
    assert "Destination 'nonexistent-udid' not found" in result.stdout


def test_select_command(monkeypatch):
    monkeypatch.setattr(cli, "DestinationService", FakeService)
    result = runner.invoke(cli.app, ["select", "macos-arm64"])
    assert result.exit_code == 0
    assert "Selected My Mac (macos-arm64), used 2 time(s)" in result.stdout


def test_select_command_error_is_clean(monkeypatch):
    monkeypatch.setattr(cli, "DestinationService", FakeService)
    result = runner.invoke(cli.app, ["select", "iossimulator-gone"])
    assert result.exit_code == 1
    assert "Error: No destination found with id 'iossimulator-gone'." in result.stderr
    assert "Traceback" not in result.stdout
    assert "Traceback" not in result.stderr


def test_clear_and_selected_commands(monkeypatch):
    service = FakeService()
    monkeypatch.setattr(cli, "DestinationService", lambda: service)

    result = runner.invoke(cli.app, ["selected"])
    assert result.exit_code == 0
    assert "* iossimulator-A1" in result.stdout

    result = runner.invoke(cli.app, ["clear"])
    assert result.exit_code == 0
    assert "Cleared workspace destination" in result.stdout

    result = runner.invoke(cli.app, ["selected"])
    assert "No workspace destination selected" in result.stdout


def test_selected_command_reports_vanished_destination(monkeypatch):
    class VanishedService(FakeService):
        def resolve_selected(self):
            return None

    monkeypatch.setattr(cli, "DestinationService", VanishedService)
    result = runner.invoke(cli.app, ["selected"])
    assert result.exit_code == 0
    assert "iPhone 15 (iossimulator-A1) is no longer available" in result.stdout


def test_most_used_command(monkeypatch):
    monkeypatch.setattr(cli, "DestinationService", FakeService)
    result = runner.invoke(cli.app, ["most-used"])
    assert result.exit_code == 0
    assert result.stdout.splitlines() == [
        "   3  iossimulator-A1  iPhone 15 (17.0)",
        "   1  macos-arm64  My Mac",
    ]


def test_refresh_warning_is_printed(monkeypatch):
    class WarnService(FakeService):
        def refresh(self):
            return ("xcrun not found. Install Xcode command line tools and retry.",)

    monkeypatch.setattr(cli, "DestinationService", WarnService)
    result = runner.invoke(cli.app, ["list"])
    assert result.exit_code == 0
    assert "Warning: xcrun not found" in result.stderr
