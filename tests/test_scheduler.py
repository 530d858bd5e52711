"""Tests for OS scheduler installers."""

import plistlib
from datetime import time
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from ironlist.services.scheduler import (
    LaunchdInstaller, ScheduleSpec, SchedulerError, SchtasksInstaller, SystemdInstaller,
    get_installer, systemd_quote,
)


@pytest.fixture(autouse=True)
def fixed_command():
    with patch("ironlist.services.scheduler.ironlist_command", return_value=["/usr/bin/ironlist"]):
        yield


def ok(*args, **kwargs):
    return MagicMock(returncode=0, stderr="", stdout="")


class TestScheduleSpec:
    def test_command_passes_file_and_time(self):
        spec = ScheduleSpec(time(7, 5), task_file=Path("/data/todo.txt"))

        assert spec.command() == [
            "/usr/bin/ironlist", "--file", "/data/todo.txt", "notify", "--once", "--time", "07:05",
        ]


class TestSystemd:
    """Test systemd unit rendering and installation."""

    def test_daily_timer(self, tmp_path):
        timer = SystemdInstaller(tmp_path).render_timer(ScheduleSpec(time(9, 0)))

        assert "OnCalendar=*-*-* 09:00:00" in timer
        assert "Persistent=true" in timer

    def test_interval_timer(self, tmp_path):
        timer = SystemdInstaller(tmp_path).render_timer(ScheduleSpec(time(9, 0), interval_minutes=30))

        assert "OnUnitActiveSec=1800s" in timer
        assert "OnCalendar" not in timer

    def test_service_runs_notify_once(self, tmp_path):
        service = SystemdInstaller(tmp_path).render_service(ScheduleSpec(time(9, 0)))

        assert "Type=oneshot" in service
        assert 'ExecStart="/usr/bin/ironlist" "notify" "--once" "--time" "09:00"' in service

    def test_service_quotes_task_file(self, tmp_path):
        spec = ScheduleSpec(time(9, 0), task_file=Path("/home/u/My Tasks/100% \"done\".txt"))

        service = SystemdInstaller(tmp_path).render_service(spec)

        assert '"--file" "/home/u/My Tasks/100%% \\"done\\".txt"' in service

    def test_systemd_quote(self):
        assert systemd_quote("a b") == '"a b"'
        assert systemd_quote("C:\\x$HOME") == '"C:\\\\x$$HOME"'

    @patch("ironlist.services.scheduler.subprocess.run", side_effect=ok)
    def test_install_writes_units_and_enables(self, mock_run, tmp_path):
        installer = SystemdInstaller(tmp_path / "units")

        installer.install(ScheduleSpec(time(9, 0)))

        assert installer.service_path.exists()
        assert installer.timer_path.exists()
        commands = [c[0][0] for c in mock_run.call_args_list]
        assert ["systemctl", "--user", "daemon-reload"] in commands
        assert ["systemctl", "--user", "enable", "--now", "ironlist-notify.timer"] in commands

    @patch("ironlist.services.scheduler.subprocess.run")
    def test_enable_failure_raises(self, mock_run, tmp_path):
        mock_run.return_value = MagicMock(returncode=1, stderr="Failed to connect to bus")

        with pytest.raises(SchedulerError):
            SystemdInstaller(tmp_path).install(ScheduleSpec(time(9, 0)))

    @patch("ironlist.services.scheduler.subprocess.run")
    def test_uninstall_tolerates_missing_job(self, mock_run, tmp_path):
        mock_run.return_value = MagicMock(returncode=1, stderr="not loaded")
        installer = SystemdInstaller(tmp_path)
        installer.service_path.write_text("x", encoding="utf-8")

        installer.uninstall()

        assert not installer.service_path.exists()

    @patch("ironlist.services.scheduler.subprocess.run", side_effect=FileNotFoundError("systemctl"))
    def test_missing_systemctl(self, mock_run, tmp_path):
        with pytest.raises(SchedulerError):
            SystemdInstaller(tmp_path).install(ScheduleSpec(time(9, 0)))


class TestLaunchd:
    def test_daily_plist(self, tmp_path):
        job = plistlib.loads(LaunchdInstaller(tmp_path).render_plist(ScheduleSpec(time(18, 30))))

        assert job["Label"] == "com.ironlist.notify"
        assert job["StartCalendarInterval"] == {"Hour": 18, "Minute": 30}
        assert job["ProgramArguments"][-3:] == ["--once", "--time", "18:30"]

    def test_interval_plist(self, tmp_path):
        job = plistlib.loads(
            LaunchdInstaller(tmp_path).render_plist(ScheduleSpec(time(9, 0), interval_minutes=10))
        )

        assert job["StartInterval"] == 600
        assert "StartCalendarInterval" not in job


class TestSchtasks:
    def test_daily_args(self):
        args = SchtasksInstaller().build_create_args(ScheduleSpec(time(9, 0)))

        assert args[:4] == ["schtasks", "/Create", "/TN", "IronList Notify"]
        assert args[-4:] == ["/SC", "DAILY", "/ST", "09:00"]

    def test_interval_args(self):
        args = SchtasksInstaller().build_create_args(ScheduleSpec(time(9, 0), interval_minutes=45))

        assert args[-4:] == ["/SC", "MINUTE", "/MO", "45"]


@pytest.mark.parametrize("platform,expected", [
    ("linux", SystemdInstaller),
    ("darwin", LaunchdInstaller),
    ("win32", SchtasksInstaller),
])
def test_get_installer(platform, expected):
    assert isinstance(get_installer(platform), expected)


def test_get_installer_unsupported():
    with pytest.raises(SchedulerError):
        get_installer("sunos5")
