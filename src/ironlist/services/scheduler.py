"""Registration of a recurring ``ironlist notify --once`` job with the OS scheduler.

One installer per platform behind a common interface:

- Linux: a systemd user service plus timer
- macOS: a launchd agent
- Windows: a Task Scheduler entry via schtasks
"""

import logging
import plistlib
import shutil
import subprocess
import sys
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import time
from pathlib import Path
from typing import List, Optional

from ..utils.datetime import format_time_of_day, minutes_to_seconds


logger = logging.getLogger(__name__)

SYSTEMD_UNIT = "ironlist-notify"
LAUNCHD_LABEL = "com.ironlist.notify"
SCHTASKS_NAME = "IronList Notify"


class SchedulerError(RuntimeError):
    """Raised when the platform scheduler rejects an install."""


def ironlist_command() -> List[str]:
    """Command prefix that launches this program from a scheduler."""
    executable = shutil.which("ironlist")
    if executable:
        return [executable]
    return [sys.executable, "-m", "ironlist"]


@dataclass
class ScheduleSpec:
    """When to run the notifier and with which task file."""
    time_of_day: time
    interval_minutes: Optional[int] = None
    task_file: Optional[Path] = None

    @property
    def time_str(self) -> str:
        return format_time_of_day(self.time_of_day)

    def command(self) -> List[str]:
        """Full argument vector for one notification run."""
        cmd = ironlist_command()
        if self.task_file is not None:
            cmd += ["--file", str(self.task_file)]
        cmd += ["notify", "--once", "--time", self.time_str]
        return cmd


def systemd_quote(arg: str) -> str:
    """Quote one ExecStart argument so spaces, ``%`` specifiers and ``$`` survive."""
    escaped = (
        arg.replace("\\", "\\\\")
        .replace('"', '\\"')
        .replace("%", "%%")
        .replace("$", "$$")
    )
    return f'"{escaped}"'


def _run(cmd: List[str], check: bool = True) -> subprocess.CompletedProcess:
    logger.debug(f"Running: {' '.join(cmd)}")
    try:
        result = subprocess.run(cmd, capture_output=True, text=True)
    except OSError as e:
        raise SchedulerError(f"failed to run {cmd[0]}: {e}") from e
    if check and result.returncode != 0:
        raise SchedulerError(f"{cmd[0]} failed with exit code {result.returncode}: {result.stderr.strip()}")
    return result


class SchedulerInstaller(ABC):
    """Installs or removes the recurring notifier job."""

    @abstractmethod
    def install(self, spec: ScheduleSpec) -> None:
        pass

    @abstractmethod
    def uninstall(self) -> None:
        pass


class SystemdInstaller(SchedulerInstaller):
    """systemd --user service and timer under ~/.config/systemd/user."""

    def __init__(self, unit_dir: Optional[Path] = None):
        self.unit_dir = unit_dir or Path.home() / ".config" / "systemd" / "user"

    @property
    def service_path(self) -> Path:
        return self.unit_dir / f"{SYSTEMD_UNIT}.service"

    @property
    def timer_path(self) -> Path:
        return self.unit_dir / f"{SYSTEMD_UNIT}.timer"

    def render_service(self, spec: ScheduleSpec) -> str:
        return (
            "[Unit]\n"
            "Description=IronList notification\n"
            "\n"
            "[Service]\n"
            "Type=oneshot\n"
            f"ExecStart={' '.join(systemd_quote(arg) for arg in spec.command())}\n"
        )

    def render_timer(self, spec: ScheduleSpec) -> str:
        if spec.interval_minutes is not None:
            description = f"Run IronList notify every {spec.interval_minutes} minutes"
            trigger = (
                f"OnActiveSec={minutes_to_seconds(spec.interval_minutes)}s\n"
                f"OnUnitActiveSec={minutes_to_seconds(spec.interval_minutes)}s\n"
            )
        else:
            description = f"Run IronList notify daily at {spec.time_str}"
            trigger = f"OnCalendar=*-*-* {spec.time_str}:00\n"
        return (
            "[Unit]\n"
            f"Description={description}\n"
            "\n"
            "[Timer]\n"
            f"{trigger}"
            "Persistent=true\n"
            "\n"
            "[Install]\n"
            "WantedBy=timers.target\n"
        )

    def install(self, spec: ScheduleSpec) -> None:
        self.unit_dir.mkdir(parents=True, exist_ok=True)
        self.service_path.write_text(self.render_service(spec), encoding="utf-8")
        self.timer_path.write_text(self.render_timer(spec), encoding="utf-8")
        logger.info(f"Wrote {self.service_path} and {self.timer_path}")

        _run(["systemctl", "--user", "daemon-reload"], check=False)
        _run(["systemctl", "--user", "enable", "--now", f"{SYSTEMD_UNIT}.timer"])

    def uninstall(self) -> None:
        result = _run(["systemctl", "--user", "disable", "--now", f"{SYSTEMD_UNIT}.timer"], check=False)
        if result.returncode != 0:
            logger.warning(f"systemctl disable returned {result.returncode}; removing unit files anyway")
        for path in (self.service_path, self.timer_path):
            if path.exists():
                path.unlink()
        _run(["systemctl", "--user", "daemon-reload"], check=False)


class LaunchdInstaller(SchedulerInstaller):
    """launchd agent plist under ~/Library/LaunchAgents."""

    def __init__(self, agent_dir: Optional[Path] = None):
        self.agent_dir = agent_dir or Path.home() / "Library" / "LaunchAgents"

    @property
    def plist_path(self) -> Path:
        return self.agent_dir / f"{LAUNCHD_LABEL}.plist"

    def render_plist(self, spec: ScheduleSpec) -> bytes:
        job = {
            "Label": LAUNCHD_LABEL,
            "ProgramArguments": spec.command(),
        }
        if spec.interval_minutes is not None:
            job["StartInterval"] = minutes_to_seconds(spec.interval_minutes)
        else:
            job["StartCalendarInterval"] = {
                "Hour": spec.time_of_day.hour,
                "Minute": spec.time_of_day.minute,
            }
        return plistlib.dumps(job)

    def install(self, spec: ScheduleSpec) -> None:
        self.agent_dir.mkdir(parents=True, exist_ok=True)
        self.plist_path.write_bytes(self.render_plist(spec))
        logger.info(f"Wrote {self.plist_path}")
        _run(["launchctl", "load", str(self.plist_path)])

    def uninstall(self) -> None:
        _run(["launchctl", "unload", str(self.plist_path)], check=False)
        if self.plist_path.exists():
            self.plist_path.unlink()


class SchtasksInstaller(SchedulerInstaller):
    """Windows Task Scheduler entry."""

    def build_create_args(self, spec: ScheduleSpec) -> List[str]:
        command = subprocess.list2cmdline(spec.command())
        args = ["schtasks", "/Create", "/TN", SCHTASKS_NAME, "/TR", command, "/F"]
        if spec.interval_minutes is not None:
            args += ["/SC", "MINUTE", "/MO", str(spec.interval_minutes)]
        else:
            args += ["/SC", "DAILY", "/ST", spec.time_str]
        return args

    def install(self, spec: ScheduleSpec) -> None:
        _run(self.build_create_args(spec))

    def uninstall(self) -> None:
        result = _run(["schtasks", "/Delete", "/TN", SCHTASKS_NAME, "/F"], check=False)
        if result.returncode != 0:
            logger.warning(f"schtasks delete returned {result.returncode}: {result.stderr.strip()}")


def get_installer(platform: Optional[str] = None) -> SchedulerInstaller:
    """Pick the installer for ``platform`` (defaults to ``sys.platform``)."""
    platform = (platform or sys.platform).lower()
    if platform.startswith("linux"):
        return SystemdInstaller()
    if platform == "darwin":
        return LaunchdInstaller()
    if platform.startswith("win"):
        return SchtasksInstaller()
    raise SchedulerError(f"No scheduler support for platform '{platform}'")
