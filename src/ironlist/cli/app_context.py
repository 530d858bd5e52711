"""Per-invocation state shared by every IronList command."""

import logging
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, NoReturn, Optional

import click
from rich.console import Console
from rich.markup import escape

from ..config import ConfigModel, DefaultPathStore
from ..entry import Entry
from ..storage import Storage
from ..theme import get_themed_console


logger = logging.getLogger(__name__)


@dataclass
class AppContext:
    """Configuration and resolved options for one command run."""

    config: ConfigModel
    defaults: DefaultPathStore = field(default_factory=DefaultPathStore)
    file_option: Optional[Path] = None
    show_all: bool = False
    verbose: bool = False

    @property
    def console(self) -> Console:
        return get_themed_console(no_color=self.config.no_color)

    @property
    def err_console(self) -> Console:
        return get_themed_console(stderr=True, no_color=self.config.no_color)

    def info(self, message: str, style: str = "success") -> None:
        self.console.print(f"[{style}]{escape(message)}[/{style}]", soft_wrap=True)

    def fail(self, message: str, exit_code: int = 1) -> NoReturn:
        """Report ``message`` on stderr and exit with ``exit_code``."""
        self.err_console.print(f"[error]{escape(message)}[/error]", soft_wrap=True)
        sys.exit(exit_code)

    def resolve_file(self) -> Path:
        """Pick the task file: --file, saved default, config, or ask the user."""
        if self.file_option is not None:
            return self.file_option

        saved = self.defaults.load_default()
        if saved is not None:
            return saved

        configured = self.config.get_default_file()
        if configured is not None:
            return configured

        entered = click.prompt(
            "No default data file configured. Please enter the path to your ironlist file",
            default="",
            show_default=False,
            err=True,
        ).strip()
        if not entered:
            self.fail("No path entered")
        path = Path(entered).expanduser()
        self.defaults.save_default(path)
        return path

    def storage(self) -> Storage:
        path = self.resolve_file()
        logger.debug(f"Using task file {path}")
        return Storage(path)

    def load_entries(self, storage: Storage) -> List[Entry]:
        """Load and sort entries, turning I/O failures into a clean exit."""
        try:
            return storage.load_sorted()
        except FileNotFoundError:
            self.fail(f"Task file not found: {storage.path}")
        except OSError as e:
            self.fail(f"Cannot read task file {storage.path}: {e}")


pass_app = click.make_pass_decorator(AppContext)
