"""Logging configuration for the IronList CLI.

Console output goes through Rich on stderr so warnings (skipped lines,
failed notifications) never mix with tables on stdout. An optional file
handler keeps full debug logs.
"""

import logging
from pathlib import Path
from typing import Optional, Union

from rich.console import Console
from rich.logging import RichHandler


_HANDLER_MARK = "_ironlist_handler"


def setup_logging(verbose: bool = False, log_file: Optional[Union[str, Path]] = None) -> None:
    """Install IronList's handlers on the ``ironlist`` logger.

    Call this once per process, before the first command runs. Handlers
    installed by an earlier call are replaced, so repeated calls (tests,
    nested invocations) do not duplicate output.
    """
    package_logger = logging.getLogger("ironlist")
    package_logger.setLevel(logging.DEBUG)

    for handler in list(package_logger.handlers):
        if getattr(handler, _HANDLER_MARK, False):
            package_logger.removeHandler(handler)
            handler.close()

    console_handler = RichHandler(
        console=Console(stderr=True),
        level=logging.DEBUG if verbose else logging.WARNING,
        show_time=False,
        show_path=False,
        markup=False,
        rich_tracebacks=verbose,
    )
    setattr(console_handler, _HANDLER_MARK, True)
    package_logger.addHandler(console_handler)

    if log_file:
        path = Path(log_file).expanduser()
        path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(str(path), encoding="utf-8")
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(logging.Formatter(
            fmt="%(asctime)s.%(msecs)03d %(levelname)s %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        ))
        setattr(file_handler, _HANDLER_MARK, True)
        package_logger.addHandler(file_handler)
