"""The ``notify`` command: desktop summaries of upcoming entries."""

import logging

import click

from ..services.notifications import DesktopNotificationDelivery, Notifier
from ..services.scheduler import ScheduleSpec, SchedulerError, get_installer
from ..utils.datetime import TimeFormatError, format_time_of_day, parse_time_of_day
from .app_context import AppContext, pass_app


logger = logging.getLogger(__name__)


@click.command()
@click.option("--time", "time_str", metavar="HH:MM",
              help="Daily notification time (default from config, 09:00)")
@click.option("--interval", type=click.IntRange(min=1), metavar="MINUTES",
              help="Notify every MINUTES instead of once a day")
@click.option("--install", is_flag=True, help="Register a recurring job with the OS scheduler")
@click.option("--uninstall", is_flag=True, help="Remove the recurring job")
@click.option("--once", is_flag=True, help="Send a single notification and exit")
@pass_app
def notify(app: AppContext, time_str, interval, install, uninstall, once):
    """Send desktop notifications about upcoming entries."""
    if install and uninstall:
        app.fail("--install and --uninstall cannot be used together")

    try:
        time_of_day = parse_time_of_day(time_str or app.config.notify_time)
    except TimeFormatError as e:
        app.fail(str(e))

    if interval is None:
        interval = app.config.notify_interval

    if install or uninstall:
        try:
            installer = get_installer()
            if install:
                spec = ScheduleSpec(time_of_day, interval, task_file=app.resolve_file())
                installer.install(spec)
            else:
                installer.uninstall()
        except SchedulerError as e:
            logger.warning(f"Scheduler error: {e}")
            app.info(f"Could not update the scheduled job: {e}", style="warning")
            return

        if install:
            app.info("Installed scheduled notification job.")
        else:
            app.info("Removed scheduled notification job (if present).")
        return

    notifier = Notifier(
        storage=app.storage(),
        delivery=DesktopNotificationDelivery(),
        time_of_day=time_of_day,
        interval_minutes=interval,
        limit=app.config.notify_limit,
    )

    if once:
        notification = notifier.run_once()
        app.info(notification.title, style="default")
        return

    if interval is not None:
        app.info(f"Notifying every {interval} minute(s). Press Ctrl+C to stop.", style="muted")
    else:
        app.info(f"Notifying daily at {format_time_of_day(time_of_day)}. Press Ctrl+C to stop.", style="muted")
    try:
        notifier.run_forever()
    except KeyboardInterrupt:
        app.info("Notifier stopped.", style="muted")
