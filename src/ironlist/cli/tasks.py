"""Command-line interface for IronList."""

import logging
import sys
from pathlib import Path

import click

from .. import __version__
from ..config import ConfigError, DefaultPathStore, get_config_path, load_config, save_config
from ..display import number_entries, render_entries
from ..logging_setup import setup_logging
from ..query_engine import EntryQuery, QueryError
from ..storage import EXPECTED_LINE_HINT, EntryLineFormat, MalformedLineError, Storage
from ..theme import get_themed_console
from ..visibility import IndexOutOfRangeError, complete_visible, replace_visible
from .app_context import AppContext, pass_app
from .notify import notify


logger = logging.getLogger(__name__)

INDEX_TYPE = click.IntRange(min=0)


def _handle_default_options(app: AppContext, set_default, show_default) -> None:
    """--show-default and --set-default both act and then exit."""
    if show_default:
        saved = app.defaults.load_default()
        if saved is not None:
            app.info(f"Saved default: {saved}", style="default")
        else:
            app.info("No saved default", style="muted")
        sys.exit(0)

    if set_default is None:
        return

    if set_default == "-":
        app.defaults.clear_default()
        app.info("Cleared saved default")
        sys.exit(0)

    path = Path(set_default).expanduser()
    if not path.exists():
        app.err_console.print(f"Provided path does not exist: {path}", style="warning", soft_wrap=True, markup=False)
        if not click.confirm("Create the file?", default=False, err=True):
            app.info("Aborted; not saving default.", style="muted")
            sys.exit(0)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.touch()
        app.info(f"Created file: {path}", style="default")

    app.defaults.save_default(path)
    app.info(f"Saved default path to config: {path}")
    sys.exit(0)


def _rewrite(app: AppContext, storage: Storage, entries) -> None:
    try:
        storage.rewrite(entries)
    except OSError as e:
        app.fail(f"Cannot write task file {storage.path}: {e}")


@click.group(invoke_without_command=True)
@click.option("--file", "-f", "file_path", type=click.Path(dir_okay=False, path_type=Path),
              help="Path to the task file (overrides the saved default)")
@click.option("--show-all", is_flag=True,
              help="Include entries tagged 'complete' (hidden by default)")
@click.option("--config", "config_path", type=click.Path(dir_okay=False, path_type=Path),
              help="Path to config file")
@click.option("--verbose", "-v", is_flag=True, help="Verbose output")
@click.option("--set-default", "set_default", metavar="PATH",
              help="Save PATH as the default task file and exit ('-' clears it)")
@click.option("--show-default", is_flag=True, help="Show the saved default task file and exit")
@click.version_option(__version__, prog_name="ironlist")
@click.pass_context
def main(ctx, file_path, show_all, config_path, verbose, set_default, show_default):
    """IronList - dated, tagged tasks in a plain text file.

    Each line reads: YYYY-MM-DD<TAB>Description<TAB>tag1,tag2
    (four or more spaces also work as a separator).
    """
    try:
        config = load_config(config_path)
    except ConfigError as e:
        get_themed_console(stderr=True).print(f"Configuration error: {e}", style="error", markup=False)
        sys.exit(1)

    setup_logging(verbose=verbose, log_file=config.log_file)

    app = AppContext(
        config=config,
        defaults=DefaultPathStore(),
        file_option=file_path,
        show_all=show_all,
        verbose=verbose,
    )
    ctx.obj = app

    _handle_default_options(app, set_default, show_default)

    if ctx.invoked_subcommand is None:
        ctx.invoke(list_entries)


@click.command("list")
@pass_app
def list_entries(app: AppContext):
    """List entries, numbered and sorted by date."""
    storage = app.storage()
    entries = app.load_entries(storage)
    numbered = number_entries(entries, app.show_all)
    render_entries(app.console, numbered, app.show_all,
                   app.config.description_width, app.config.tag_width)


@click.command()
@click.argument("line")
@pass_app
def add(app: AppContext, line):
    """Append LINE to the task file in normalized form.

    \b
    Example:
      ironlist add "2025-01-10    Buy milk    home,errand"
    """
    storage = app.storage()
    try:
        storage.append(line)
    except MalformedLineError:
        app.fail(f"Provided line is malformed; expected: {EXPECTED_LINE_HINT}")
    except OSError as e:
        app.fail(f"Cannot write task file {storage.path}: {e}")
    app.info(f"Appended normalized entry to {storage.path}")


@click.command()
@click.argument("index", type=INDEX_TYPE)
@click.argument("line")
@pass_app
def edit(app: AppContext, index, line):
    """Replace entry INDEX (as numbered by `list`) with LINE."""
    try:
        replacement = EntryLineFormat.parse_or_raise(line)
    except MalformedLineError:
        app.fail(f"Replacement line is malformed; expected: {EXPECTED_LINE_HINT}")

    storage = app.storage()
    entries = app.load_entries(storage)
    try:
        position = replace_visible(entries, index, replacement, app.show_all)
    except IndexOutOfRangeError as e:
        app.fail(str(e))

    logger.debug(f"Visible entry {index} maps to stored position {position}")
    _rewrite(app, storage, entries)
    app.info(f"Replaced entry {index} in {storage.path}")


@click.command()
@click.argument("index", type=INDEX_TYPE)
@pass_app
def complete(app: AppContext, index):
    """Mark entry INDEX (as numbered by `list`) complete."""
    storage = app.storage()
    entries = app.load_entries(storage)
    try:
        position, changed = complete_visible(entries, index, app.show_all)
    except IndexOutOfRangeError as e:
        app.fail(str(e))

    if not changed:
        logger.info(f"Entry {index} (stored position {position}) was already complete")
    _rewrite(app, storage, entries)
    app.info(f"Marked entry {index} as complete in {storage.path}")


@click.command()
@click.option("--from", "from_date", metavar="DATE", help="Start date YYYY-MM-DD (inclusive)")
@click.option("--to", "to_date", metavar="DATE", help="End date YYYY-MM-DD (inclusive)")
@click.option("--date", "exact_date", metavar="DATE",
              help="Exact date YYYY-MM-DD (overrides --from and --to)")
@click.option("--tag", "tags", multiple=True, metavar="TAG",
              help="Tag filter (can be used multiple times)")
@click.option("--any", "match_any", is_flag=True,
              help="Match entries with ANY of the tags instead of ALL")
@pass_app
def query(app: AppContext, from_date, to_date, exact_date, tags, match_any):
    """Show entries matching a date range and/or tags.

    Numbers shown are the ones `edit` and `complete` accept.
    """
    try:
        entry_query = EntryQuery.build(from_date, to_date, exact_date, tags, match_any)
    except QueryError as e:
        app.fail(str(e))

    # blank --tag values are dropped by build(), so check what is left
    if entry_query.is_empty():
        app.fail("Query requires at least one of --from, --to, --date or --tag")

    storage = app.storage()
    entries = app.load_entries(storage)
    indices = entry_query.matching_indices(entries)
    numbered = number_entries(entries, app.show_all, indices)
    render_entries(app.console, numbered, app.show_all,
                   app.config.description_width, app.config.tag_width)


@click.group("config")
def config_group():
    """Inspect or create the configuration file."""
    pass


@config_group.command("show")
@click.pass_context
def config_show(ctx):
    """Print the effective configuration as YAML."""
    app = ctx.find_object(AppContext)
    config_file = get_config_path(ctx.find_root().params.get("config_path"))
    app.info(f"# {config_file}", style="muted")
    app.console.print(app.config.to_yaml(), markup=False, highlight=False, soft_wrap=True)


@config_group.command("init")
@click.option("--force", is_flag=True, help="Overwrite an existing config file")
@click.pass_context
def config_init(ctx, force):
    """Write the current settings to the config file."""
    app = ctx.find_object(AppContext)
    config_file = get_config_path(ctx.find_root().params.get("config_path"))
    if config_file.exists() and not force:
        app.fail(f"Config file already exists: {config_file} (use --force to overwrite)")
    written = save_config(app.config, config_file)
    app.info(f"Configuration saved to {written}")


main.add_command(list_entries)
main.add_command(add)
main.add_command(edit)
main.add_command(complete)
main.add_command(query)
main.add_command(notify)
main.add_command(config_group)


if __name__ == "__main__":
    main()
