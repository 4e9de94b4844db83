"""Main CLI entry point for the confluence-mgmt command.

The `q` command runs query-language reads; the `page`, `label`, `space` and
`config` groups cover writes and housekeeping. Results are printed to stdout
as JSON; messages and errors go to stderr. Exit codes follow ExitCode.
"""

import logging
import sys
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Any, Callable, List, Optional

import typer

from src.cli import __version__
from src.cli.client_factory import build_client
from src.cli.config import ConfigManager
from src.cli.errors import CLIError, ConfigError
from src.cli.models import ExitCode
from src.cli.output import FORMATS, OutputHandler
from src.confluence_client.client import ConfluenceClient
from src.confluence_client.errors import (
    APIError,
    APIUnreachableError,
    ConfluenceMgmtError,
    InvalidCredentialsError,
    NotFoundError,
)
from src.confluence_client.transport import sanitize_credentials
from src.query.errors import ParseError, StatementError, UsageError
from src.query.executor import Executor
from src.query.parser import QueryParser
from src.query.schema import build_page_schema

app = typer.Typer(
    name="confluence-mgmt",
    help="""Query and manage Confluence pages, labels and spaces.

QUICK START:
  confluence-mgmt config set instance https://company.atlassian.net/wiki
  confluence-mgmt q 'get(12345){minimal}'
  confluence-mgmt q 'spaces(){minimal}; children(12345){default}'
  confluence-mgmt page create --space DEV --title "Notes" --body "<p>hi</p>"

Credentials are read from CONFLUENCE_USER and CONFLUENCE_API_TOKEN
(environment or .env file).""",
    add_completion=False,
    rich_markup_mode=None,
    no_args_is_help=True,
)
page_app = typer.Typer(help="Page operations (get, create, update, delete)", no_args_is_help=True)
label_app = typer.Typer(help="Label operations (list, add, remove)", no_args_is_help=True)
space_app = typer.Typer(help="Space operations (list, get)", no_args_is_help=True)
config_app = typer.Typer(help="Manage confluence-mgmt configuration", no_args_is_help=True)
app.add_typer(page_app, name="page")
app.add_typer(label_app, name="label")
app.add_typer(space_app, name="space")
app.add_typer(config_app, name="config")

# Module logger
logger = logging.getLogger(__name__)

CONFIG_KEYS = ("space", "instance", "instance-type", "auth-type", "tls-skip-verify")
_TRUE_VALUES = ("true", "yes", "1", "on")
_FALSE_VALUES = ("false", "no", "0", "off")


@dataclass
class CLIState:
    """Per-invocation state shared by all commands through ctx.obj."""
    output: OutputHandler
    config_manager: ConfigManager
    space: Optional[str] = None


def _configure_logging(verbosity: int, logdir: Optional[str] = None) -> None:
    """Configure logging based on verbosity level.

    Configures only the 'src' namespace logger to avoid affecting third-party
    libraries. The root logger is left unchanged.

    Args:
        verbosity: Verbosity level (0=WARNING, 1=INFO, 2=DEBUG)
        logdir: Optional directory for log files (creates timestamped log file)
    """
    if verbosity == 0:
        level = logging.WARNING
    elif verbosity == 1:
        level = logging.INFO
    else:  # verbosity >= 2
        level = logging.DEBUG

    app_logger = logging.getLogger("src")
    app_logger.setLevel(level)
    for handler in list(app_logger.handlers):
        app_logger.removeHandler(handler)
        handler.close()

    log_format = "%(asctime)s [%(levelname)8s] %(message)s"
    date_format = "%Y-%m-%d %H:%M:%S"
    formatter = logging.Formatter(log_format, datefmt=date_format)

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    app_logger.addHandler(console_handler)

    if logdir:
        log_path = Path(logdir)
        log_path.mkdir(parents=True, exist_ok=True)

        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        log_file = log_path / f"confluence-mgmt_{timestamp}.log"

        file_format = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
        file_formatter = logging.Formatter(file_format, datefmt=date_format)
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(level)
        file_handler.setFormatter(file_formatter)
        app_logger.addHandler(file_handler)

        logger.info(f"Logging to file: {log_file}")


def exit_code_for(error: BaseException) -> ExitCode:
    """Map an exception to the process exit code."""
    if isinstance(error, StatementError):
        return exit_code_for(error.cause)
    # A not-found raised while reading (e.g. the version before an update)
    # keeps the transport failure that caused it
    if isinstance(error, NotFoundError) and isinstance(error.__cause__, ConfluenceMgmtError):
        return exit_code_for(error.__cause__)
    if isinstance(error, (ParseError, UsageError)):
        return ExitCode.USAGE_ERROR
    if isinstance(error, InvalidCredentialsError):
        return ExitCode.AUTH_ERROR
    if isinstance(error, APIError) and error.is_auth_error:
        return ExitCode.AUTH_ERROR
    if isinstance(error, APIUnreachableError):
        return ExitCode.NETWORK_ERROR
    return ExitCode.GENERAL_ERROR


def _fail(output: OutputHandler, error: Exception) -> None:
    code = exit_code_for(error)
    logger.debug(f"Command failed with exit code {int(code)}: {type(error).__name__}")
    output.error(sanitize_credentials(str(error)))
    raise typer.Exit(code)


def _state(ctx: typer.Context) -> CLIState:
    return ctx.obj


def _run_with_client(
    ctx: typer.Context,
    action: Callable[[ConfluenceClient], Any],
    message: str = "Contacting Confluence...",
) -> Any:
    """Build a client, run action with it and map failures to exit codes."""
    state = _state(ctx)
    try:
        client = build_client(state.config_manager.load())
        with state.output.spinner(message):
            return action(client)
    except typer.Exit:
        raise
    except ConfluenceMgmtError as e:
        _fail(state.output, e)
    except Exception as e:
        logger.exception("Unexpected error")
        state.output.error(f"Unexpected error: {e}")
        raise typer.Exit(ExitCode.GENERAL_ERROR)


def _require_space(ctx: typer.Context, space: Optional[str]) -> str:
    """Explicit --space, else the global --space, else the configured active space."""
    state = _state(ctx)
    if space:
        return space
    if state.space:
        return state.space
    try:
        active = state.config_manager.load().active_space
    except ConfigError as e:
        _fail(state.output, e)
    if not active:
        _fail(state.output, UsageError(
            "no space given: pass --space or run 'confluence-mgmt config set space <KEY>'"
        ))
    return active


def _read_body(ctx: typer.Context, body: Optional[str], body_file: Optional[str]) -> Optional[str]:
    if body is not None and body_file is not None:
        _fail(_state(ctx).output, UsageError("use either --body or --body-file, not both"))
    if body_file is None:
        return body
    try:
        return Path(body_file).read_text(encoding="utf-8")
    except OSError as e:
        _fail(_state(ctx).output, CLIError(f"cannot read body file {body_file}: {e}"))


def _split_labels(labels: str) -> List[str]:
    return [name.strip() for name in labels.split(",") if name.strip()]


@app.callback()
def main_callback(
    ctx: typer.Context,
    verbosity: int = typer.Option(
        0,
        "--verbosity",
        "--verbose",
        "-v",
        help="Verbosity level: 0=errors only, 1=info, 2=debug",
    ),
    logdir: Optional[str] = typer.Option(
        None,
        "--logdir",
        help="Directory for log files (creates timestamped log file)",
    ),
    no_color: bool = typer.Option(
        False,
        "--no-color",
        help="Disable colored output",
    ),
    output_format: str = typer.Option(
        "json",
        "--format",
        help="Output format: json or compact",
    ),
    space: Optional[str] = typer.Option(
        None,
        "--space",
        help="Confluence space key (overrides the configured active space)",
    ),
    config_path: Optional[str] = typer.Option(
        None,
        "--config",
        help="Path to the config file (default ~/.config/confluence-mgmt/config.yaml)",
        metavar="PATH",
    ),
) -> None:
    """Query and manage Confluence pages, labels and spaces."""
    if output_format not in FORMATS:
        raise typer.BadParameter(
            f"must be one of: {', '.join(FORMATS)}", param_hint="--format"
        )
    _configure_logging(verbosity, logdir)
    ctx.obj = CLIState(
        output=OutputHandler(verbosity=verbosity, no_color=no_color, output_format=output_format),
        config_manager=ConfigManager(config_path),
        space=space,
    )


@app.command("q")
def query_command(
    ctx: typer.Context,
    query: str = typer.Argument(..., help="Query, e.g. 'get(12345){minimal}; children(12345)'"),
) -> None:
    """Execute a query (read operations).

    \b
    OPERATIONS:
      get(ID) | get(space=KEY, title="T")    single page
      list(space=KEY[, title=T][, label=L])  pages in a space
      search("CQL")                          CQL search excerpts
      children(ID) | ancestors(ID)           direct children / breadcrumb
      tree(ID[, depth=N])                    page tree (depth <= 10)
      spaces()                               accessible spaces

    \b
    FIELDS:
      {minimal} {default} {overview} {full} or {id title version ...}
    """
    state = _state(ctx)
    schema = build_page_schema()
    # Parse before touching credentials so syntax errors never need a network
    try:
        parsed = QueryParser(schema).parse(query)
    except ParseError as e:
        _fail(state.output, e)

    def run(client: ConfluenceClient) -> Any:
        return Executor(client, schema).run_query(parsed)

    state.output.print_json(_run_with_client(ctx, run, "Running query..."))


# --- page ---

@page_app.command("get")
def page_get(
    ctx: typer.Context,
    page_id: str = typer.Argument(..., help="Page ID"),
    body: bool = typer.Option(False, "--body", help="Include page body in response"),
) -> None:
    """Get a page by ID."""
    page = _run_with_client(ctx, lambda client: client.get_page(page_id, body))
    _state(ctx).output.print_json(page.to_dict())


@page_app.command("create")
def page_create(
    ctx: typer.Context,
    title: str = typer.Option(..., "--title", help="Page title"),
    space: Optional[str] = typer.Option(None, "--space", help="Space key (default: active space)"),
    body: Optional[str] = typer.Option(None, "--body", help="Page body (storage format)"),
    body_file: Optional[str] = typer.Option(None, "--body-file", help="Read body from file"),
    parent: Optional[str] = typer.Option(None, "--parent", help="Parent page ID"),
) -> None:
    """Create a new page."""
    space_key = _require_space(ctx, space)
    content = _read_body(ctx, body, body_file) or ""
    page = _run_with_client(
        ctx,
        lambda client: client.create_page(space_key, title, content, parent),
        "Creating page...",
    )
    state = _state(ctx)
    state.output.success(f"Created page {page.id} in space {space_key}")
    state.output.print_json(page.to_dict())


@page_app.command("update")
def page_update(
    ctx: typer.Context,
    page_id: str = typer.Argument(..., help="Page ID"),
    title: Optional[str] = typer.Option(None, "--title", help="New title"),
    body: Optional[str] = typer.Option(None, "--body", help="New body (storage format)"),
    body_file: Optional[str] = typer.Option(None, "--body-file", help="Read body from file"),
    message: Optional[str] = typer.Option(None, "--message", help="Version message"),
) -> None:
    """Update an existing page (the version number is incremented automatically)."""
    content = _read_body(ctx, body, body_file)
    page = _run_with_client(
        ctx,
        lambda client: client.update_page(page_id, title=title, body=content, message=message),
        "Updating page...",
    )
    state = _state(ctx)
    version = page.version.number if page.version else "?"
    state.output.success(f"Updated page {page_id} to version {version}")
    state.output.print_json(page.to_dict())


@page_app.command("delete")
def page_delete(
    ctx: typer.Context,
    page_id: str = typer.Argument(..., help="Page ID"),
) -> None:
    """Delete (trash) a page."""
    _run_with_client(ctx, lambda client: client.delete_page(page_id), "Deleting page...")
    _state(ctx).output.success(f"Deleted page {page_id}")


# --- label ---

@label_app.command("list")
def label_list(
    ctx: typer.Context,
    page_id: str = typer.Argument(..., help="Page ID"),
) -> None:
    """List the labels of a page."""
    labels = _run_with_client(ctx, lambda client: client.get_labels(page_id))
    _state(ctx).output.print_json([label.to_dict() for label in labels])


@label_app.command("add")
def label_add(
    ctx: typer.Context,
    page_id: str = typer.Argument(..., help="Page ID"),
    labels: str = typer.Option(..., "--labels", help="Comma-separated labels to add"),
) -> None:
    """Add labels to a page."""
    names = _split_labels(labels)
    if not names:
        _fail(_state(ctx).output, UsageError("--labels must name at least one label"))
    _run_with_client(ctx, lambda client: client.add_labels(page_id, names), "Adding labels...")
    _state(ctx).output.success(f"Added {len(names)} label(s) to page {page_id}")


@label_app.command("remove")
def label_remove(
    ctx: typer.Context,
    page_id: str = typer.Argument(..., help="Page ID"),
    labels: str = typer.Option(..., "--labels", help="Comma-separated labels to remove"),
) -> None:
    """Remove labels from a page."""
    names = _split_labels(labels)
    if not names:
        _fail(_state(ctx).output, UsageError("--labels must name at least one label"))

    def remove_all(client: ConfluenceClient) -> None:
        for name in names:
            client.remove_label(page_id, name)

    _run_with_client(ctx, remove_all, "Removing labels...")
    _state(ctx).output.success(f"Removed {len(names)} label(s) from page {page_id}")


# --- space ---

@space_app.command("list")
def space_list(
    ctx: typer.Context,
    limit: Optional[int] = typer.Option(None, "--limit", help="Maximum number of spaces"),
) -> None:
    """List accessible spaces."""
    spaces = _run_with_client(ctx, lambda client: client.list_spaces(limit))
    _state(ctx).output.print_json([space.to_dict() for space in spaces])


@space_app.command("get")
def space_get(
    ctx: typer.Context,
    space_key: Optional[str] = typer.Argument(None, help="Space key (default: active space)"),
) -> None:
    """Get one space by key."""
    key = _require_space(ctx, space_key)
    space = _run_with_client(ctx, lambda client: client.get_space(key))
    _state(ctx).output.print_json(space.to_dict())


# --- config ---

@config_app.command("show")
def config_show(ctx: typer.Context) -> None:
    """Show current configuration."""
    state = _state(ctx)
    try:
        config = state.config_manager.load()
    except ConfigError as e:
        _fail(state.output, e)

    state.output.print_mapping("Configuration", [
        ("config file", state.config_manager.config_path),
        ("instance", config.instance_url),
        ("instance type", config.instance_type),
        ("auth type", config.auth_type),
        ("active space", config.active_space),
        ("tls skip verify", config.tls_skip_verify),
    ])


@config_app.command("set")
def config_set(
    ctx: typer.Context,
    key: str = typer.Argument(..., help=f"One of: {', '.join(CONFIG_KEYS)}"),
    value: str = typer.Argument(..., help="New value"),
) -> None:
    """Set a configuration value.

    \b
    EXAMPLES:
      confluence-mgmt config set space DEV
      confluence-mgmt config set instance https://company.atlassian.net/wiki
      confluence-mgmt config set instance-type server
    """
    state = _state(ctx)
    manager = state.config_manager
    try:
        if key == "space":
            manager.set_active_space(value)
        elif key == "instance":
            manager.set_instance_url(value)
        elif key == "instance-type":
            manager.set_instance_type(value)
        elif key == "auth-type":
            manager.set_auth_type(value)
        elif key == "tls-skip-verify":
            lowered = value.lower()
            if lowered not in _TRUE_VALUES + _FALSE_VALUES:
                raise UsageError(f"tls-skip-verify expects true or false, got {value!r}")
            manager.set_tls_skip_verify(lowered in _TRUE_VALUES)
        else:
            raise UsageError(
                f"unknown config key {key!r} (supported: {', '.join(CONFIG_KEYS)})"
            )
    except ConfluenceMgmtError as e:
        _fail(state.output, e)

    state.output.success(f"Set {key} to {value}")


@app.command("version")
def version_command() -> None:
    """Print version information."""
    typer.echo(f"confluence-mgmt version {__version__}")


def main() -> None:
    """Main entry point for the CLI application."""
    app()


# Allow running as: python -m src.cli.main
if __name__ == "__main__":
    main()
