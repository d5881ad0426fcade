#!/usr/bin/env python3
from pathlib import Path
from typing import Optional

import click
import pyperclip
from rich.console import Console
from rich.markup import escape

from .config import DEFAULT_CONFIG_FILENAME, Config, ConfigError
from .core import CheckError, MessageChecker
from .observers import ConsoleReportObserver, FileLogObserver

console = Console(soft_wrap=True)
err_console = Console(stderr=True, soft_wrap=True)

EXIT_USAGE = 2


def print_config(config: Config, repo_path: Path) -> None:
    """Print the active settings and where each one came from."""
    config_path = repo_path / DEFAULT_CONFIG_FILENAME

    console.print("\n[bold]Current Configuration Settings:[/bold]")
    if config_path.exists():
        console.print(f"[dim]Config file: {escape(config_path.as_posix())}[/dim]")
    else:
        console.print("[dim]Using default values (no config file found)[/dim]")

    console.print(f"\n{'Setting':<28} {'Value':<40} {'Source':<10}")
    console.print("-" * 80)

    env_fields = Config.env_field_names()
    for name, value in config.model_dump().items():
        if isinstance(value, tuple):
            value = ", ".join(value) or "-"
        elif value is None:
            value = "None"
        if name in env_fields:
            source = "env"
        elif name in config.model_fields_set:
            source = "config"
        else:
            source = "default"
        console.print(f"{name:<28} {str(value):<40} {source:<10}", markup=False, highlight=False)

    console.print(
        f"\nTo modify these settings, create or edit {DEFAULT_CONFIG_FILENAME} in your repository root"
    )


@click.command()
@click.argument(
    "message_file",
    required=False,
    type=click.Path(exists=True, dir_okay=False, allow_dash=True, path_type=Path),
)
@click.option(
    "-p",
    "--path",
    default=".",
    help="Path to git repository and config file (defaults to current directory)",
    type=click.Path(exists=True, file_okay=False, dir_okay=True, path_type=Path),
)
@click.option(
    "-r",
    "--range",
    "rev_range",
    help="Check every commit in a git revision range (e.g. origin/main..HEAD)",
)
@click.option(
    "--max-subject-length",
    type=click.IntRange(min=1),
    help="Hard limit for the subject length (overrides config setting)",
)
@click.option(
    "--require-scope",
    is_flag=True,
    help="Require a scope in every header (overrides config setting)",
)
@click.option(
    "--strict",
    is_flag=True,
    help="Treat warnings as failures",
)
@click.option(
    "-q", "--quiet", is_flag=True, help="Only print errors"
)
@click.option(
    "-l",
    "--log-file",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Optional file to log validation results (overrides config setting)",
)
@click.option(
    "--config-list", is_flag=True, help="Display current configuration settings"
)
@click.option(
    "--config-dir",
    is_flag=True,
    help="Display the config file location and copy it to clipboard",
)
@click.option("--version", is_flag=True, help="Display version information and exit")
@click.pass_context
def main(
    ctx: click.Context,
    message_file: Optional[Path],
    path: Path,
    rev_range: Optional[str],
    max_subject_length: Optional[int],
    require_scope: bool,
    strict: bool,
    quiet: bool,
    log_file: Optional[Path],
    config_list: bool,
    config_dir: bool,
    version: bool,
):
    """
    Validate commit messages against the Conventional Commits format.

    MESSAGE_FILE is the commit message file git passes to a commit-msg hook.
    Use '-' or omit it to read the message from standard input, or use
    --range to check commits already in the repository.

    Exit status is 0 when every message is valid, 1 when a message has
    errors and 2 for usage errors.

    Configuration can be set in .commitguard.toml in the repository root.
    Command line options override configuration file settings.
    """
    if version:
        from .version import display_version_info

        display_version_info(console)
        return

    repo_path = path.absolute()

    try:
        config = Config.load(repo_path)
    except ConfigError as e:
        err_console.print(f"[red]Error: {escape(str(e))}[/red]")
        ctx.exit(EXIT_USAGE)

    if config_list:
        print_config(config, repo_path)
        return

    if config_dir:
        config_path = repo_path / DEFAULT_CONFIG_FILENAME

        if not config_path.exists():
            Config().save(repo_path)
            console.print("[yellow]Created new config file with default values[/yellow]")

        console.print(f"[green]Config file location:[/green] {escape(str(config_path))}")
        try:
            pyperclip.copy(str(config_path))
            console.print("[green]Path copied to clipboard![/green]")
        except pyperclip.PyperclipException as e:
            console.print(f"[yellow]Could not copy to clipboard: {escape(str(e))}[/yellow]")
        return

    if message_file is not None and rev_range:
        raise click.UsageError("Pass either MESSAGE_FILE or --range, not both")

    try:
        config = config.with_overrides(
            max_subject_length=max_subject_length,
            require_scope=require_scope or None,
        )
        log_file_path = log_file or config.get_log_file()
    except ConfigError as e:
        err_console.print(f"[red]Error: {escape(str(e))}[/red]")
        ctx.exit(EXIT_USAGE)

    checker = MessageChecker(config)
    checker.add_observer(ConsoleReportObserver(console, quiet=quiet))
    if log_file_path:
        checker.add_observer(FileLogObserver(str(log_file_path)))

    try:
        if rev_range:
            results = checker.check_range(repo_path, rev_range)
        elif message_file is not None and str(message_file) != "-":
            results = [checker.check_file(message_file)]
        else:
            raw = click.get_binary_stream("stdin").read().decode("utf-8", errors="replace")
            results = [checker.check_text(raw)]
    except CheckError as e:
        err_console.print(f"[red]Error: {escape(str(e))}[/red]")
        ctx.exit(EXIT_USAGE)
    except KeyboardInterrupt:
        err_console.print("\n[yellow]Operation cancelled by user[/yellow]")
        ctx.exit(EXIT_USAGE)

    checker.finish(results)
    ctx.exit(MessageChecker.exit_code(results, strict=strict))


if __name__ == "__main__":
    main()
