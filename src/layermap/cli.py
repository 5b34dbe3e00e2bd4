"""
Command-line front end for layermap.

Layer files are given in precedence order: the first file wins. An empty
primary layer sits in front of them and receives ``--set`` writes, which
follow the indexer rules (only keys some layer already defines are set).
"""

import json as _json
import logging as _logging
import pathlib as _pathlib
import sys as _sys
import typing as _typing

import click as _click
import pydantic as _pydantic
import yaml as _yaml

import layermap
import layermap._core as _core
import layermap.errors as errors
import layermap.settings as settings_module
import layermap.sources as sources

CONTEXT_SETTINGS: dict[str, _typing.Any] = {
    "help_option_names": ["-h", "--help"],
    "max_content_width": 100,
}


def _configure_logging(level: str) -> _typing.Callable[[], None]:
    """
    Send layermap log records to stderr through rich.

    Only the ``layermap`` package logger is touched, never the root logger.

    Returns:
        A callable that removes the handler and restores the previous level.
    """
    import rich.console as _rich_console
    import rich.logging as _rich_logging

    logger = _logging.getLogger("layermap")
    previous_level = logger.level
    handler = _rich_logging.RichHandler(
        console=_rich_console.Console(stderr=True),
        show_path=False,
    )
    logger.setLevel(level)
    logger.addHandler(handler)

    def restore() -> None:
        logger.removeHandler(handler)
        logger.setLevel(previous_level)

    return restore


def _fail(message: str) -> _typing.NoReturn:
    _click.echo(f"Error: {message}", err=True)
    raise SystemExit(1)


def _layer_options(func: _typing.Callable[..., _typing.Any]) -> _typing.Callable[..., _typing.Any]:
    """Arguments and options shared by every command that reads layers."""
    func = _click.option(
        "--missing-ok/--no-missing-ok",
        default=None,
        help="Skip layer files that do not exist.",
    )(func)
    func = _click.option(
        "--env-prefix",
        default=None,
        help="Load environment variables with this prefix as the highest layer.",
    )(func)
    func = _click.argument(
        "files",
        nargs=-1,
        required=True,
        type=_click.Path(dir_okay=False, path_type=_pathlib.Path),
    )(func)
    return func


def _load(
    settings: settings_module.Settings,
    files: tuple[_pathlib.Path, ...],
    env_prefix: str | None,
    missing_ok: bool | None,
) -> tuple[list[sources.LayerSource], _core.LayeredMap[str, _typing.Any]]:
    """Collect layer sources, letting command options override settings."""
    try:
        loaded = sources.collect_sources(
            files,
            env_prefix=env_prefix if env_prefix is not None else settings.env_prefix,
            missing_ok=missing_ok if missing_ok is not None else settings.missing_ok,
        )
    except errors.LayerFileError as e:
        _fail(str(e))
    return loaded, sources.build_layered_map(loaded)


def _apply_sets(lm: _core.LayeredMap[str, _typing.Any], assignments: tuple[str, ...]) -> None:
    """Apply KEY=VALUE assignments through the indexer."""
    for assignment in assignments:
        key, sep, raw = assignment.partition("=")
        if not sep or not key:
            raise _click.BadParameter(
                f"expected KEY=VALUE, got {assignment!r}",
                param_hint="--set",
            )
        lm[key] = sources.parse_scalar(raw)


def _dump(value: _typing.Any, output_format: str) -> str:
    if output_format == "json":
        return _json.dumps(value, indent=2, default=str)
    return _yaml.safe_dump(value, sort_keys=False, default_flow_style=False).rstrip("\n")


_format_option = _click.option(
    "--format",
    "output_format",
    type=_click.Choice(["yaml", "json"]),
    default=None,
    help="Output format (default from LAYERMAP_OUTPUT_FORMAT, else yaml).",
)

_set_option = _click.option(
    "--set",
    "assignments",
    multiple=True,
    metavar="KEY=VALUE",
    help="Override a key already defined by some layer. Repeatable.",
)


@_click.group(context_settings=CONTEXT_SETTINGS)
@_click.version_option(layermap.__version__, "-v", "--version", prog_name="layermap")
@_click.option(
    "--log-level",
    default=None,
    help="Logging level (default from LAYERMAP_LOG_LEVEL, else WARNING).",
)
@_click.option(
    "--no-env-file",
    is_flag=True,
    default=False,
    help="Ignore the .env file named by LAYERMAP_ENV_FILE.",
)
@_click.pass_context
def cli(ctx: _click.Context, log_level: str | None, no_env_file: bool) -> None:
    """Layermap - resolve keys across layered YAML files.

    FILES are given highest precedence first.
    """
    overrides: dict[str, _typing.Any] = {}
    if log_level is not None:
        overrides["log_level"] = log_level
    try:
        if no_env_file:
            settings = settings_module.Settings.construct_without_dotenv(**overrides)
        else:
            settings = settings_module.Settings(**overrides)
    except _pydantic.ValidationError as e:
        _fail(str(e))
    ctx.call_on_close(_configure_logging(settings.log_level))
    ctx.obj = settings


@cli.command()
@_click.argument("key")
@_layer_options
@_set_option
@_format_option
@_click.pass_obj
def get(
    settings: settings_module.Settings,
    key: str,
    files: tuple[_pathlib.Path, ...],
    env_prefix: str | None,
    missing_ok: bool | None,
    assignments: tuple[str, ...],
    output_format: str | None,
) -> None:
    """Print the value KEY resolves to."""
    _, lm = _load(settings, files, env_prefix, missing_ok)
    _apply_sets(lm, assignments)
    try:
        value = lm.get(key)
    except errors.KeyNotFound as e:
        _fail(str(e))

    if isinstance(value, (dict, list)):
        _click.echo(_dump(value, output_format or settings.output_format))
    else:
        _click.echo(value)


@cli.command()
@_layer_options
@_set_option
@_format_option
@_click.pass_obj
def merge(
    settings: settings_module.Settings,
    files: tuple[_pathlib.Path, ...],
    env_prefix: str | None,
    missing_ok: bool | None,
    assignments: tuple[str, ...],
    output_format: str | None,
) -> None:
    """Print all layers merged into one mapping."""
    _, lm = _load(settings, files, env_prefix, missing_ok)
    _apply_sets(lm, assignments)
    _click.echo(_dump(lm.merge(), output_format or settings.output_format))


@cli.command()
@_layer_options
@_click.pass_obj
def keys(
    settings: settings_module.Settings,
    files: tuple[_pathlib.Path, ...],
    env_prefix: str | None,
    missing_ok: bool | None,
) -> None:
    """Print every distinct key, one per line."""
    _, lm = _load(settings, files, env_prefix, missing_ok)
    for key in lm.keys():
        _click.echo(key)


@cli.command()
@_layer_options
@_click.pass_obj
def layers(
    settings: settings_module.Settings,
    files: tuple[_pathlib.Path, ...],
    env_prefix: str | None,
    missing_ok: bool | None,
) -> None:
    """Show the loaded layers in precedence order."""
    import rich.console as _rich_console
    import rich.table as _rich_table

    loaded, lm = _load(settings, files, env_prefix, missing_ok)

    table = _rich_table.Table(title=f"{lm.layer_count()} layers, {lm.count()} entries")
    table.add_column("#", justify="right")
    table.add_column("Name")
    table.add_column("Entries", justify="right")
    table.add_column("Path", overflow="fold")

    table.add_row("0", "primary", str(len(lm.get_main_layer())), "-")
    for index, source in enumerate(loaded, start=1):
        layer = lm.get_layer(index)
        table.add_row(
            str(index),
            source.name,
            str(len(layer)),
            str(source.path) if source.path is not None else "-",
        )

    _rich_console.Console(file=_sys.stdout).print(table)


def main() -> None:
    """Console script entry point."""
    cli()


if __name__ == "__main__":
    main()
