"""tanlua CLI application with Typer: run Lua scripts against the bindings."""

import logging
from pathlib import Path
from typing import Annotated

import typer
from lupa import LuaError

from tanlua import __version__
from tanlua.bindings.handles import lua_string
from tanlua.config import get_settings
from tanlua.errors import TanluaError
from tanlua.namespace import create_runtime

app = typer.Typer(
    name="tanlua",
    help="Run Lua scripts with tantivy schema, index and document bindings",
    add_completion=False,
    no_args_is_help=True,
)


def version_callback(value: bool) -> None:
    """Show version and exit."""
    if value:
        typer.echo(f"tanlua version {__version__}")
        raise typer.Exit()


def _parse_vars(assignments: list[str]) -> dict[str, str]:
    parsed: dict[str, str] = {}
    for item in assignments:
        name, sep, value = item.partition("=")
        if not sep or not name.isidentifier():
            raise typer.BadParameter(f"Expected NAME=VALUE, got '{item}'", param_hint="--var")
        parsed[name] = value
    return parsed


@app.callback()
def main(
    version: Annotated[
        bool | None,
        typer.Option(
            "--version",
            callback=version_callback,
            is_eager=True,
            help="Show version and exit",
        ),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Log binding activity at DEBUG level"),
    ] = False,
) -> None:
    """tanlua: tantivy bindings for embedded Lua."""
    settings = get_settings()
    level = "DEBUG" if verbose else settings.log_level
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")


@app.command("run")
def run(
    script: Annotated[
        Path,
        typer.Argument(help="Lua script to execute", exists=True, dir_okay=False, readable=True),
    ],
    index_path: Annotated[
        Path | None,
        typer.Option("--index-path", help="Exposed to the script as the global `index_path`"),
    ] = None,
    variables: Annotated[
        list[str] | None,
        typer.Option("--var", help="Extra string global as NAME=VALUE (repeatable)"),
    ] = None,
    namespace: Annotated[
        str | None,
        typer.Option("--namespace", help="Override the global table name (default: tan)"),
    ] = None,
) -> None:
    """Execute SCRIPT in a fresh Lua runtime with the bindings installed."""
    settings = get_settings()
    if namespace:
        if not namespace.isidentifier():
            raise typer.BadParameter(
                f"Invalid Lua identifier: '{namespace}'", param_hint="--namespace"
            )
        settings = settings.model_copy(update={"namespace": namespace})

    extra_globals = _parse_vars(variables or [])
    lua = create_runtime(settings)
    lua_globals = lua.globals()
    if index_path is not None:
        lua_globals[b"index_path"] = lua_string(str(index_path))
    for name, value in extra_globals.items():
        lua_globals[lua_string(name)] = lua_string(value)

    try:
        lua.execute(script.read_text(encoding="utf-8"))
    except TanluaError as exc:
        typer.secho(f"Error: {exc}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1) from exc
    except (LuaError, AttributeError) as exc:
        typer.secho(f"Lua error: {exc}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1) from exc

    typer.secho(f"Script {script.name} completed", fg=typer.colors.GREEN)


if __name__ == "__main__":
    app()
