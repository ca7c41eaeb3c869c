"""CLI commands for tronbridge.

The CLI is the single entry point: `serve` starts the gateway, `config show`
prints the resolved configuration.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console

from tronbridge import __logo__, __version__
from tronbridge.cli.shared.logging_utils import configure_console_logging, ensure_rotating_log_file
from tronbridge.cli.shared.network_utils import is_port_in_use
from tronbridge.config.schema import Config
from tronbridge.utils.exceptions import ConfigError

app = typer.Typer(
    name="tronbridge",
    help=f"{__logo__} tronbridge - Ethereum JSON-RPC gateway for TRON-style nodes",
    no_args_is_help=True,
)
config_app = typer.Typer(help="Inspect configuration")
app.add_typer(config_app, name="config")

console = Console()


def version_callback(value: bool):
    if value:
        console.print(f"{__logo__} tronbridge v{__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        None, "--version", "-V", callback=version_callback, is_eager=True
    ),
):
    """tronbridge - Ethereum JSON-RPC gateway for TRON-style nodes."""
    pass


def _load(config_file: Path | None) -> Config:
    from tronbridge.config.loader import load_config

    try:
        return load_config(config_file)
    except ConfigError as e:
        console.print(f"[red]{e.message}[/red]")
        raise typer.Exit(1) from e


def resolve_serve_config(
    config: Config,
    *,
    port: int | None = None,
    dest: str | None = None,
    host: str | None = None,
    verbose: bool = False,
) -> Config:
    """Overlay CLI options on the loaded config; the cached instance is left untouched."""
    proxy_update = {
        key: value
        for key, value in {"port": port, "destination": dest, "host": host}.items()
        if value is not None
    }
    proxy = config.proxy.model_copy(update=proxy_update)
    logging_cfg = config.logging.model_copy(update={"level": "DEBUG"}) if verbose else config.logging
    resolved = config.model_copy(update={"proxy": proxy, "logging": logging_cfg})
    if resolved.proxy.port is None:
        raise ConfigError("listen port is required (--port or proxy.port)", field="proxy.port")
    if not resolved.destination_url:
        raise ConfigError("destination URL is required (--dest or proxy.destination)", field="proxy.destination")
    return resolved


# ============================================================================
# Gateway / Server
# ============================================================================


@app.command()
def serve(
    port: Optional[int] = typer.Option(None, "--port", "-p", help="Port to listen on"),
    dest: Optional[str] = typer.Option(None, "--dest", "-d", help="Destination URL to forward requests to"),
    host: Optional[str] = typer.Option(None, "--host", help="Bind host"),
    config_file: Optional[Path] = typer.Option(None, "--config", "-c", help="Config file (default ~/.tronbridge/config.json)"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log request/response bodies and headers"),
):
    """Start the JSON-RPC gateway."""
    try:
        config = resolve_serve_config(_load(config_file), port=port, dest=dest, host=host, verbose=verbose)
    except ConfigError as e:
        console.print(f"[red]{e.message}[/red]")
        raise typer.Exit(1) from e

    bind_host, bind_port = config.proxy.host, config.proxy.port
    if is_port_in_use(bind_host, bind_port):
        console.print(
            f"[red]Port {bind_port} is already in use.[/red] "
            f"Close the process using it, or use [cyan]--port[/cyan] to pick another one (current: {bind_host}:{bind_port})."
        )
        raise typer.Exit(1)

    configure_console_logging(config.logging.level)
    log_path = ensure_rotating_log_file("serve", level=config.logging.level) if config.logging.file_enabled else None

    from tronbridge.api.server import build_forwarder, create_proxy_app

    console.print(f"{__logo__} Starting proxy server on port {bind_port} forwarding to {config.destination_url}")
    if log_path:
        console.print(f"[dim]Logs: {log_path}[/dim]")

    api_app = create_proxy_app(forwarder=build_forwarder(config))

    import uvicorn
    uvicorn.run(
        api_app,
        host=bind_host,
        port=bind_port,
        log_level="debug" if verbose else "info",
    )


# ============================================================================
# Config Commands
# ============================================================================


@config_app.command("show")
def config_show(
    config_file: Optional[Path] = typer.Option(None, "--config", "-c", help="Config file (default ~/.tronbridge/config.json)"),
):
    """Print the configuration after file and environment overrides."""
    from tronbridge.config.loader import convert_to_camel

    config = _load(config_file)
    console.print_json(json.dumps(convert_to_camel(config.model_dump())))


if __name__ == "__main__":
    app()
