"""
Lighting Service CLI - run the example backend and talk to it.
"""

import asyncio
import logging
import sys
from typing import Optional

import aiohttp
import click
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from .config import get_config
from .client import DEFAULT_URL, DeviceNotFoundError, LightingClient

console = Console()


def setup_logging(verbose: bool = False):
    """Set up logging configuration."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[logging.StreamHandler()]
    )


def run_async(coro):
    """Run an async function."""
    return asyncio.run(coro)


def _unreachable(url: str, error: Exception):
    console.print(f"[red]Could not reach lighting service at {escape(url)}: {escape(str(error))}[/red]")
    sys.exit(1)


def _device_table(devices) -> Table:
    table = Table(title="Lighting Devices")
    table.add_column("ID", style="cyan")
    table.add_column("Name")
    table.add_column("Dimmable")
    table.add_column("Value", justify="right")

    for device in devices:
        table.add_row(
            device.id,
            device.name,
            "[green]yes[/green]" if device.dimmable else "[dim]no[/dim]",
            str(device.value),
        )
    return table


@click.group()
@click.option('-v', '--verbose', is_flag=True, help='Enable verbose output')
@click.pass_context
def main(ctx, verbose):
    """💡 Lighting Service - example device backend"""
    ctx.ensure_object(dict)
    ctx.obj['verbose'] = verbose
    setup_logging(verbose)


@main.command()
@click.option('--host', '-h', default=None, help='Host to bind to')
@click.option('--port', '-p', default=None, type=int, help='Port to bind to (default: $PORT or 3000)')
@click.option('--delay', '-d', 'delay_ms', default=None, type=click.IntRange(min=0),
              help='Simulated latency in milliseconds')
def serve(host: Optional[str], port: Optional[int], delay_ms: Optional[int]):
    """Start the lighting service."""
    from .api.server import run_server, ServerBindError

    config = get_config()
    if host is not None:
        config.server.host = host
    if port is not None:
        config.server.port = port
    if delay_ms is not None:
        config.server.delay_ms = delay_ms

    console.print(f"\n[bold blue]💡 Starting Lighting Service[/bold blue]")
    host_display = f"[{config.server.host}]" if ":" in config.server.host else config.server.host
    console.print(f"   Listening on: http://{escape(host_display)}:{config.server.port}")
    console.print(f"   Response delay: {config.server.delay_ms} ms")
    console.print(f"   Press Ctrl+C to stop\n")

    try:
        run_server(config)
    except ServerBindError as e:
        console.print(f"[red]Could not start: {escape(str(e))}[/red]")
        sys.exit(1)


@main.command()
@click.option('--url', '-u', default=DEFAULT_URL, show_default=True, help='Service base URL')
def devices(url: str):
    """List devices on a running service."""

    async def _list():
        async with LightingClient(url) as client:
            return await client.list_devices()

    try:
        devices = run_async(_list())
    except aiohttp.ClientError as e:
        _unreachable(url, e)

    console.print(_device_table(devices))


@main.command('set')
@click.argument('device_id')
@click.argument('value', type=float)
@click.option('--url', '-u', default=DEFAULT_URL, show_default=True, help='Service base URL')
def set_value(device_id: str, value: float, url: str):
    """Set a device's brightness VALUE (0.0 - 1.0)."""

    async def _set():
        async with LightingClient(url) as client:
            return await client.set_value(device_id, value)

    try:
        device = run_async(_set())
    except DeviceNotFoundError:
        console.print(f"[red]Device not found: {escape(device_id)}[/red]")
        sys.exit(1)
    except aiohttp.ClientError as e:
        _unreachable(url, e)

    console.print(f"[green]✓[/green] {device.name} ([cyan]{device.id}[/cyan]) set to {device.value}")


if __name__ == '__main__':
    main()
