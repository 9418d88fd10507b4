"""Command line interface for the CFTools Cloud client."""

import asyncio
import logging
import sys
import threading
from typing import Any, Awaitable, Callable, Dict, Optional

import click
from rich.console import Console
from rich.table import Table

from . import __version__
from .api_clients.base_client import CFToolsClient
from .builder import CFToolsClientBuilder
from .config import ClientConfig
from .exceptions import CFToolsError
from .models import (
    PERMANENT,
    BattlEyeGUID,
    Banlist,
    BohemiaInteractiveId,
    CFToolsId,
    GenericId,
    GetGameServerDetailsRequest,
    GetLeaderboardRequest,
    IPAddress,
    ListBansRequest,
    PlayerRequest,
    Statistic,
    SteamId64,
)

logger = logging.getLogger(__name__)

console = Console()

IDENTIFIER_KINDS: Dict[str, Callable[[str], GenericId]] = {
    "steam64": SteamId64,
    "battleye": BattlEyeGUID,
    "bohemia": BohemiaInteractiveId,
    "cftools": CFToolsId,
    "ip": IPAddress,
}


def run_async(coro: Awaitable[Any]) -> Any:
    """Run a coroutine, also when an event loop is already running.

    Inside a running loop (e.g. under an async test) the coroutine runs on a
    fresh loop in a separate thread.
    """
    try:
        asyncio.get_running_loop()
    except RuntimeError:
        return asyncio.run(coro)  # type: ignore[arg-type]

    result = None
    exception: Optional[BaseException] = None

    def run_in_new_loop():
        nonlocal result, exception
        try:
            result = asyncio.run(coro)  # type: ignore[arg-type]
        except BaseException as e:
            exception = e

    thread = threading.Thread(target=run_in_new_loop)
    thread.start()
    thread.join()

    if exception:
        raise exception
    return result


def parse_identifier(kind: str, value: str) -> GenericId:
    try:
        return IDENTIFIER_KINDS[kind](value)
    except ValueError as e:
        raise click.BadParameter(str(e)) from e


def build_client(ctx: click.Context) -> CFToolsClient:
    config: ClientConfig = ctx.obj["config"]
    try:
        return CFToolsClientBuilder().with_config(config).build()
    except ValueError as e:
        raise click.UsageError(str(e)) from e


def execute(ctx: click.Context, operation: Callable[[CFToolsClient], Awaitable[Any]]) -> Any:
    """Run an operation on a fresh client, turning SDK errors into exit code 1."""

    async def _run():
        async with build_client(ctx) as client:
            return await operation(client)

    try:
        return run_async(_run())
    except CFToolsError as e:
        logger.debug("Operation failed", exc_info=True)
        console.print(f"❌ {type(e).__name__}: {e}", style="red")
        if e.url:
            console.print(f"   {e.url}", style="dim")
        sys.exit(1)


identifier_kind_option = click.option(
    "--kind",
    "-k",
    type=click.Choice(sorted(IDENTIFIER_KINDS)),
    default="steam64",
    show_default=True,
    help="Kind of the player identifier",
)


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Verbose output")
@click.option(
    "--server-api-id",
    envvar="CFTOOLS_SERVER_API_ID",
    help="Server api id (defaults to CFTOOLS_SERVER_API_ID)",
)
@click.version_option(version=__version__, prog_name="cftools")
@click.pass_context
def cli(ctx: click.Context, verbose: bool, server_api_id: Optional[str]):
    """CFTools Cloud command line client.

    Credentials are read from CFTOOLS_APPLICATION_ID and CFTOOLS_SECRET; set
    CFTOOLS_ENTERPRISE_TOKEN to use the enterprise API.
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(name)s %(levelname)s: %(message)s",
    )
    config = ClientConfig.from_env()
    if server_api_id:
        config = config.model_copy(update={"server_api_id": server_api_id})
    ctx.ensure_object(dict)
    ctx.obj["config"] = config


@cli.command()
@click.argument("identifier")
@identifier_kind_option
@click.pass_context
def resolve(ctx: click.Context, identifier: str, kind: str):
    """Resolve a player identifier to its CFTools id."""
    player_id = parse_identifier(kind, identifier)
    cftools_id = execute(ctx, lambda client: client.resolve(player_id))
    console.print(cftools_id.id)


@cli.command()
@click.argument("identifier")
@identifier_kind_option
@click.pass_context
def player(ctx: click.Context, identifier: str, kind: str):
    """Show the details of a player on the server."""
    player_id = parse_identifier(kind, identifier)
    details = execute(
        ctx, lambda client: client.get_player_details(PlayerRequest(player_id))
    )

    table = Table(title=f"Player {identifier}", show_header=False)
    table.add_column("Field", style="cyan")
    table.add_column("Value")
    table.add_row("Names", ", ".join(details.names))
    table.add_row("Playtime", f"{details.playtime}s")
    table.add_row("Sessions", str(details.sessions))
    stats = details.statistics
    table.add_row("Kills", str(stats.kills))
    table.add_row("Deaths", str(stats.deaths))
    table.add_row("K/D", f"{stats.kill_death_ratio:.2f}")
    table.add_row("Longest kill", f"{stats.longest_kill}m")
    console.print(table)


@cli.command()
@click.option(
    "--stat",
    "statistic",
    type=click.Choice([s.value for s in Statistic]),
    default=Statistic.KILLS.value,
    show_default=True,
)
@click.option("--order", type=click.Choice(["ASC", "DESC"]), default="DESC")
@click.option("--limit", type=click.IntRange(1, 100), default=None)
@click.pass_context
def leaderboard(ctx: click.Context, statistic: str, order: str, limit: Optional[int]):
    """Show the leaderboard of the server."""
    request = GetLeaderboardRequest(Statistic(statistic), order=order, limit=limit)  # type: ignore[arg-type]
    items = execute(ctx, lambda client: client.get_leaderboard(request))

    table = Table(title=f"Leaderboard by {statistic}")
    table.add_column("#", justify="right")
    table.add_column("Name", style="cyan")
    table.add_column("Kills", justify="right")
    table.add_column("Deaths", justify="right")
    table.add_column("K/D", justify="right")
    table.add_column("Playtime", justify="right")
    for item in items:
        table.add_row(
            str(item.rank),
            item.name,
            str(item.kills),
            str(item.deaths),
            f"{item.kill_death_ratio:.2f}",
            f"{item.playtime}s",
        )
    console.print(table)


@cli.command()
@click.argument("banlist")
@click.argument("identifier")
@identifier_kind_option
@click.pass_context
def bans(ctx: click.Context, banlist: str, identifier: str, kind: str):
    """List the bans of a player on a ban list."""
    request = ListBansRequest(parse_identifier(kind, identifier), Banlist(banlist))
    entries = execute(ctx, lambda client: client.list_bans(request))

    if not entries:
        console.print(f"No bans for {identifier}", style="green")
        return

    table = Table(title=f"Bans of {identifier}")
    table.add_column("Id", style="dim")
    table.add_column("Created")
    table.add_column("Reason", style="cyan")
    table.add_column("Expires")
    table.add_column("Status")
    for ban in entries:
        expires = (
            PERMANENT if ban.expiration == PERMANENT else ban.expiration.isoformat()
        )
        table.add_row(
            ban.id,
            ban.created.isoformat(),
            ban.reason,
            expires,
            ban.status.value if ban.status else "-",
        )
    console.print(table)


@cli.command("server-details")
@click.argument("ip")
@click.argument("port", type=int)
@click.pass_context
def server_details(ctx: click.Context, ip: str, port: int):
    """Show public details of a game server; needs no credentials."""
    request = GetGameServerDetailsRequest(ip=ip, port=port)
    server = execute(ctx, lambda client: client.get_game_server_details(request))

    table = Table(title=server.name, show_header=False)
    table.add_column("Field", style="cyan")
    table.add_column("Value")
    table.add_row("Map", server.map)
    table.add_row("Version", server.version)
    table.add_row("Online", "✅" if server.online else "❌")
    players = server.status.players
    table.add_row("Players", f"{players.online}/{players.slots} (queue {players.queue})")
    table.add_row("Mods", str(len(server.mods)))
    table.add_row("Host", f"{server.host.address}:{server.host.game_port}")
    console.print(table)


def main():
    cli(obj={})


if __name__ == "__main__":
    main()
