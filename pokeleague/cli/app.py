"""Main CLI application for PokeLeague."""

import typer
from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from pokeleague import __version__
from pokeleague.cli.commands import league
from pokeleague.data.store import Store
from pokeleague.services.token_service import TokenService
from pokeleague.utils.config import get_settings
from pokeleague.utils.helpers import format_date, format_datetime

app = typer.Typer(
    name="pokeleague",
    help="PokeLeague - Pokemon, trainers and battles over HTTP",
    no_args_is_help=True,
)

app.add_typer(league.app, name="league", help="Query a running server")

console = Console()


@app.command("serve")
def serve(
    host: str = typer.Option(None, "--host", "-h", help="Bind address (defaults to settings)"),
    port: int = typer.Option(None, "--port", "-p", help="Port (defaults to settings)"),
    reload: bool = typer.Option(False, "--reload", help="Reload on code changes"),
) -> None:
    """Run the API server with uvicorn."""
    import uvicorn

    settings = get_settings()
    host = host or settings.host
    port = port or settings.port
    console.print(f"[bold]PokeLeague API[/bold] on http://{host}:{port} [dim](docs at /docs)[/dim]")
    uvicorn.run("pokeleague.server:app", host=host, port=port, reload=reload)


@app.command("version")
def show_version() -> None:
    """Show version information."""
    console.print(f"PokeLeague v{__version__}")


@app.command("token")
def issue_token(
    username: str = typer.Argument(..., help="A sample account, e.g. admin or trainer"),
) -> None:
    """Issue a development token for one of the sample accounts."""
    settings = get_settings()
    store = Store.seeded(settings.bcrypt_rounds)
    user = store.users.get_by_username(username)
    if user is None:
        names = ", ".join(u.username for u in store.users.get_all())
        console.print(f"[red]Unknown user '{username}'.[/red] Sample accounts: {names}")
        raise typer.Exit(code=1)

    tokens = TokenService(settings)
    token = tokens.generate_token(user)
    console.print(Panel(
        f"[bold]{user.username}[/bold] ({user.role.value})\n"
        f"Expires: {format_datetime(tokens.expires_at())} UTC",
        title="Development token",
        box=box.ROUNDED,
    ))
    console.print(token, soft_wrap=True)


@app.command("seed")
def show_seed() -> None:
    """Show the sample league loaded at startup."""
    store = Store.seeded(get_settings().bcrypt_rounds)

    trainers = Table(title="Trainers", box=box.ROUNDED)
    trainers.add_column("ID", style="cyan", justify="right")
    trainers.add_column("Name", style="bold")
    trainers.add_column("Age", justify="right")
    trainers.add_column("Region")
    trainers.add_column("Badges", justify="right")
    trainers.add_column("Team")
    for t in store.trainers.get_all():
        trainers.add_row(
            str(t.id),
            t.name,
            str(t.age),
            t.region,
            str(t.badge_count),
            ", ".join(p.name for p in t.pokemon_team) or "-",
        )
    console.print(trainers)

    battles = Table(title="Battles", box=box.ROUNDED)
    battles.add_column("ID", style="cyan", justify="right")
    battles.add_column("Trainers", style="bold", no_wrap=True)
    battles.add_column("Location", no_wrap=True)
    battles.add_column("Date")
    battles.add_column("Result", style="yellow")
    battles.add_column("Winner")
    for b in store.battles.get_all():
        battles.add_row(
            str(b.id),
            f"{b.trainer1_name} vs {b.trainer2_name}",
            b.location,
            format_date(b.battle_date),
            b.result.value,
            b.winner_name or "-",
        )
    console.print(battles)


if __name__ == "__main__":
    app()
