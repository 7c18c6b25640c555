"""CLI commands that talk to a running PokeLeague server.

The CLI is a thin client here: it sends requests and renders the results.
"""

import os

import requests
import typer
from rich import box
from rich.console import Console
from rich.table import Table

app = typer.Typer(name="league", help="Query a running PokeLeague server")
console = Console()

SERVER_URL = "http://localhost:8000"
TIMEOUT = 10


def _get_server_url() -> str:
    """Resolve the server URL from the environment."""
    return os.getenv("POKELEAGUE_SERVER_URL", SERVER_URL).rstrip("/")


def _auth_headers(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


def _error_detail(resp: requests.Response) -> str:
    try:
        return resp.json().get("detail", resp.text)
    except ValueError:
        return resp.text


def _login(username: str, password: str) -> str | None:
    """Authenticate and return a JWT token."""
    url = f"{_get_server_url()}/api/auth/login"
    try:
        resp = requests.post(url, json={"username": username, "password": password}, timeout=TIMEOUT)
    except requests.ConnectionError:
        console.print("[red]Cannot connect to PokeLeague server.[/red] Is it running?")
        return None
    if resp.status_code == 200:
        return resp.json()["token"]
    console.print(f"[red]Login failed:[/red] {_error_detail(resp)}")
    return None


@app.command("login")
def login(
    username: str = typer.Argument(..., help="Account username"),
    password: str = typer.Option(..., "--password", "-p", prompt=True, hide_input=True),
) -> None:
    """Log in and print a bearer token."""
    token = _login(username, password)
    if token is None:
        raise typer.Exit(code=1)
    console.print(token, soft_wrap=True)


@app.command("battles")
def list_battles(
    token: str = typer.Option(..., "--token", "-t", envvar="POKELEAGUE_TOKEN", help="Bearer token"),
    recent: int = typer.Option(None, "--recent", "-r", help="Only battles from the last N days"),
) -> None:
    """List battles recorded on the server."""
    url = f"{_get_server_url()}/api/battle"
    params = None
    if recent is not None:
        url += "/recent"
        params = {"days": recent}
    try:
        resp = requests.get(url, headers=_auth_headers(token), params=params, timeout=TIMEOUT)
    except requests.ConnectionError:
        console.print("[red]Cannot connect to PokeLeague server.[/red] Is it running?")
        raise typer.Exit(code=1) from None

    if resp.status_code != 200:
        console.print(f"[red]Error:[/red] {_error_detail(resp)}")
        raise typer.Exit(code=1)

    battles = resp.json()
    if not battles:
        console.print("[dim]No battles recorded.[/dim]")
        return

    table = Table(title="Battles", box=box.ROUNDED)
    table.add_column("ID", style="cyan")
    table.add_column("Trainers", style="bold")
    table.add_column("Location")
    table.add_column("Result", style="yellow")
    table.add_column("Winner")
    table.add_column("Rounds", justify="right")

    for b in battles:
        table.add_row(
            str(b["id"]),
            f"{b['trainer1_name']} vs {b['trainer2_name']}",
            b.get("location") or "-",
            b["result"],
            b.get("winner_name") or "-",
            str(len(b.get("rounds", []))),
        )

    console.print(table)


@app.command("stats")
def trainer_stats(
    trainer_id: int = typer.Argument(..., help="Trainer ID"),
    token: str = typer.Option(..., "--token", "-t", envvar="POKELEAGUE_TOKEN", help="Bearer token"),
) -> None:
    """Show a trainer's battle record."""
    url = f"{_get_server_url()}/api/trainer/{trainer_id}/statistics"
    try:
        resp = requests.get(url, headers=_auth_headers(token), timeout=TIMEOUT)
    except requests.ConnectionError:
        console.print("[red]Cannot connect to PokeLeague server.[/red] Is it running?")
        raise typer.Exit(code=1) from None

    if resp.status_code != 200:
        console.print(f"[red]Error:[/red] {_error_detail(resp)}")
        raise typer.Exit(code=1)

    s = resp.json()
    console.print(f"[bold]{s['trainer_name']}[/bold]")
    console.print(
        f"  Battles: {s['total_battles']}  Wins: [green]{s['wins']}[/green]"
        f"  Losses: [red]{s['losses']}[/red]  Draws: {s['draws']}"
    )
    console.print(f"  Win rate: {s['win_rate'] * 100:.1f}%")
    console.print(f"  Favorite opponent: {s['favorite_opponent']}")
