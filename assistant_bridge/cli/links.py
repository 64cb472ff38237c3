"""CLI commands for managing assistant account links."""

from __future__ import annotations

import typer
from rich.console import Console
from rich.table import Table

from assistant_bridge.bootstrap import build_identity_store
from assistant_bridge.core.exceptions import (
    IdentityNotFoundError,
    NotLinkedError,
    StorageError,
)
from assistant_bridge.services.identity_store import IdentityStore
from assistant_bridge.services.link_commands import CONNECTED, connect

app = typer.Typer(name="links", help="Manage assistant account links")
console = Console()


def _get_store() -> IdentityStore:
    """Get the identity store with the default TinyDB adapter."""
    return build_identity_store()


@app.command("connect")
def connect_link(
    username: str = typer.Argument(..., help="Username the assistant stores for the caller"),
    account_id: str = typer.Argument(..., help="Mattermost user id to link"),
) -> None:
    """Link an assistant username to a Mattermost account."""
    response = connect(_get_store(), account_id, username)
    if response.text != CONNECTED:
        console.print(f"[red]Error:[/red] {response.text}")
        raise typer.Exit(1)
    console.print(f"[green]Linked '{username}' to {account_id}.[/green]")


@app.command("disconnect")
def disconnect_link(
    username: str | None = typer.Option(None, "--username", "-u", help="Linked username"),
    account_id: str | None = typer.Option(None, "--account-id", "-a", help="Linked account"),
) -> None:
    """Remove a link by username or by Mattermost account id."""
    if not username and not account_id:
        console.print("[red]Error:[/red] pass --username or --account-id")
        raise typer.Exit(2)
    store = _get_store()
    try:
        target = username or store.resolve_by_account_id(account_id or "")
        store.unlink(target)
    except IdentityNotFoundError as exc:
        console.print(f"[red]Not linked:[/red] {exc}")
        raise typer.Exit(1) from exc
    except StorageError as exc:
        console.print(f"[red]Storage error:[/red] {exc}")
        raise typer.Exit(1) from exc
    console.print(f"[green]Unlinked '{target}'.[/green]")


@app.command("show")
def show_link(username: str = typer.Argument(..., help="Linked username")) -> None:
    """Print the Mattermost account linked to a username."""
    try:
        account_id = _get_store().resolve(username)
    except NotLinkedError as exc:
        console.print(f"[dim]'{username}' is not linked.[/dim]")
        raise typer.Exit(1) from exc
    console.print(account_id)


@app.command("list")
def list_links(page: int = typer.Option(0, "--page", "-p", help="Page number")) -> None:
    """List linked usernames."""
    links = _get_store().list_links(page)
    if not links:
        console.print("[dim]No account links found.[/dim]")
        return

    table = Table(title="Account links")
    table.add_column("Username", style="cyan")
    table.add_column("Account id")
    for username, account_id in links:
        table.add_row(username, account_id)
    console.print(table)


__all__ = ["app"]
