"""CLI commands for the assistant bridge."""

import typer
import uvicorn

from assistant_bridge.cli.links import app as links_app

main_app = typer.Typer(
    name="assistant-bridge",
    help="Mattermost assistant bridge CLI",
    no_args_is_help=True,
)
main_app.add_typer(links_app, name="links")


@main_app.command("serve")
def serve(
    host: str = typer.Option("0.0.0.0", help="Interface to bind"),
    port: int = typer.Option(8080, help="Port to listen on"),
) -> None:
    """Run the fulfillment webhook server."""
    uvicorn.run("assistant_bridge.api_factory:create_app", factory=True, host=host, port=port)


def main() -> None:
    """Entry point for the CLI."""
    main_app()


__all__ = ["main", "main_app"]
