"""CLI commands for studycards."""

import json
import logging
import os
import sys

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from . import __version__
from .config import CLAUDE_MODELS, get_model_specs, load_config, save_config
from .errors import AssistantError
from .paths import DATA_DIR
from .store import JsonCardStore

console = Console()


def configure_logging(verbose: bool) -> None:
    """Send library logs through rich; DEBUG with --verbose, else WARNING."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), rich_tracebacks=True)],
        force=True,
    )
    # The HTTP stack is noisy at DEBUG
    for name in ("anthropic", "httpx", "httpcore"):
        logging.getLogger(name).setLevel(logging.WARNING)


@click.group()
@click.version_option(version=__version__)
@click.option("-v", "--verbose", is_flag=True, help="Show debug logs")
def cli(verbose: bool) -> None:
    """Studycards - Add and review flashcards by chatting.

    Requires ANTHROPIC_API_KEY unless --offline is used.
    """
    configure_logging(verbose)


@cli.command()
@click.argument("message")
@click.option("-u", "--user", "user_id", help="User id (default from config)")
@click.option("--offline", is_flag=True, help="Use rule-based routing instead of Claude")
def assist(message: str, user_id: str | None, offline: bool) -> None:
    """Send one MESSAGE and print the JSON reply envelope."""
    from .assistant import create_assistant

    config = load_config()
    user_id = user_id or config.default_user

    try:
        assistant = create_assistant(config, offline=offline)
    except ValueError as e:
        console.print(f"[red]✗ {e}[/red]")
        sys.exit(1)

    try:
        with assistant:
            reply = assistant.assist(user_id, message)
    except AssistantError as e:
        console.print(f"[red]✗ Request failed: {e}[/red]")
        sys.exit(1)

    click.echo(json.dumps(reply.to_envelope(), ensure_ascii=False, indent=2))


@cli.command()
@click.option("-u", "--user", "user_id", help="User id (default from config)")
@click.option("--offline", is_flag=True, help="Use rule-based routing instead of Claude")
def chat(user_id: str | None, offline: bool) -> None:
    """Start interactive chat.

    Ask to add a card or to be quizzed, in plain language.
    """
    from .chat import run_chat
    run_chat(user_id=user_id, offline=offline)


@cli.command()
@click.option("-u", "--user", "user_id", help="User id (default from config)")
def cards(user_id: str | None) -> None:
    """List your cards."""
    from .chat import cards_table

    config = load_config()
    user_id = user_id or config.default_user

    try:
        with JsonCardStore(config.store_path) as store:
            card_list = store.list_cards(user_id)
    except AssistantError as e:
        console.print(f"[red]✗ Error: {e}[/red]")
        sys.exit(1)

    if not card_list:
        console.print("[yellow]No cards found[/yellow]")
        return

    console.print(cards_table(card_list, title=f"Cards for {user_id}"))


@cli.command()
@click.argument("model_id", required=False)
def model(model_id: str | None) -> None:
    """Show or change the Claude model.

    Without arguments, shows the current model and available options.
    With a model ID, switches to that model.
    """
    config = load_config()
    specs = get_model_specs(config.model)

    if model_id is None:
        console.print(f"\n[bold]Current model:[/bold] [green]{specs['name']}[/green] [dim]({config.model})[/dim]\n")
        console.print("[bold]Available models:[/bold]")

        table = Table()
        table.add_column("#", style="cyan", justify="right")
        table.add_column("Model", style="bold")
        table.add_column("ID", style="dim")
        table.add_column("Max Output", justify="right")
        table.add_column("", style="green")

        for i, (mid, info) in enumerate(CLAUDE_MODELS.items(), 1):
            marker = "current" if mid == config.model else ""
            table.add_row(
                str(i),
                info["name"],
                mid,
                f"{info['max_output_tokens'] // 1000}K",
                marker,
            )
        console.print(table)
        console.print(f"\n[dim]Usage: studycards model <model-id>[/dim]")
        return

    if model_id in CLAUDE_MODELS:
        chosen = model_id
    else:
        # Try partial match
        matches = [m for m in CLAUDE_MODELS if model_id.lower() in m.lower()]
        if len(matches) > 1:
            console.print(f"[yellow]Ambiguous match: {', '.join(matches)}[/yellow]")
            return
        if not matches:
            console.print(f"[red]Unknown model '{model_id}'.[/red]")
            console.print("[dim]Run 'studycards model' to see available models.[/dim]")
            sys.exit(1)
        chosen = matches[0]

    config.model = chosen
    save_config(config)
    console.print(f"[green]Switched to {get_model_specs(chosen)['name']}[/green] [dim]({chosen})[/dim]")


@cli.command()
@click.option("-u", "--user", "user_id", help="User id (default from config)")
def status(user_id: str | None) -> None:
    """Show storage location, card count and API key status."""
    config = load_config()
    user_id = user_id or config.default_user

    console.print(f"[bold]Data directory:[/bold] {DATA_DIR}")
    console.print(f"[bold]Card store:[/bold]     {config.store_path}")

    try:
        with JsonCardStore(config.store_path) as store:
            count = store.count_cards(user_id)
        console.print(f"[bold]Cards ({user_id}):[/bold] {count}")
    except AssistantError as e:
        console.print(f"[red]✗ Card store unavailable: {e}[/red]")

    if os.environ.get("ANTHROPIC_API_KEY"):
        console.print("[green]✓ ANTHROPIC_API_KEY is set[/green]")
    else:
        console.print("[yellow]! ANTHROPIC_API_KEY not set (only --offline will work)[/yellow]")


@cli.command()
@click.option("-n", "--count", default=10, show_default=True, help="Number of exchanges")
@click.option("-u", "--user", "user_id", help="User id (default from config)")
def history(count: int, user_id: str | None) -> None:
    """Show your recent chat exchanges."""
    from .chat_log import format_history_for_display

    user_id = user_id or load_config().default_user
    click.echo(format_history_for_display(count, user_id))


def main() -> None:
    cli()


if __name__ == "__main__":
    main()
