"""Terminal chat UI for the flashcard assistant."""

import sys

from prompt_toolkit import PromptSession
from prompt_toolkit.history import FileHistory
from prompt_toolkit.styles import Style
from rich import box
from rich.console import Console
from rich.markdown import Markdown
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from .assistant import FlashcardAssistant, create_assistant
from .chat_log import add_exchange, format_history_for_display
from .config import get_model_specs, load_config
from .errors import AssistantError
from .models import AssistantReply, Card, ToolName
from .paths import DATA_DIR, HISTORY_FILE

# Style for prompt_toolkit
PROMPT_STYLE = Style.from_dict({
    "prompt": "cyan bold",
})


def cards_table(cards: list[dict], title: str = "Your Cards") -> Table:
    """Build a table of stored card documents."""
    table = Table(title=title)
    table.add_column("#", style="dim", justify="right")
    table.add_column("Front", style="cyan")
    table.add_column("Back", style="green")
    for i, card in enumerate(cards, 1):
        front = card.get("front", "")
        back = card.get("back", "")
        table.add_row(
            str(i),
            front[:60] + "..." if len(front) > 60 else front,
            back[:60] + "..." if len(back) > 60 else back,
        )
    return table


def render_reply(console: Console, reply: AssistantReply, session: PromptSession | None = None) -> None:
    """Print a reply; quiz cards hide the back until Enter is pressed."""
    if reply.tool_called is None:
        console.print(Markdown(reply.payload or ""))
        return

    if reply.tool_called is ToolName.ADD_FLASHCARD:
        card = Card.from_dict(reply.payload)
        body = Text()
        body.append("Front: ", style="bold")
        body.append(f"{card.front}\n")
        body.append("Back:  ", style="bold")
        body.append(card.back)
        console.print(Panel(body, title="[green]✓ Card added[/green]", border_style="green", box=box.ROUNDED))
        return

    if reply.payload is None:
        console.print("[yellow]You have no cards yet. Ask me to add one first.[/yellow]")
        return

    card = Card.from_dict(reply.payload)
    console.print(Panel(Text(card.front), title="[cyan]Quiz[/cyan]", border_style="cyan", box=box.ROUNDED))
    if session is not None:
        session.prompt([("class:prompt", "Press Enter to reveal the answer...")])
    console.print(Panel(Text(card.back), title="[green]Answer[/green]", border_style="green", box=box.ROUNDED))


def _print_welcome(console: Console, assistant: FlashcardAssistant, user_id: str, offline: bool) -> None:
    welcome_text = Text()
    welcome_text.append("STUDYCARDS ASSISTANT\n", style="bold cyan")
    if offline:
        welcome_text.append("Offline mode (rule-based)", style="yellow")
    else:
        model = assistant.generation.model
        welcome_text.append(f"Model: {get_model_specs(model)['name']}", style="green")
        welcome_text.append(f"  ({model})", style="dim")
    welcome_text.append(f"\nUser: {user_id}", style="dim")
    welcome_text.justify = "center"
    console.print(Panel(welcome_text, border_style="cyan", box=box.DOUBLE))

    cmd_table = Table(show_header=False, box=None, padding=(0, 2))
    cmd_table.add_column(style="cyan", min_width=10)
    cmd_table.add_column(style="dim")
    cmd_table.add_row("cards", "List your cards")
    cmd_table.add_row("history", "Show recent chat history")
    cmd_table.add_row("exit", "Quit")
    console.print(Panel(cmd_table, title="[bold dim]Commands[/bold dim]", border_style="dim", box=box.ROUNDED))
    console.print("[dim]Try: \"Add a flashcard: front='2+2', back='4'\" or \"Quiz me\"[/dim]\n")


def run_chat(user_id: str | None = None, offline: bool = False) -> None:
    """Run the interactive chat interface."""
    console = Console()
    config = load_config()
    user_id = user_id or config.default_user

    try:
        assistant = create_assistant(config, offline=offline)
    except ValueError as e:
        console.print(f"[red]✗ {e}[/red]")
        sys.exit(1)

    _print_welcome(console, assistant, user_id, offline)

    # Set up prompt with history
    try:
        DATA_DIR.mkdir(parents=True, exist_ok=True)
        session: PromptSession = PromptSession(
            history=FileHistory(str(HISTORY_FILE)),
            style=PROMPT_STYLE,
        )
    except OSError:
        session = PromptSession(style=PROMPT_STYLE)

    with assistant:
        while True:
            try:
                user_input = session.prompt([("class:prompt", "You: ")]).strip()
            except (KeyboardInterrupt, EOFError):
                console.print("\n[dim]Goodbye![/dim]")
                break

            if not user_input:
                continue

            command = user_input.lower()
            if command in ("exit", "quit", "q"):
                console.print("[dim]Goodbye![/dim]")
                break

            if command == "history":
                console.print(format_history_for_display(user_id=user_id))
                continue

            if command == "cards":
                try:
                    cards = assistant.store.list_cards(user_id)
                except AssistantError as e:
                    console.print(f"[red]✗ Request failed: {e}[/red]")
                    continue
                if cards:
                    console.print(cards_table(cards))
                else:
                    console.print("[yellow]No cards yet[/yellow]")
                continue

            try:
                with console.status("[dim]Thinking...[/dim]"):
                    reply = assistant.assist(user_id, user_input)
            except AssistantError as e:
                console.print(f"[red]✗ Request failed: {e}[/red]")
                continue

            add_exchange(user_id, user_input, reply.to_envelope())
            try:
                render_reply(console, reply, session)
            except (KeyboardInterrupt, EOFError):
                console.print()
            console.print()
