"""Chat log storage for readable history."""

import json
from datetime import datetime

from .paths import CHAT_LOG_FILE, ensure_data_dir, atomic_json_write

# Maximum number of exchanges to keep
MAX_EXCHANGES = 100


def load_log() -> list[dict]:
    """Load the chat log from disk."""
    ensure_data_dir()
    if not CHAT_LOG_FILE.exists():
        return []
    try:
        with open(CHAT_LOG_FILE, encoding="utf-8") as f:
            return json.load(f)
    except (json.JSONDecodeError, IOError):
        return []


def save_log(log: list[dict]) -> None:
    """Save the chat log to disk, keeping only the most recent exchanges."""
    ensure_data_dir()
    atomic_json_write(CHAT_LOG_FILE, log[-MAX_EXCHANGES:])


def add_exchange(user_id: str, user_message: str, envelope: dict) -> None:
    """Append one message and its reply envelope to the log."""
    log = load_log()
    log.append({
        "timestamp": datetime.now().isoformat(),
        "user_id": user_id,
        "user": user_message,
        "tool": envelope.get("toolCalled"),
        "response": envelope.get("response"),
    })
    save_log(log)


def get_recent_exchanges(count: int = 10, user_id: str | None = None) -> list[dict]:
    """Get the most recent exchanges, optionally only those of one user."""
    if count <= 0:
        return []
    log = load_log()
    if user_id is not None:
        log = [e for e in log if e.get("user_id") == user_id]
    return log[-count:]


def _summarize_response(exchange: dict) -> str:
    response = exchange.get("response")
    if response is None:
        return "(no cards yet)" if exchange.get("tool") else ""
    if isinstance(response, dict):
        return f"{response.get('front', '')} → {response.get('back', '')}"
    return str(response).replace("\n", " ").strip()


def format_exchange_for_display(exchange: dict, index: int) -> str:
    """Format a single exchange for display."""
    timestamp = exchange.get("timestamp", "")
    if timestamp:
        try:
            time_str = datetime.fromisoformat(timestamp).strftime("%Y-%m-%d %H:%M")
        except ValueError:
            time_str = timestamp[:16]
    else:
        time_str = "unknown"

    lines = [f"─── Exchange {index} ({time_str}) ───"]

    user_msg = exchange.get("user", "")
    if len(user_msg) > 100:
        user_msg = user_msg[:100] + "..."
    lines.append(f"You: {user_msg}")

    if exchange.get("tool"):
        lines.append(f"  → {exchange['tool']}")

    reply = _summarize_response(exchange)
    if len(reply) > 200:
        reply = reply[:200] + "..."
    lines.append(f"Assistant: {reply}")

    return "\n".join(lines)


def format_history_for_display(count: int = 10, user_id: str | None = None) -> str:
    """Format recent history for display."""
    exchanges = get_recent_exchanges(count, user_id)

    if not exchanges:
        return "No chat history yet."

    output = ["=" * 60, f"RECENT CHAT HISTORY ({len(exchanges)} exchanges)", "=" * 60]
    for i, exchange in enumerate(exchanges, 1):
        output.append("")
        output.append(format_exchange_for_display(exchange, i))
    output.append("")
    output.append("=" * 60)

    return "\n".join(output)


def clear_log() -> None:
    """Clear the chat log."""
    save_log([])
