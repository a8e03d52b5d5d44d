"""Tool dispatcher for the flashcard assistant.

Each handler is registered with @handler(ToolName.X) and receives:
    store: CardStore instance
    user_id: the caller's identity
    arguments: validated tool arguments
"""

from __future__ import annotations

import logging
import time
from typing import Any, Callable, TYPE_CHECKING

from .errors import MalformedToolInvocation
from .models import DispatchResult, ToolInvocation, ToolName

if TYPE_CHECKING:
    from .store import CardStore

logger = logging.getLogger(__name__)

HANDLERS: dict[ToolName, Callable[..., Any]] = {}


def handler(name: ToolName):
    """Decorator to register a tool handler."""
    def decorator(fn: Callable) -> Callable:
        HANDLERS[name] = fn
        return fn
    return decorator


@handler(ToolName.ADD_FLASHCARD)
def handle_add_flashcard(store: CardStore, user_id: str, arguments: dict) -> dict:
    card_id = store.insert_card(arguments["front"], arguments["back"], user_id)
    return {
        "front": arguments["front"],
        "back": arguments["back"],
        "id": card_id,
    }


@handler(ToolName.QUIZ_USER)
def handle_quiz_user(store: CardStore, user_id: str, arguments: dict) -> dict | None:
    # Takes no arguments; anything the model sent is ignored
    return store.sample_one_card(user_id)


def dispatch(
    store: CardStore,
    user_id: str,
    invocation: ToolInvocation | None,
    text: str | None = None,
) -> DispatchResult:
    """Run at most one store operation for a routed message.

    With no invocation the router's text is passed through verbatim.
    """
    if invocation is None:
        return DispatchResult(tool_called=None, payload=text)

    fn = HANDLERS.get(invocation.name)
    if fn is None:
        raise MalformedToolInvocation(f"No handler for tool {invocation.name.value}")

    t0 = time.monotonic()
    payload = fn(store, user_id, dict(invocation.arguments))
    logger.info(
        "Tool %s for user %s: %.3fs",
        invocation.name.value,
        user_id,
        time.monotonic() - t0,
    )
    return DispatchResult(tool_called=invocation.name, payload=payload)
