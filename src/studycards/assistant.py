"""Flashcard assistant: message in, one tool call at most, reply out."""

import logging

from .config import Config, load_config
from .generation import AnthropicGenerationService, GenerationService
from .models import AssistantReply
from .offline import RuleBasedGenerationService
from .router import IntentRouter
from .shaper import shape_reply
from .store import CardStore, JsonCardStore
from .tool_handlers import dispatch
from .tools import FLASHCARD_TOOLS

logger = logging.getLogger(__name__)


class FlashcardAssistant:
    """Routes each message to at most one card-store operation.

    Requests are independent: no conversation history is kept between
    calls to assist().
    """

    def __init__(
        self,
        generation: GenerationService,
        store: CardStore,
        tools: list[dict] | None = None,
    ):
        self.generation = generation
        self.store = store
        self.router = IntentRouter(generation, tools if tools is not None else FLASHCARD_TOOLS)

    def __enter__(self) -> "FlashcardAssistant":
        return self

    def __exit__(self, *exc) -> None:
        self.close()

    def assist(self, user_id: str, message: str) -> AssistantReply:
        """Handle one message for an already-authenticated user.

        Raises:
            GenerationServiceUnavailable: the model call failed
            MalformedToolInvocation: the model proposed an invalid tool call
            StoreUnavailable: the card store failed
        """
        if not user_id:
            raise ValueError("user_id is required")

        route = self.router.route(user_id, message)
        result = dispatch(self.store, user_id, route.invocation, text=route.text)
        return shape_reply(result)

    def close(self) -> None:
        """Dispose of the generation client and the card store."""
        try:
            self.generation.close()
        finally:
            self.store.close()


def create_assistant(config: Config | None = None, offline: bool = False) -> FlashcardAssistant:
    """Build an assistant from configuration.

    Raises:
        ValueError: ANTHROPIC_API_KEY is missing and offline is False
    """
    config = config or load_config()
    if offline:
        generation: GenerationService = RuleBasedGenerationService()
    else:
        generation = AnthropicGenerationService(model=config.model, max_tokens=config.max_tokens)
    logger.debug("Using card store at %s", config.store_path)
    return FlashcardAssistant(generation, JsonCardStore(config.store_path))
