"""Response shaping: one reply schema for every tool outcome."""

from typing import Any

from .models import AssistantReply, DispatchResult


def canonical_id(value: Any) -> str | None:
    """Flatten a storage-native id to its plain string form."""
    if value is None or isinstance(value, str):
        return value
    if isinstance(value, dict) and isinstance(value.get("$oid"), str):
        return value["$oid"]
    return str(value)


def serialize_card(card: dict | None) -> dict | None:
    """Replace the storage `_id` with a plain string `id`.

    Cards that are already shaped come back unchanged.
    """
    if card is None:
        return None
    rest = {k: v for k, v in card.items() if k not in ("_id", "id")}
    identity = card["_id"] if "_id" in card else card.get("id")
    return {**rest, "id": canonical_id(identity)}


def shape_reply(result: DispatchResult) -> AssistantReply:
    """Normalize a dispatch result into the reply envelope."""
    if result.tool_called is None:
        return AssistantReply(tool_called=None, payload=result.payload)
    return AssistantReply(
        tool_called=result.tool_called,
        payload=serialize_card(result.payload),
    )
