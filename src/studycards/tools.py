"""Tool definitions offered to the generation service."""

from .models import ToolName

FLASHCARD_TOOLS = [
    {
        "name": ToolName.ADD_FLASHCARD.value,
        "description": "Create a new flashcard for the user.",
        "input_schema": {
            "type": "object",
            "properties": {
                "front": {
                    "type": "string",
                    "description": "The question/prompt side of the flashcard."
                },
                "back": {
                    "type": "string",
                    "description": "The answer/explanation side of the flashcard."
                }
            },
            "required": ["front", "back"],
            "additionalProperties": False
        }
    },
    {
        "name": ToolName.QUIZ_USER.value,
        "description": "Pick one random flashcard belonging to the user and return it.",
        "input_schema": {
            "type": "object",
            "properties": {},
            "required": []
        }
    }
]

TOOLS_BY_NAME: dict[ToolName, dict] = {
    ToolName(tool["name"]): tool for tool in FLASHCARD_TOOLS
}
