"""Request-level failures raised by the assistant pipeline."""


class AssistantError(Exception):
    """Base exception for a request that could not be completed."""
    pass


class GenerationServiceUnavailable(AssistantError):
    """The text-generation service call failed or timed out."""
    pass


class MalformedToolInvocation(AssistantError):
    """The generation service proposed an unknown tool or bad arguments."""
    pass


class StoreUnavailable(AssistantError):
    """The card store could not be read or written."""
    pass
