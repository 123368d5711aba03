"""Error taxonomy for the answer pipeline."""


class ChatError(Exception):
    """Base for every error the answer pipeline can surface to a caller."""


class ConfigurationError(ChatError):
    """Raised when no usable provider is configured."""


class AllProvidersFailed(ChatError):
    """Raised when no provider produced an answer for a query."""


class SynthesisFailed(ChatError):
    """Raised when the synthesis call errors. Recovered inside synthesis."""


class FanOutTimeout(ChatError):
    """Raised when the whole fan-out exceeds its global timeout."""

    def __init__(self, timeout_sec: float) -> None:
        self.timeout_sec = timeout_sec
        super().__init__(f"Provider fan-out timed out after {timeout_sec:g}s")
