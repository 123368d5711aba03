"""Pure dataclasses for the docchat answer pipeline. No logic, no deps."""

from dataclasses import dataclass, field
from enum import Enum

ROLES = frozenset({"user", "assistant", "system"})


@dataclass(frozen=True)
class ConversationTurn:
    role: str              # "user", "assistant" or "system"
    content: str

    def __post_init__(self) -> None:
        if self.role not in ROLES:
            raise ValueError(f"Unknown conversation role: {self.role!r}")

    def as_message(self) -> dict[str, str]:
        return {"role": self.role, "content": self.content}


@dataclass(frozen=True)
class ChatRequest:
    question: str
    history: tuple[ConversationTurn, ...] = ()
    context: str | None = None
    source_name: str = "Document"


@dataclass
class ModelResponse:
    provider: str          # "openai", "openrouter", "groq", "gemini"
    model: str             # actual model string used
    content: str
    latency_sec: float
    token_count: int | None
    used_fallback: bool = False


@dataclass(frozen=True)
class ProviderResult:
    provider: str
    content: str | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None and bool(self.content)


@dataclass(frozen=True)
class SynthesisInput:
    results: tuple[ProviderResult, ...]
    question: str
    context: str | None = None

    def successful(self) -> list[ProviderResult]:
        return [r for r in self.results if r.ok]


class QueryState(Enum):
    IDLE = "idle"
    FANNING_OUT = "fanning_out"
    AWAITING_SYNTHESIS = "awaiting_synthesis"
    DIRECT_RETURN = "direct_return"
    ALL_FAILED = "all_failed"
    DONE = "done"


@dataclass
class Synthesis:
    text: str
    state: QueryState
    synthesizer: str | None = None
    fell_back: bool = False     # longest-response fallback was used


@dataclass
class QueryResult:
    answer: str
    state: QueryState
    succeeded: int
    attempted: int
    duration_sec: float
    synthesizer: str | None = None
    fell_back: bool = False
    single_provider: bool = False   # fan-out timed out, one provider answered


@dataclass
class Summary:
    source_name: str
    text: str
    key_points: list[str] = field(default_factory=list)
    topics: list[str] = field(default_factory=list)
    sentiment: str = "neutral"   # "positive", "neutral" or "negative"
