import pytest

from incubator.llm_client import CompletionClient
from incubator.session_store import SessionStore


class FakeClock:
    def __init__(self, now: float = 1_000_000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def tick(self, seconds: float) -> None:
        self.now += seconds


class RecordingSleep:
    def __init__(self):
        self.calls: list[float] = []

    def __call__(self, seconds: float) -> None:
        self.calls.append(seconds)

    @property
    def total(self) -> float:
        return sum(self.calls)


class RateLimitError(Exception):
    status_code = 429


class ScriptedBackend:
    """
    invoke() pops the next scripted outcome: an Exception instance is raised,
    anything else is returned as text. The last outcome repeats forever.
    """

    def __init__(self, *outcomes):
        self.outcomes = list(outcomes)
        self.prompts: list[str] = []

    @property
    def calls(self) -> int:
        return len(self.prompts)

    def invoke(self, prompt: str) -> str:
        self.prompts.append(prompt)
        outcome = self.outcomes.pop(0) if len(self.outcomes) > 1 else self.outcomes[0]
        if isinstance(outcome, Exception):
            raise outcome
        return outcome


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def sleep():
    return RecordingSleep()


@pytest.fixture
def store(clock):
    return SessionStore(clock=clock)


@pytest.fixture
def offline_client():
    return CompletionClient(None)


@pytest.fixture
def make_client(sleep):
    def _make(*outcomes, max_retries: int = 3):
        backend = ScriptedBackend(*outcomes)
        return CompletionClient(backend, max_retries=max_retries, sleep=sleep), backend

    return _make
