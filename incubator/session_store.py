# incubator/session_store.py

import logging
import threading
import time
from dataclasses import dataclass, field
from typing import Callable

from langchain_community.chat_message_histories.in_memory import ChatMessageHistory
from langchain_core.messages import AIMessage, BaseMessage, HumanMessage

logger = logging.getLogger("incubator_backend")

MODE_BMC = "bmc"
MODE_DESIGN = "design"
MODES = (MODE_BMC, MODE_DESIGN)

ROLE_USER = "user"
ROLE_ASSISTANT = "assistant"


class SessionNotFound(KeyError):
    def __init__(self, session_id: str):
        self.session_id = session_id
        super().__init__(session_id)

    def __str__(self) -> str:
        return f"Session not found: {self.session_id}"


@dataclass(frozen=True)
class Turn:
    role: str
    content: str

    def as_dict(self) -> dict:
        return {"role": self.role, "content": self.content}


@dataclass
class Session:
    id: str
    mode: str = MODE_BMC
    progress: int = 0
    created_at: float = 0.0
    history: ChatMessageHistory = field(default_factory=ChatMessageHistory)
    # section key -> latest answer, filled by the BMC flow
    answers: dict[str, str] = field(default_factory=dict)

    @property
    def transcript(self) -> list[Turn]:
        return [_message_to_turn(m) for m in self.history.messages]


def _message_to_turn(message: BaseMessage) -> Turn:
    role = ROLE_USER if isinstance(message, HumanMessage) else ROLE_ASSISTANT
    return Turn(role=role, content=str(message.content))


class SessionStore:
    """
    In-memory, per-student conversational sessions with:
    - fixed TTL counted from creation (not refreshed on use)
    - thread-safe operations (route handlers run in a threadpool, the sweep
      runs on the event loop)

    Volatile on purpose: a restart drops every session.
    """

    def __init__(self, clock: Callable[[], float] = time.time):
        self._clock = clock
        self._lock = threading.Lock()
        self._items: dict[str, Session] = {}

    def __len__(self) -> int:
        with self._lock:
            return len(self._items)

    def _get_unlocked(self, session_id: str) -> Session:
        session = self._items.get(session_id)
        if session is None:
            raise SessionNotFound(session_id)
        return session

    def _create_unlocked(self, session_id: str, mode: str) -> Session:
        if mode not in MODES:
            raise ValueError(f"Unknown session mode: {mode}")
        session = Session(id=session_id, mode=mode, created_at=self._clock())
        self._items[session_id] = session
        return session

    def create(self, session_id: str, mode: str = MODE_BMC) -> Session:
        sid = str(session_id)
        with self._lock:
            if sid in self._items:
                logger.debug("Replacing existing session %s", sid)
            return self._create_unlocked(sid, mode)

    def get(self, session_id: str) -> Session:
        with self._lock:
            return self._get_unlocked(str(session_id))

    def _get_or_create_unlocked(self, session_id: str, mode: str) -> Session:
        """
        The only implicit-creation path. An existing session keeps its mode.
        """
        session = self._items.get(session_id)
        if session is not None:
            return session
        logger.info("Auto-creating %s session for %s", mode, session_id)
        return self._create_unlocked(session_id, mode)

    def get_or_create(self, session_id: str, mode: str = MODE_BMC) -> Session:
        with self._lock:
            return self._get_or_create_unlocked(str(session_id), mode)

    def append_turn(
        self, session_id: str, role: str, content: str, *, create_mode: str | None = None
    ) -> Session:
        """
        Strict by default. With create_mode set, a session that vanished (or
        never existed) is recreated in that mode under the same lock.
        """
        if role == ROLE_USER:
            message = HumanMessage(content=content)
        elif role == ROLE_ASSISTANT:
            message = AIMessage(content=content)
        else:
            raise ValueError(f"Unknown turn role: {role}")

        with self._lock:
            sid = str(session_id)
            if create_mode is None:
                session = self._get_unlocked(sid)
            else:
                session = self._get_or_create_unlocked(sid, create_mode)
            session.history.add_message(message)
            return session

    def advance(self, session_id: str) -> int:
        with self._lock:
            session = self._get_unlocked(str(session_id))
            session.progress += 1
            return session.progress

    def record_answer(self, session_id: str, section_key: str, answer: str) -> None:
        with self._lock:
            session = self._get_unlocked(str(session_id))
            session.answers[section_key] = answer

    def answers(self, session_id: str) -> dict[str, str]:
        with self._lock:
            return dict(self._get_unlocked(str(session_id)).answers)

    def transcript(self, session_id: str) -> list[Turn]:
        """
        Returns a COPY of the transcript.
        """
        with self._lock:
            return self._get_unlocked(str(session_id)).transcript

    def delete(self, session_id: str) -> bool:
        with self._lock:
            return self._items.pop(str(session_id), None) is not None

    def sweep_expired(self, ttl_seconds: float) -> int:
        """
        Delete sessions created more than ttl_seconds ago.
        Returns how many entries were removed.
        """
        cutoff = self._clock() - ttl_seconds
        removed = 0
        with self._lock:
            expired = [k for k, v in self._items.items() if v.created_at < cutoff]
            for k in expired:
                del self._items[k]
                removed += 1
        return removed
