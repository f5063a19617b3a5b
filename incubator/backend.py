# incubator/backend.py

import logging
from datetime import datetime, timezone

from incubator.bmc_catalog import TOTAL_SECTIONS
from incubator.bmc_engine import BMCEngine
from incubator.design_assistant import DesignAssistant
from incubator.llm_client import CompletionClient, build_completion_client
from incubator.session_store import MODE_BMC, SessionStore
from incubator.settings import Settings

logger = logging.getLogger("incubator_backend")


class Backend:
    """
    Entry points for the HTTP layer. Owns the session store, the completion
    client and both conversation engines for the lifetime of the process.

    Session policy:
    - strict (SessionNotFound if absent): next_bmc_question, submit_answer,
      advance, summary, end_session
    - auto-create in design mode: chat
    """

    def __init__(
        self,
        settings: Settings | None = None,
        *,
        client: CompletionClient | None = None,
        store: SessionStore | None = None,
    ):
        self.settings = settings or Settings.from_env()
        self.client = client if client is not None else build_completion_client(self.settings)
        self.store = store if store is not None else SessionStore()
        self.bmc = BMCEngine(self.store, self.client)
        self.design = DesignAssistant(self.store, self.client)

    # -----------------------
    # Handlers
    # -----------------------

    def start_session(self, student_id: str) -> dict:
        session = self.store.create(student_id, MODE_BMC)
        logger.info(f"Started BMC session for {student_id}")
        return {
            "studentId": session.id,
            "mode": session.mode,
            "progress": session.progress,
            "totalSections": TOTAL_SECTIONS,
        }

    def next_bmc_question(self, student_id: str) -> dict:
        turn = self.bmc.ask(student_id)
        return {
            "question": turn.question,
            "progress": turn.progress,
            "totalSections": TOTAL_SECTIONS,
            "section": turn.section.key,
        }

    def submit_answer(self, student_id: str, answer: str) -> dict:
        progress = self.bmc.record_answer(student_id, answer)
        return {
            "progress": progress,
            "totalSections": TOTAL_SECTIONS,
            "completed": self.bmc.is_complete(progress),
        }

    def advance(self, student_id: str) -> dict:
        return {
            "progress": self.bmc.advance(student_id),
            "totalSections": TOTAL_SECTIONS,
        }

    def summary(self, student_id: str) -> dict:
        return {"summary": self.bmc.summary(student_id)}

    def chat(self, student_id: str, message: str) -> dict:
        reply = self.design.reply(student_id, message)
        return {
            "response": reply.response,
            "mode": reply.mode,
            "topic": reply.topic,
        }

    def transcript(self, student_id: str) -> dict:
        session = self.store.get(student_id)
        return {
            "studentId": session.id,
            "mode": session.mode,
            "progress": session.progress,
            "transcript": [t.as_dict() for t in session.transcript],
        }

    def end_session(self, student_id: str) -> bool:
        return self.store.delete(student_id)

    def health(self) -> dict:
        return {
            "status": "✅ Server is running",
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "ai": "Available" if self.client.available else "Unavailable",
            "activeSessions": len(self.store),
        }
