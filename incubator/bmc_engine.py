# incubator/bmc_engine.py

import logging
from dataclasses import dataclass

from incubator import fallbacks, prompts
from incubator.bmc_catalog import BMCSection, TOTAL_SECTIONS, section_at
from incubator.llm_client import CompletionClient, GenerationFailed, ModelUnavailable
from incubator.session_store import ROLE_ASSISTANT, ROLE_USER, SessionStore

logger = logging.getLogger("incubator_backend")


@dataclass(frozen=True)
class BMCQuestion:
    question: str
    section: BMCSection
    progress: int


class BMCEngine:
    """
    Walks a session through the nine canvas sections.

    The engine never moves the cursor on its own when asking: the caller
    advances explicitly (record_answer or advance), so asking twice stays on
    the same section.
    """

    def __init__(self, store: SessionStore, client: CompletionClient):
        self.store = store
        self.client = client

    def current_section(self, session_id: str) -> BMCSection:
        return section_at(self.store.get(session_id).progress)

    def ask(self, session_id: str) -> BMCQuestion:
        """
        Progress and section are read once, before the model call, so the
        reported cursor is the one the question was generated for.
        """
        progress = self.store.get(session_id).progress
        section = section_at(progress)
        prompt = prompts.bmc_question(section)

        try:
            question = self.client.generate(prompt)
        except (GenerationFailed, ModelUnavailable) as e:
            logger.info(f"Error generating BMC question for '{section.key}': {e}")
            question = fallbacks.bmc_fallback_question(section.key)

        self.store.append_turn(session_id, ROLE_ASSISTANT, question)
        return BMCQuestion(question=question, section=section, progress=progress)

    def next_question(self, session_id: str) -> str:
        return self.ask(session_id).question

    def record_answer(self, session_id: str, answer: str) -> int:
        """
        Store the student's answer for the current section and move on.
        Returns the new progress value.
        """
        section = self.current_section(session_id)
        self.store.append_turn(session_id, ROLE_USER, answer)
        self.store.record_answer(session_id, section.key, answer)
        return self.store.advance(session_id)

    def advance(self, session_id: str) -> int:
        return self.store.advance(session_id)

    def is_complete(self, progress: int) -> bool:
        return progress >= TOTAL_SECTIONS

    def summary(self, session_id: str) -> str:
        answers = self.store.answers(session_id)
        prompt = prompts.bmc_summary(answers)

        try:
            text = self.client.generate(prompt)
        except (GenerationFailed, ModelUnavailable) as e:
            logger.info(f"Error generating BMC summary: {e}")
            text = fallbacks.summary_fallback(answers)

        self.store.append_turn(session_id, ROLE_ASSISTANT, text)
        return text
