# incubator/design_assistant.py

import logging
from dataclasses import dataclass

from incubator import fallbacks, prompts
from incubator.fallbacks import GENERAL_TOPIC
from incubator.llm_client import CompletionClient, GenerationFailed, ModelUnavailable
from incubator.session_store import MODE_DESIGN, ROLE_ASSISTANT, ROLE_USER, SessionStore

logger = logging.getLogger("incubator_backend")


# First match wins; "brand" appears in both the logo and identity rules, so
# the order is part of the behaviour.
TOPIC_RULES: tuple[tuple[str, tuple[str, ...]], ...] = (
    ("logo design", ("شعار", "لوجو", "logo", "brand")),
    ("website design", ("موقع", "ويب", "website", "web")),
    ("visual identity", ("هوية", "علامة تجارية", "identity", "brand")),
    ("cover design", ("غلاف", "كتاب", "cover", "book")),
    ("social media design", ("منشور", "بوست", "سوشيال", "تواصل", "post", "social", "instagram")),
    ("presentation design", ("عرض تقديمي", "عروض", "شرائح", "بوربوينت", "presentation", "slides", "powerpoint")),
)


def classify_topic(message: str) -> str:
    text = (message or "").lower()
    for topic, keywords in TOPIC_RULES:
        if any(k in text for k in keywords):
            return topic
    return GENERAL_TOPIC


@dataclass(frozen=True)
class DesignReply:
    response: str
    mode: str
    topic: str


class DesignAssistant:
    def __init__(self, store: SessionStore, client: CompletionClient):
        self.store = store
        self.client = client

    def reply(self, session_id: str, message: str) -> DesignReply:
        """
        Both appends go through get-or-create, so a session swept or deleted
        while the model is generating is recreated instead of failing the turn.
        """
        self.store.append_turn(session_id, ROLE_USER, message, create_mode=MODE_DESIGN)

        topic = classify_topic(message)
        prompt = prompts.design_advice(topic, message)

        try:
            answer = self.client.generate(prompt)
        except (GenerationFailed, ModelUnavailable) as e:
            logger.info(f"Error generating design advice ({topic}): {e}")
            answer = fallbacks.design_fallback(topic)

        session = self.store.append_turn(session_id, ROLE_ASSISTANT, answer, create_mode=MODE_DESIGN)
        return DesignReply(response=answer, mode=session.mode, topic=topic)

    def respond(self, session_id: str, message: str) -> str:
        return self.reply(session_id, message).response
