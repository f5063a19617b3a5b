import pytest

from incubator.bmc_catalog import BMC_SECTIONS, GENERIC_FALLBACK_QUESTION, TOTAL_SECTIONS
from incubator.bmc_engine import BMCEngine
from incubator.llm_client import CompletionClient
from incubator.fallbacks import SUMMARY_MISSING_ANSWER, bmc_fallback_question
from incubator.session_store import SessionNotFound
from tests.conftest import RateLimitError


@pytest.fixture
def engine(store, offline_client):
    return BMCEngine(store, offline_client)


@pytest.mark.parametrize("k", range(TOTAL_SECTIONS * 2))
def test_fallback_question_for_every_progress(engine, store, k):
    store.create("S1")
    for _ in range(k):
        store.advance("S1")

    question = engine.next_question("S1")

    assert question == BMC_SECTIONS[k % TOTAL_SECTIONS].fallback_question
    last = store.transcript("S1")[-1]
    assert last.role == "assistant"
    assert last.content == question


def test_repeated_calls_stay_on_section(engine, store):
    store.create("S1")
    first = engine.next_question("S1")
    second = engine.next_question("S1")
    assert first == second
    assert store.get("S1").progress == 0


def test_scenario_start_ask_advance_ask(engine, store):
    store.create("S1")

    assert engine.next_question("S1") == bmc_fallback_question("Key Partners")
    assert len(store.transcript("S1")) == 1

    engine.advance("S1")
    assert engine.next_question("S1") == bmc_fallback_question("Key Activities")


def test_unknown_session_is_strict(engine):
    with pytest.raises(SessionNotFound):
        engine.next_question("ghost")


def test_model_text_is_used_when_available(store, make_client):
    client, backend = make_client("من سيساعدك في التوريد؟")
    engine = BMCEngine(store, client)
    store.create("S1")

    assert engine.next_question("S1") == "من سيساعدك في التوريد؟"
    assert "الشركاء الرئيسيون" in backend.prompts[0]


def test_exhausted_retries_fall_back(store, make_client, sleep):
    client, backend = make_client(RateLimitError("429"))
    engine = BMCEngine(store, client)
    store.create("S1")

    assert engine.next_question("S1") == BMC_SECTIONS[0].fallback_question
    assert backend.calls == 3
    assert sleep.calls == [2.0, 4.0]


def test_record_answer_advances(engine, store):
    store.create("S1")
    assert engine.record_answer("S1", "الموردون المحليون") == 1
    assert store.transcript("S1")[-1].role == "user"
    assert store.answers("S1") == {"Key Partners": "الموردون المحليون"}
    assert engine.current_section("S1").key == "Key Activities"


def test_completion_flag(engine, store):
    store.create("S1")
    for _ in range(TOTAL_SECTIONS):
        engine.record_answer("S1", "x")
    assert engine.is_complete(store.get("S1").progress)
    assert not engine.is_complete(TOTAL_SECTIONS - 1)


def test_summary_fallback_lists_sections(engine, store):
    store.create("S1")
    engine.record_answer("S1", "شركة شحن")

    text = engine.summary("S1")

    assert "شركة شحن" in text
    for section in BMC_SECTIONS:
        assert section.label in text
    assert SUMMARY_MISSING_ANSWER in text
    assert store.transcript("S1")[-1].content == text


def test_unknown_section_key_uses_generic_question():
    assert bmc_fallback_question("Not A Section") == GENERIC_FALLBACK_QUESTION


class AdvancingBackend:
    """Moves the cursor while the model is 'thinking'."""

    def __init__(self, store, session_id):
        self.store = store
        self.session_id = session_id

    def invoke(self, prompt: str) -> str:
        self.store.advance(self.session_id)
        return "سؤال عن الشركاء"


def test_ask_reports_the_section_it_generated_for(store):
    store.create("S1")
    engine = BMCEngine(store, CompletionClient(AdvancingBackend(store, "S1")))

    turn = engine.ask("S1")

    assert turn.progress == 0
    assert turn.section.key == "Key Partners"
    assert store.get("S1").progress == 1
