import logging
import time
import traceback
from enum import Enum
from typing import Any, Callable, Dict, Optional, TypeVar

from openai import OpenAI
from langchain_google_vertexai import VertexAI

from incubator.settings import Settings

logger = logging.getLogger("incubator_backend")

T = TypeVar("T")


class ModelUnavailable(Exception):
    """No generation backend is configured for this process."""


class RateLimited(Exception):
    pass


class GenerationFailed(Exception):
    """
    Terminal failure of a generation call: either retries were exhausted on
    rate limiting, or the upstream raised a non-retryable error.
    """

    def __init__(self, last_error: Exception | None, attempts: int):
        self.last_error = last_error
        self.attempts = attempts
        super().__init__(f"Generation failed after {attempts} attempt(s): {last_error}")


class RetryState(str, Enum):
    ATTEMPTING = "attempting"
    BACKING_OFF = "backing_off"
    SUCCEEDED = "succeeded"
    EXHAUSTED = "exhausted"


def is_openai_model(model_name) -> bool:
    prefixes = ("gpt-", "gpt4", "gpt-4", "gpt-5")
    return any(model_name.startswith(p) for p in prefixes)


def is_rate_limited_error(e: Exception) -> bool:
    if isinstance(e, RateLimited):
        return True

    for attr in ("status_code", "status", "code"):
        value = getattr(e, attr, None)
        if value == 429 or value == "429":
            return True

    # google.api_core.exceptions.ResourceExhausted / openai.RateLimitError
    name = type(e).__name__
    if name in ("ResourceExhausted", "RateLimitError", "TooManyRequests"):
        return True

    msg = str(e)
    return (
        "429" in msg
        and (
            "RESOURCE_EXHAUSTED" in msg
            or "Resource has been exhausted" in msg
            or "Too Many Requests" in msg
        )
    )


def call_with_retries_sync(
    fn: Callable[[], T],
    *,
    retries: int = 3,
    backoff_step: float = 2.0,
    sleep: Callable[[float], None] = time.sleep,
    log: Callable[[str], None] | None = None,
    on_state: Callable[[RetryState, int], None] | None = None,
) -> T:
    """
    Run a sync LLM call with bounded retries.

    Rate-limited attempts back off for `attempt * backoff_step` seconds (no
    sleep after the final attempt). Any other error ends the loop at once.
    """
    last_exception: Exception | None = None
    attempt = 0

    def _enter(state: RetryState) -> None:
        if on_state:
            on_state(state, attempt)

    while attempt < retries:
        attempt += 1
        _enter(RetryState.ATTEMPTING)
        try:
            result = fn()
        except Exception as e:
            last_exception = e

            if not is_rate_limited_error(e):
                if log:
                    log(f"Attempt {attempt} failed with a non-retryable error: {e}\n{traceback.format_exc()}")
                break

            if attempt >= retries:
                if log:
                    log(f"Attempt {attempt} got 429, no attempts left: {e}")
                break

            delay = attempt * backoff_step
            if log:
                log(f"Attempt {attempt} got 429, backing off {delay:.1f}s.")
            _enter(RetryState.BACKING_OFF)
            sleep(delay)
            continue

        _enter(RetryState.SUCCEEDED)
        return result

    _enter(RetryState.EXHAUSTED)
    raise GenerationFailed(last_exception, attempt) from last_exception


class GeminiBackend:
    """
    Completion-style Gemini call through LangChain's VertexAI wrapper:

        text = backend.invoke("some prompt")
    """

    def __init__(
        self,
        model_name: str,
        *,
        vertex_project: str,
        vertex_region: str,
        max_output_tokens: int,
        temperature: float,
        timeout: float | None = None,
    ):
        self.model_name = model_name
        self._vertex = VertexAI(
            project=vertex_project,
            location=vertex_region,
            model_name=model_name,
            max_output_tokens=max_output_tokens,
            temperature=temperature,
            timeout=timeout,
            max_retries=0,
        )

    def invoke(self, prompt: str) -> str:
        resp = self._vertex.invoke(prompt)
        if isinstance(resp, str):
            return resp
        return str(getattr(resp, "content", resp))


class OpenAIBackend:
    """
    Same contract as GeminiBackend, over the OpenAI Responses API.
    """

    def __init__(
        self,
        model_name: str,
        *,
        max_output_tokens: int,
        temperature: float,
        timeout: float | None = None,
    ):
        self.model_name = model_name
        self._params: Dict[str, Any] = {
            "max_output_tokens": max_output_tokens,
            "temperature": temperature,
        }
        client_kwargs: Dict[str, Any] = {"max_retries": 0}
        if timeout is not None:
            client_kwargs["timeout"] = timeout
        self._client = OpenAI(**client_kwargs)

    def invoke(self, prompt: str) -> str:
        resp = self._client.responses.create(
            model=self.model_name,
            input=prompt,
            **self._params,
        )
        return getattr(resp, "output_text", "") or ""


class CompletionClient:
    """
    Resilient wrapper around a single text-generation call.

    `backend` is anything with `invoke(prompt) -> str`; None means no model is
    configured and every call fails fast with ModelUnavailable.
    """

    def __init__(
        self,
        backend=None,
        *,
        max_retries: int = 3,
        backoff_step: float = 2.0,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.backend = backend
        self.max_retries = max_retries
        self.backoff_step = backoff_step
        self._sleep = sleep
        self.last_state: Optional[RetryState] = None

    @property
    def available(self) -> bool:
        return self.backend is not None

    def _record_state(self, state: RetryState, attempt: int) -> None:
        self.last_state = state
        logger.debug("[LLM-RETRY] attempt=%d state=%s", attempt, state.value)

    def generate(self, prompt: str, max_retries: int | None = None) -> str:
        if self.backend is None:
            raise ModelUnavailable("No generation model configured")

        retries = self.max_retries if max_retries is None else max_retries
        text = call_with_retries_sync(
            lambda: self.backend.invoke(prompt),
            retries=retries,
            backoff_step=self.backoff_step,
            sleep=self._sleep,
            log=lambda msg: logger.info(f"[LLM-RETRY] {msg}"),
            on_state=self._record_state,
        )
        logger.info("AI response received successfully")
        return text


def build_completion_client(settings: Settings) -> CompletionClient:
    """
    Build the process-wide client. A failed construction is not fatal: the
    client is returned without a backend and callers take the fallback path.
    """
    backend = None
    try:
        if is_openai_model(settings.model_name):
            backend = OpenAIBackend(
                settings.model_name,
                max_output_tokens=settings.max_output_tokens,
                temperature=settings.temperature,
                timeout=settings.llm_timeout,
            )
        elif settings.project_id:
            backend = GeminiBackend(
                settings.model_name,
                vertex_project=settings.project_id,
                vertex_region=settings.region,
                max_output_tokens=settings.max_output_tokens,
                temperature=settings.temperature,
                timeout=settings.llm_timeout,
            )
        else:
            logger.warning("GOOGLE_CLOUD_PROJECT is not set; AI generation disabled.")
    except Exception as e:
        logger.warning(f"AI model configuration failed: {e}. Using fallbacks only.")
        backend = None

    if backend is not None:
        logger.info(f"AI model {settings.model_name} configured successfully")

    return CompletionClient(backend, max_retries=settings.llm_max_retries)
