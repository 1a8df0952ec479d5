"""LLM Client for Groq API integration with model fallback on rate limits."""
import time
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple
from groq import Groq
from groq import RateLimitError, AuthenticationError, APIError, APITimeoutError
import logging

from config import GROQ_API_KEY, LLM_FALLBACK_MODELS, LLM_RETRY_DELAY_SECONDS, LLM_MAX_TOKENS

logger = logging.getLogger(__name__)

RATE_LIMIT_ERROR = "RATE_LIMIT_ERROR"
MODELS_EXHAUSTED = "MODELS_EXHAUSTED"


@dataclass
class LLMResponse:
    """Response from LLM generation."""
    text: str
    tokens_input: int
    tokens_output: int
    latency_ms: int
    model_used: str


@dataclass
class LLMError:
    """Structured error response from LLM operations."""
    code: str
    message: str
    details: Dict[str, Any]


class LLMClientError(Exception):
    """Custom exception for LLM client errors with structured error information."""

    def __init__(self, error: LLMError):
        self.error = error
        super().__init__(error.message)

    @property
    def is_rate_limited(self) -> bool:
        return self.error.code == RATE_LIMIT_ERROR


@dataclass(frozen=True)
class RetryPolicy:
    """
    Ordered model fallback used when the service reports rate limiting.

    Attributes:
        models: Model names, tried in order
        delay_seconds: Pause before moving on to the next model
    """
    models: Tuple[str, ...] = field(default_factory=lambda: tuple(LLM_FALLBACK_MODELS))
    delay_seconds: float = LLM_RETRY_DELAY_SECONDS

    def __post_init__(self):
        if not self.models:
            raise ValueError("RetryPolicy needs at least one model")
        if self.delay_seconds < 0:
            raise ValueError("delay_seconds cannot be negative")


# Groq exception type -> (error code, user facing message); checked in order
_ERROR_MAP = (
    (RateLimitError, RATE_LIMIT_ERROR, "Rate limit exceeded. Please try again in a few moments."),
    (AuthenticationError, "AUTHENTICATION_ERROR", "Authentication failed. Please check your API key."),
    (APITimeoutError, "TIMEOUT_ERROR", "Request timed out. Please try again."),
    (APIError, "API_ERROR", None),
)


class LLMClient:
    """Client for interfacing with Groq API for text generation."""

    def __init__(self, api_key: Optional[str] = None):
        """
        Initialize LLM client with Groq API key.

        Args:
            api_key: Groq API key (defaults to GROQ_API_KEY from environment)
        """
        self.api_key = api_key or GROQ_API_KEY
        if not self.api_key:
            raise ValueError("GROQ_API_KEY must be provided or set in environment")

        self.client = Groq(api_key=self.api_key)
        logger.info("LLMClient initialized successfully")

    def generate(
        self,
        model: str,
        prompt: str,
        max_tokens: int = LLM_MAX_TOKENS
    ) -> LLMResponse:
        """
        Generate response using Groq API.

        Args:
            model: Model name
            prompt: Complete prompt with context and question
            max_tokens: Maximum tokens to generate

        Returns:
            LLMResponse with text, token counts, and latency

        Raises:
            LLMClientError: Structured error with code, message, and details
        """
        start_time = time.time()

        try:
            logger.debug(f"Generating response with model: {model}")

            response = self.client.chat.completions.create(
                model=model,
                messages=[
                    {
                        "role": "user",
                        "content": prompt
                    }
                ],
                max_tokens=max_tokens,
                temperature=0.3
            )
        except Exception as e:
            latency_ms = int((time.time() - start_time) * 1000)
            raise self._to_client_error(e, model, latency_ms) from e

        latency_ms = int((time.time() - start_time) * 1000)
        text = response.choices[0].message.content or ""
        tokens_input = response.usage.prompt_tokens
        tokens_output = response.usage.completion_tokens

        logger.info(
            f"Generated response: model={model}, "
            f"input_tokens={tokens_input}, output_tokens={tokens_output}, "
            f"latency={latency_ms}ms"
        )

        return LLMResponse(
            text=text,
            tokens_input=tokens_input,
            tokens_output=tokens_output,
            latency_ms=latency_ms,
            model_used=model
        )

    def generate_with_fallback(
        self,
        prompt: str,
        policy: Optional[RetryPolicy] = None,
        max_tokens: int = LLM_MAX_TOKENS
    ) -> LLMResponse:
        """
        Generate with the first model of the policy that is not rate limited.

        A rate-limited model is skipped after policy.delay_seconds; any other
        failure propagates immediately.

        Args:
            prompt: Complete prompt
            policy: Fallback order and delay (defaults from config)
            max_tokens: Maximum tokens to generate

        Returns:
            LLMResponse from the first model that answered

        Raises:
            LLMClientError: MODELS_EXHAUSTED when every model was rate limited,
                otherwise the error of the failing model
        """
        policy = policy or RetryPolicy()

        for attempt, model in enumerate(policy.models, start=1):
            try:
                return self.generate(model=model, prompt=prompt, max_tokens=max_tokens)
            except LLMClientError as e:
                if not e.is_rate_limited:
                    raise
                logger.warning(
                    f"Model {model} rate limited "
                    f"(attempt {attempt}/{len(policy.models)}), trying next..."
                )
                if attempt < len(policy.models):
                    time.sleep(policy.delay_seconds)

        error = LLMError(
            code=MODELS_EXHAUSTED,
            message="All AI models are currently rate-limited. Please try again in a minute.",
            details={
                "models": list(policy.models),
                "retry_after": 60
            }
        )
        logger.error(error.message, extra={"error_code": error.code})
        raise LLMClientError(error)

    @staticmethod
    def _to_client_error(exc: Exception, model: str, latency_ms: int) -> LLMClientError:
        """Translate a Groq SDK exception into an LLMClientError."""
        details: Dict[str, Any] = {
            "model": model,
            "latency_ms": latency_ms,
            "original_error": str(exc)
        }

        for exc_type, code, message in _ERROR_MAP:
            if isinstance(exc, exc_type):
                break
        else:
            code = "UNKNOWN_ERROR"
            message = f"Unexpected error during generation: {exc}"
            details["error_type"] = type(exc).__name__

        if message is None:
            message = f"Groq API error: {exc}"
        if code == RATE_LIMIT_ERROR:
            details["retry_after"] = 60

        error = LLMError(code=code, message=message, details=details)
        log = logger.warning if code == RATE_LIMIT_ERROR else logger.error
        log(
            f"{code}: model={model}, latency={latency_ms}ms, error={exc}",
            exc_info=code != RATE_LIMIT_ERROR,
            extra={"error_code": error.code}
        )
        return LLMClientError(error)

    @staticmethod
    def build_prompt(question: str, context: str, filename: Optional[str] = None) -> str:
        """
        Build the document Q&A prompt.

        Args:
            question: User question
            context: Retrieved sections, already labelled
            filename: Document name when a single document is in scope

        Returns:
            Complete prompt string
        """
        source_line = f"**Document:** {filename}\n\n" if filename else ""

        return f"""You are a helpful document Q&A assistant. You answer questions based ONLY on the provided document context. If the answer cannot be found in the context, say so clearly.

{source_line}**Relevant sections from the documents:**
{context}

---

**User's Question:** {question}

---

Please provide a clear, well-structured answer based on the document content above. If the documents don't contain enough information to fully answer the question, mention what you found and note what's missing. Format your answer with markdown for readability."""

    @staticmethod
    def build_research_prompt(
        question: str,
        doc_context: Optional[str] = None,
        web_context: Optional[str] = None
    ) -> str:
        """
        Build the deep-search prompt blending document and web context.

        Args:
            question: User question
            doc_context: Retrieved document sections
            web_context: Scraped web search results

        Returns:
            Complete prompt string
        """
        combined = ""
        if doc_context:
            combined += f"**Document Knowledge:**\n{doc_context}\n\n"
        if web_context:
            combined += f"**Web Search Results:**\n{web_context}\n"

        return f"""You are an intelligent research assistant that combines knowledge from uploaded documents AND web search results to provide comprehensive answers.

{combined}
---

**User's Question:** {question}

---

Please provide a thorough, well-structured answer combining both document knowledge and web search results where available. Clearly indicate which information comes from uploaded documents vs. web sources. Format your answer with markdown for readability. Be comprehensive but concise."""

