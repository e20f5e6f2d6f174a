"""
LLM Service with Multi-Provider Fallback (OpenAI → Gemini)

Every model call in the API goes through ``LLMService.generate_response``:
- Primary: OpenAI (gpt-4o) when OPENAI_API_KEY is set
- Fallback: Google Gemini (gemini-2.0-flash-lite) when GEMINI_API_KEY is set
- Uses LangChain for provider abstraction
- Each call is timed, token-counted and logged to MLflow
"""
import logging
import time
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

import mlflow
import tiktoken
from langchain_core.messages import HumanMessage, SystemMessage
from langchain_google_genai import ChatGoogleGenerativeAI
from langchain_openai import ChatOpenAI
from tenacity import (
    before_sleep_log,
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from backend.app.config import get_settings, settings

logger = logging.getLogger(__name__)

JSON_ONLY_SUFFIX = (
    "\n\nIMPORTANT: You MUST respond with valid JSON only. "
    "No additional text before or after the JSON."
)


class LLMServiceError(Exception):
    """Raised when every configured provider failed."""


class LLMNotConfiguredError(RuntimeError):
    """Raised when no provider API key is set."""


class LLMProvider(str, Enum):
    """Available LLM providers."""
    OPENAI = "openai"
    GEMINI = "gemini"


class LLMService:
    """
    Multi-provider LLM service with automatic fallback.

    Providers are tried in order (OpenAI, then Gemini); the first one that
    answers wins. If all of them fail an ``LLMServiceError`` carrying every
    provider's error is raised.
    """

    def __init__(self):
        self.settings = get_settings()
        self._clients: Dict[LLMProvider, Any] = {}
        self._models: Dict[LLMProvider, str] = {}

        self._init_openai()
        self._init_gemini()

        if not self._clients:
            raise LLMNotConfiguredError(
                "No LLM providers configured. Set OPENAI_API_KEY or GEMINI_API_KEY"
            )

        self.encoding = None
        try:
            self.encoding = tiktoken.encoding_for_model("gpt-4")
        except Exception as e:
            logger.warning(f"tiktoken unavailable ({e}); token counts are estimates")

        mlflow.set_tracking_uri(self.settings.mlflow_tracking_uri)
        mlflow.set_experiment(self.settings.experiment_name)

        logger.info(f"LLM Service initialized with providers: {[p.value for p in self._clients]}")

    @property
    def providers(self) -> List[LLMProvider]:
        return list(self._clients)

    def _init_openai(self) -> None:
        if self.settings.openai_api_key is None:
            logger.debug("OPENAI_API_KEY not set - OpenAI unavailable")
            return
        try:
            self._clients[LLMProvider.OPENAI] = ChatOpenAI(
                model=self.settings.openai_model,
                api_key=self.settings.openai_api_key.get_secret_value(),
                timeout=self.settings.timeout_seconds,
                max_retries=0,  # retries are ours
            )
            self._models[LLMProvider.OPENAI] = self.settings.openai_model
            logger.info(f"OpenAI initialized: {self.settings.openai_model}")
        except Exception as e:
            logger.error(f"Failed to initialize OpenAI: {e}")

    def _init_gemini(self) -> None:
        if self.settings.gemini_api_key is None:
            logger.debug("GEMINI_API_KEY not set - Gemini unavailable")
            return
        try:
            self._clients[LLMProvider.GEMINI] = ChatGoogleGenerativeAI(
                model=self.settings.gemini_model,
                google_api_key=self.settings.gemini_api_key.get_secret_value(),
                timeout=self.settings.timeout_seconds,
            )
            self._models[LLMProvider.GEMINI] = self.settings.gemini_model
            logger.info(f"Gemini initialized: {self.settings.gemini_model}")
        except Exception as e:
            logger.error(f"Failed to initialize Gemini: {e}")

    def count_tokens(self, text: str) -> int:
        """Estimate token count. Approximation for both providers."""
        if self.encoding is not None:
            try:
                return len(self.encoding.encode(text))
            except Exception as e:
                logger.warning(f"Token counting failed: {e}. Using word estimate.")
        return int(len(text.split()) * 1.3)

    def _call(
        self,
        provider: LLMProvider,
        system_prompt: str,
        user_prompt: str,
        temperature: float,
        max_tokens: int,
        response_format: Optional[Dict[str, Any]],
    ) -> str:
        client = self._clients[provider]
        client.temperature = temperature

        json_mode = bool(response_format and response_format.get("type") == "json_object")
        if provider == LLMProvider.OPENAI:
            client.max_tokens = max_tokens
            client.model_kwargs = {"response_format": response_format} if json_mode else {}
        else:
            # Gemini has no JSON mode switch here; ask for it in the prompt
            client.max_output_tokens = max_tokens
            if json_mode:
                system_prompt += JSON_ONLY_SUFFIX

        response = client.invoke([
            SystemMessage(content=system_prompt),
            HumanMessage(content=user_prompt),
        ])
        return response.content

    @retry(
        retry=retry_if_exception_type(LLMServiceError),
        stop=stop_after_attempt(max(1, settings.max_retries)),
        wait=wait_exponential(multiplier=1, min=4, max=10),
        before_sleep=before_sleep_log(logger, logging.WARNING),
        reraise=True,
    )
    def generate_response(
        self,
        system_prompt: str,
        user_prompt: str,
        temperature: float = 0.7,
        max_tokens: int = 1000,
        response_format: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        """
        Generate an LLM response with automatic fallback.

        Args:
            system_prompt: System/instruction prompt
            user_prompt: User input
            temperature: Sampling temperature (0.0-1.0)
            max_tokens: Maximum tokens to generate
            response_format: Optional format spec (e.g., {"type": "json_object"})

        Returns:
            Dict with content, usage, model and provider.

        Raises:
            LLMServiceError: If every provider failed.
        """
        start_time = time.time()
        input_tokens = self.count_tokens(system_prompt + user_prompt)
        error_chain: List[str] = []
        answer: Optional[Tuple[LLMProvider, str]] = None

        with mlflow.start_run(nested=True, run_name="llm_generation"):
            for provider in self.providers:
                try:
                    logger.debug(f"Attempting {provider.value}...")
                    content = self._call(
                        provider, system_prompt, user_prompt,
                        temperature, max_tokens, response_format,
                    )
                    answer = (provider, content)
                    break
                except Exception as e:
                    error_msg = f"{provider.value} failed: {e}"
                    logger.warning(error_msg)
                    error_chain.append(error_msg)

            if answer is None:
                raise LLMServiceError(f"All providers failed: {'; '.join(error_chain)}")

            provider, result_text = answer
            output_tokens = self.count_tokens(result_text)
            duration = time.time() - start_time

            mlflow.log_param("provider", provider.value)
            mlflow.log_param("model", self._models[provider])
            mlflow.log_param("temperature", temperature)
            mlflow.log_param("input_tokens", input_tokens)
            mlflow.log_metric("duration_seconds", duration)
            mlflow.log_metric("output_tokens", output_tokens)
            mlflow.log_metric("total_tokens", input_tokens + output_tokens)
            if error_chain:
                mlflow.log_param("fallback_used", True)

            logger.info(f"{provider.value} answered in {duration:.2f}s")

            return {
                "content": result_text,
                "usage": {
                    "input_tokens": input_tokens,
                    "output_tokens": output_tokens,
                    "total_tokens": input_tokens + output_tokens,
                },
                "model": self._models[provider],
                "provider": provider.value,
            }


def get_llm_service():
    """FastAPI dependency. Falls back to a NullLLMService when unconfigured."""
    from backend.app.services.null_llm import NullLLMService

    try:
        return LLMService()
    except LLMNotConfiguredError as e:
        logger.warning(str(e))
        return NullLLMService(str(e))
