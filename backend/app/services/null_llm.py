from backend.app.services.llm_service import LLMNotConfiguredError


class NullLLMService:
    """Stand-in when no provider key is set. Fails only when called."""

    def __init__(self, reason: str = "LLM not configured. Set OPENAI_API_KEY or GEMINI_API_KEY."):
        self.reason = reason

    def generate_response(self, *args, **kwargs):
        raise LLMNotConfiguredError(self.reason)
