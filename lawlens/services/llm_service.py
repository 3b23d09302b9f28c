"""
LLM Service
Chat completions through the OpenAI SDK
"""

from typing import List, Dict, Optional
from openai import OpenAI, OpenAIError

from lawlens.config.settings import settings
from lawlens.core.exceptions import CustomException, ErrorCode
from lawlens.core.logging import logger


class LLMService:
    """Thin wrapper around an OpenAI-compatible chat completions endpoint"""

    def __init__(self, client: Optional[OpenAI] = None):
        self.model = settings.OPENAI_MODEL
        self.temperature = settings.OPENAI_TEMPERATURE
        self._client = client

    @property
    def client(self) -> OpenAI:
        # built on first use so demo mode never needs a key
        if self._client is None:
            self._client = OpenAI(
                api_key=settings.OPENAI_API_KEY,
                base_url=settings.OPENAI_BASE_URL,
                timeout=settings.OPENAI_TIMEOUT,
            )
        return self._client

    def chat(self, messages: List[Dict[str, str]], temperature: Optional[float] = None, max_tokens: Optional[int] = None) -> str:
        """Return the trimmed content of the first choice"""
        params = {
            "model": self.model,
            "messages": messages,
            "temperature": self.temperature if temperature is None else temperature,
        }
        if max_tokens:
            params["max_tokens"] = max_tokens

        try:
            completion = self.client.chat.completions.create(**params)
        except OpenAIError as e:
            logger.error(f"LLM request failed: {e}")
            raise CustomException(code=ErrorCode.LLM_API_FAILED, message=f"LLM request failed: {e}")

        content = completion.choices[0].message.content if completion.choices else None
        if not content or not content.strip():
            raise CustomException(code=ErrorCode.LLM_INVALID_RESPONSE, message="No response from LLM")
        return content.strip()
