from typing import List, Optional, Dict, Any
from openai import OpenAI

from config.settings import (
    AI_GATEWAY_URL,
    AI_GATEWAY_API_KEY,
    AI_MODEL,
)
from utils.logger import get_logger

logger = get_logger(__name__)


class LLMClient:
    """
    Wrapper around an OpenAI-compatible chat completions gateway.
    The API key stays on the server; clients only ever see the analysis text.
    """

    _instance: Optional["LLMClient"] = None

    def __init__(self, base_url: Optional[str] = None, api_key: Optional[str] = None, model: Optional[str] = None):
        self.base_url = base_url or AI_GATEWAY_URL
        self.model = model or AI_MODEL
        api_key = api_key or AI_GATEWAY_API_KEY

        self.client = OpenAI(
            base_url=self.base_url,
            api_key=api_key,
        ) if api_key else None

        # Track total token usage across all requests
        self.total_prompt_tokens = 0
        self.total_completion_tokens = 0
        self.total_requests = 0

        if self.client:
            logger.info(f"LLMClient initialized (gateway={self.base_url}, model={self.model})")
        else:
            logger.warning("LLMClient NOT configured - AI_GATEWAY_API_KEY not set")

    @classmethod
    def get_instance(cls) -> "LLMClient":
        """Get singleton instance of LLMClient."""
        if cls._instance is None:
            cls._instance = cls()
        return cls._instance

    def is_configured(self) -> bool:
        """Check if the client is properly configured."""
        return self.client is not None

    def get_token_stats(self) -> Dict[str, int]:
        """Get cumulative token usage statistics."""
        return {
            "total_requests": self.total_requests,
            "total_prompt_tokens": self.total_prompt_tokens,
            "total_completion_tokens": self.total_completion_tokens,
            "total_tokens": self.total_prompt_tokens + self.total_completion_tokens,
        }

    def chat_completion(
        self,
        messages: List[dict],
        max_tokens: int = 1000,
        **kwargs
    ) -> tuple[str, Dict[str, Any]]:
        """
        Send a chat completion request to the gateway.

        Args:
            messages: List of message dicts with 'role' and 'content'
            max_tokens: Maximum tokens in response
            **kwargs: Additional parameters passed to the API

        Returns:
            Tuple of (response content, usage stats dict)

        Raises:
            ValueError: if the gateway key is not configured
            openai.APIStatusError: on a non-2xx gateway response
        """
        if not self.client:
            raise ValueError("AI gateway client not configured. Check environment variables.")

        logger.info(f"[LLM] Sending chat completion request (model={self.model}, max_tokens={max_tokens})")

        response = self.client.chat.completions.create(
            model=self.model,
            messages=messages,
            max_tokens=max_tokens,
            **kwargs
        )

        usage_stats = {}
        usage = response.usage
        if usage is not None:
            usage_stats = {
                "prompt_tokens": usage.prompt_tokens,
                "completion_tokens": usage.completion_tokens,
                "total_tokens": usage.total_tokens,
            }
            self.total_prompt_tokens += usage.prompt_tokens
            self.total_completion_tokens += usage.completion_tokens
            logger.info(f"[LLM] Response received: {usage.total_tokens:,} tokens")
        self.total_requests += 1

        content = ""
        if response.choices:
            content = response.choices[0].message.content or ""
        return content, usage_stats


# Convenience function to get the client
def get_llm_client() -> LLMClient:
    """Get the singleton LLM client instance."""
    return LLMClient.get_instance()
