"""AI client factory for the coach chat."""
import logging
from typing import Any

from workout_log_api.config import settings


logger = logging.getLogger(__name__)

# Default client timeout
DEFAULT_TIMEOUT = 60.0


class AIClientFactory:
    """Factory for creating AI clients from settings."""

    @staticmethod
    def create_anthropic_client(timeout: float = DEFAULT_TIMEOUT) -> Any:
        """
        Create an Anthropic client.

        Raises:
            ImportError: If anthropic package is not installed
            ValueError: If ANTHROPIC_API_KEY is not configured
        """
        try:
            from anthropic import Anthropic
        except ImportError as e:
            raise ImportError("Anthropic library not installed. Run: pip install anthropic") from e

        api_key = settings.ANTHROPIC_API_KEY
        if not api_key:
            raise ValueError("Anthropic API key not configured. Set ANTHROPIC_API_KEY environment variable.")

        logger.debug("Creating Anthropic client")
        return Anthropic(api_key=api_key, timeout=timeout)

    @staticmethod
    def create_openai_client(timeout: float = DEFAULT_TIMEOUT) -> Any:
        """
        Create an OpenAI client.

        Raises:
            ImportError: If openai package is not installed
            ValueError: If OPENAI_API_KEY is not configured
        """
        try:
            import openai
        except ImportError as e:
            raise ImportError("OpenAI library not installed. Run: pip install openai") from e

        api_key = settings.OPENAI_API_KEY
        if not api_key:
            raise ValueError("OpenAI API key not configured. Set OPENAI_API_KEY environment variable.")

        logger.debug("Creating OpenAI client")
        return openai.OpenAI(api_key=api_key, timeout=timeout)
