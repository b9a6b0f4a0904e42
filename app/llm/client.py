from loguru import logger
from openai import APIStatusError, OpenAI, OpenAIError

from app.errors import UpstreamCompletionError


class CompletionClient:
    def __init__(self, api_key: str, model: str, base_url: str = "https://openrouter.ai/api/v1"):
        self.model = model
        self.client = None
        if api_key:
            self.client = OpenAI(base_url=base_url, api_key=api_key, max_retries=0)

    def complete(self, messages: list[dict]) -> str:
        """Send one chat completion request and return the first choice's text."""
        if self.client is None:
            raise UpstreamCompletionError("LLM API key not configured")

        try:
            response = self.client.chat.completions.create(
                model=self.model,
                messages=messages,
            )
        except APIStatusError as e:
            logger.error("LLM API error: {} {}", e.status_code, e.message)
            raise UpstreamCompletionError(
                f"AI API error: {e.status_code}", upstream_status=e.status_code
            ) from e
        except OpenAIError as e:
            logger.error("LLM request failed: {}", e)
            raise UpstreamCompletionError(f"AI API request failed: {e}") from e

        if not response.choices or response.choices[0].message.content is None:
            logger.error("LLM response had no content: {}", response)
            raise UpstreamCompletionError("AI API returned an empty completion")

        content = response.choices[0].message.content
        logger.debug("LLM raw response: {}", content)
        return content
