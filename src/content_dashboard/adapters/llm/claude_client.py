"""Claude API client for commit summaries."""

import asyncio
import logging
from typing import Optional

import httpx

from content_dashboard.config import Settings
from content_dashboard.core import LLMClient

logger = logging.getLogger(__name__)


class ClaudeClient(LLMClient):
    """Claude API client implementation."""

    def __init__(self, settings: Settings) -> None:
        self.settings = settings
        self.api_key = settings.anthropic_api_key
        self.model = settings.claude.model
        self.max_tokens = settings.claude.max_tokens
        self.temperature = settings.claude.temperature
        self.base_url = "https://api.anthropic.com/v1"
        self.max_retries = settings.claude.max_retries
        self.initial_retry_delay = settings.claude.initial_retry_delay
        self.request_delay = settings.claude.request_delay
        self.timeout = settings.claude.timeout
        self._last_request_time = 0.0

    async def generate(self, prompt: str, system: str, max_tokens: Optional[int] = None) -> str:
        """Generate a completion for the prompt."""
        return await self._call_api(prompt=prompt, system=system, max_tokens=max_tokens or self.max_tokens)

    async def _call_api(self, prompt: str, system: str, max_tokens: int) -> str:
        """Call Claude API with retry logic and rate limiting."""
        # Rate limiting: ensure minimum delay between requests
        loop = asyncio.get_running_loop()
        time_since_last_request = loop.time() - self._last_request_time
        if time_since_last_request < self.request_delay:
            await asyncio.sleep(self.request_delay - time_since_last_request)

        last_exception: Optional[Exception] = None

        for attempt in range(self.max_retries):
            try:
                async with httpx.AsyncClient(timeout=self.timeout) as client:
                    response = await client.post(
                        f"{self.base_url}/messages",
                        headers={
                            "x-api-key": self.api_key,
                            "anthropic-version": "2023-06-01",
                            "content-type": "application/json",
                        },
                        json={
                            "model": self.model,
                            "max_tokens": max_tokens,
                            "temperature": self.temperature,
                            "system": system,
                            "messages": [
                                {"role": "user", "content": prompt}
                            ],
                        },
                    )

                    self._last_request_time = loop.time()

                    if response.status_code == 200:
                        data = response.json()
                        return data["content"][0]["text"].strip()

                    # Rate limit - retry with backoff
                    if response.status_code == 429:
                        retry_after = self._get_retry_delay(response, attempt)
                        logger.warning(
                            "Rate limit hit, retrying after %.1fs (attempt %d/%d)",
                            retry_after, attempt + 1, self.max_retries,
                        )
                        await asyncio.sleep(retry_after)
                        continue

                    # Server errors - retry with backoff
                    if response.status_code >= 500:
                        retry_delay = self.initial_retry_delay * (2 ** attempt)
                        logger.warning(
                            "Server error %d, retrying after %.1fs", response.status_code, retry_delay
                        )
                        await asyncio.sleep(retry_delay)
                        continue

                    # Other errors - raise immediately
                    response.raise_for_status()

            except httpx.HTTPStatusError:
                raise
            except httpx.RequestError as e:
                last_exception = e
                if attempt < self.max_retries - 1:
                    retry_delay = self.initial_retry_delay * (2 ** attempt)
                    logger.warning("Network error (%s), retrying after %.1fs", e, retry_delay)
                    await asyncio.sleep(retry_delay)
                    continue
                raise

        # If we exhausted all retries
        if last_exception:
            raise last_exception
        raise RuntimeError("Failed to call API after all retries")

    def _get_retry_delay(self, response: httpx.Response, attempt: int) -> float:
        """Calculate retry delay from response headers or use exponential backoff."""
        retry_after = response.headers.get("retry-after")
        if retry_after:
            try:
                return float(retry_after)
            except ValueError:
                pass

        return self.initial_retry_delay * (2 ** attempt)
