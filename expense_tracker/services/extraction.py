"""Client for the third-party natural-language expense extraction service."""

import logging
from typing import Any

import httpx

from expense_tracker.config import Settings, get_settings
from expense_tracker.errors import InternalError

logger = logging.getLogger(__name__)


class ExtractionService:
    """Pass-through proxy to the AI extraction API.

    The request body is forwarded unchanged and the upstream JSON and
    status code are handed back unchanged. No retries.
    """

    def __init__(
        self,
        settings: Settings | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.settings = settings or get_settings()
        self.api_url = self.settings.ai_expense_api_url
        self.api_key = self.settings.ai_expense_api_key
        self.timeout = self.settings.ai_expense_timeout_seconds
        self.transport = transport

    @property
    def is_configured(self) -> bool:
        return bool(self.api_key)

    async def extract(self, payload: dict[str, Any]) -> tuple[int, Any]:
        """Forward an extraction request. Returns (status code, JSON body)."""
        if not self.is_configured:
            logger.error("AI_EXPENSE_API_KEY is not set")
            raise InternalError("AI service not configured")

        paragraph = payload.get("input_data", {}).get("paragraph") or ""
        logger.info(f"Forwarding extraction request to {self.api_url} ({len(paragraph)} chars)")

        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                response = await client.post(
                    self.api_url,
                    json=payload,
                    headers={"X-API-Key": self.api_key},
                )
        except httpx.HTTPError as e:
            logger.error(f"HTTP error calling AI extraction service: {e}")
            raise InternalError("Failed to connect to AI service") from e

        try:
            body = response.json()
        except ValueError as e:
            logger.error(f"Failed to parse AI response as JSON: {e}")
            logger.error(f"Response was: {response.text}")
            raise InternalError("Failed to parse AI response") from e

        expenses = (body.get("output_data") or {}).get("expenses") if isinstance(body, dict) else None
        if response.is_success and not expenses:
            logger.warning(f"AI service returned no expenses: {response.text}")
        return response.status_code, body
