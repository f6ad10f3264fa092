"""Executive summary client for OpenAI-compatible chat completion APIs.

Uses httpx; a preconfigured ``httpx.AsyncClient`` can be injected (tests pass
one backed by ``httpx.MockTransport``).
"""

import logging
from typing import Sequence

import httpx

from cse_whiteboard.common.config import WhiteboardSettings
from cse_whiteboard.common.exceptions import SummaryUnavailableError
from cse_whiteboard.reports.render import format_date, format_datetime, strip_html

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = (
    "You are a customer success engineer writing a weekly status update for "
    "leadership. Summarize the week's activity for one customer in three to five "
    "short sentences: progress, risks, and next steps. Plain text only."
)


def build_prompt(customer, notes: Sequence, week_start, week_end) -> str:
    """Customer metadata plus the week's notes with markup stripped."""
    lines = [
        f"Customer: {customer.name}",
        f"Week: {format_date(week_start)} - {format_date(week_end)}",
        f"Environment: {customer.topology} (migration stage {customer.dumbledore_stage} of 9)",
        f"Temperament: {customer.temperament}",
        f"Patch frequency: {customer.patch_frequency}",
        f"Last patch: {customer.last_patch_version or 'unknown'}"
        f" on {format_date(customer.last_patch_date) if customer.last_patch_date else 'unknown date'}",
    ]
    if customer.work_load:
        lines.append(f"Workload: {customer.work_load}")
    if customer.cloud_manager:
        lines.append(f"Cloud manager: {customer.cloud_manager}")
    if customer.product_set:
        lines.append(f"Products: {customer.product_set}")
    lines.append("")
    lines.append("Notes:")
    for note in notes:
        lines.append(f"- [{format_datetime(note.created_at)}] {strip_html(note.note)}")
    return "\n".join(lines)


class SummaryClient:
    """Requests a short narrative summary for one customer's week."""

    def __init__(
        self,
        settings: WhiteboardSettings,
        http_client: httpx.AsyncClient | None = None,
    ):
        self.settings = settings
        self._base_url = settings.summary_base_url.rstrip("/")
        self._http_client = http_client

    def _get_http_client(self) -> httpx.AsyncClient:
        """Lazy-init httpx.AsyncClient."""
        if self._http_client is None:
            self._http_client = httpx.AsyncClient()
        return self._http_client

    def _get_headers(self) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {self.settings.summary_api_key}",
            "Content-Type": "application/json",
        }

    async def summarize(self, prompt: str) -> str:
        payload = {
            "model": self.settings.summary_model,
            "messages": [
                {"role": "system", "content": SYSTEM_PROMPT},
                {"role": "user", "content": prompt},
            ],
            "max_tokens": self.settings.summary_max_tokens,
        }
        client = self._get_http_client()
        try:
            resp = await client.post(
                f"{self._base_url}/chat/completions",
                json=payload,
                headers=self._get_headers(),
                timeout=self.settings.summary_timeout,
            )
        except httpx.HTTPError as exc:
            raise SummaryUnavailableError(f"Summary request failed: {exc}") from exc

        if resp.status_code != 200:
            raise SummaryUnavailableError(f"Summary API returned HTTP {resp.status_code}")

        try:
            content = resp.json()["choices"][0]["message"]["content"]
        except (ValueError, KeyError, IndexError, TypeError) as exc:
            raise SummaryUnavailableError("Malformed summary response") from exc
        if not isinstance(content, str) or not content.strip():
            raise SummaryUnavailableError("Empty summary response")
        return content.strip()

    async def close(self) -> None:
        if self._http_client is not None:
            await self._http_client.aclose()
            self._http_client = None
