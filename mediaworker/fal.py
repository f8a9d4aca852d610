"""
fal.ai queue client (async, httpx).

fal.ai queue protocol:
  POST {queue}/{endpoint}                         → { request_id, status_url, response_url }
  GET  {status_url}?logs=1                        → { status: IN_QUEUE|IN_PROGRESS|COMPLETED, logs }
  GET  {response_url}                             → result payload

The submit response carries the status/result URLs; for multi-segment
endpoints (``fal-ai/wan/v2.2-5b/text-to-video``) those live under the app id
only, so they are used in preference to URLs built from the endpoint.
No retries: any HTTP error is raised to the caller.
"""

import asyncio
import logging
import time
from typing import Optional

import httpx

from .config import DEFAULT_POLL_INTERVAL, FAL_QUEUE_URL

logger = logging.getLogger(__name__)

SUBMIT_TIMEOUT = 60  # seconds
POLL_TIMEOUT = 30
MAX_WAIT_SECONDS = 900


class FalError(RuntimeError):
    """fal.ai rejected a request, reported a failure, or never completed."""


def _error_detail(resp: httpx.Response) -> str:
    try:
        body = resp.json()
    except ValueError:
        return resp.text[:300]
    if isinstance(body, dict):
        detail = body.get("detail") or body.get("error") or body
        return str(detail)[:300]
    return str(body)[:300]


class FalClient:
    def __init__(
        self,
        api_key: str,
        queue_url: str = FAL_QUEUE_URL,
        poll_interval: float = DEFAULT_POLL_INTERVAL,
        max_wait_seconds: float = MAX_WAIT_SECONDS,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.api_key = api_key
        self.queue_url = queue_url.rstrip("/")
        self.poll_interval = poll_interval
        self.max_wait_seconds = max_wait_seconds
        self._transport = transport

    def _headers(self) -> dict:
        if not self.api_key:
            raise FalError("FAL_API_KEY not set")
        return {
            "Authorization": f"Key {self.api_key}",
            "Content-Type": "application/json",
        }

    def _client(self, timeout: float) -> httpx.AsyncClient:
        return httpx.AsyncClient(timeout=timeout, transport=self._transport)

    async def _get_json(self, url: str, params: Optional[dict] = None) -> dict:
        async with self._client(POLL_TIMEOUT) as client:
            resp = await client.get(url, headers=self._headers(), params=params)
        if resp.is_error:
            raise FalError(f"fal.ai returned {resp.status_code} for {url}: {_error_detail(resp)}")
        return resp.json()

    async def submit(self, endpoint: str, arguments: dict) -> dict:
        """Queue a request; returns the submit payload (request_id + URLs)."""
        submit_url = f"{self.queue_url}/{endpoint}"
        logger.info(f"[fal] Submitting to {endpoint}...")

        async with self._client(SUBMIT_TIMEOUT) as client:
            resp = await client.post(submit_url, headers=self._headers(), json=arguments)
        if resp.is_error:
            raise FalError(f"fal.ai rejected {endpoint} ({resp.status_code}): {_error_detail(resp)}")
        return resp.json()

    async def subscribe(self, endpoint: str, arguments: dict) -> dict:
        """
        Submit to the queue and wait for the result payload.

        Args:
            endpoint:  fal.ai model id, e.g. 'fal-ai/mmaudio-v2'.
            arguments: The model's input object.

        Returns:
            The model's output object.
        """
        submitted = await self.submit(endpoint, arguments)
        request_id = submitted.get("request_id")
        if not request_id:
            raise FalError(f"No request_id in fal.ai response: {submitted}")

        status_url = submitted.get("status_url") or f"{self.queue_url}/{endpoint}/requests/{request_id}/status"
        result_url = submitted.get("response_url") or f"{self.queue_url}/{endpoint}/requests/{request_id}"
        logger.info(f"[fal] Queued {endpoint}: request_id={request_id}")

        seen_logs = 0
        start_time = time.monotonic()
        while time.monotonic() - start_time < self.max_wait_seconds:
            status_data = await self._get_json(status_url, params={"logs": 1})
            status = status_data.get("status", "")

            logs = status_data.get("logs") or []
            for entry in logs[seen_logs:]:
                logger.debug(f"[fal] {endpoint}: {entry.get('message', entry)}")
            seen_logs = len(logs)

            if status == "COMPLETED":
                if status_data.get("error"):
                    raise FalError(f"{endpoint} failed: {status_data['error']}")
                result = await self._get_json(result_url)
                logger.info(f"[fal] Completed {endpoint}: request_id={request_id}")
                return result

            if status in ("FAILED", "ERROR"):
                raise FalError(f"{endpoint} failed: {status_data.get('error', 'Unknown error')}")

            # IN_QUEUE or IN_PROGRESS - keep polling
            logger.debug(f"[fal] {endpoint} status: {status}")
            await asyncio.sleep(self.poll_interval)

        raise FalError(
            f"{endpoint} timed out after {self.max_wait_seconds:g}s (request_id={request_id})"
        )
