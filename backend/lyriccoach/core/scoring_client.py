"""
Client for the remote Lyric Coach scoring service.

POST {base_url}/batch-score with every file as a multipart part named
"files". The service answers with {"results": [...]} or {"error": "..."}.
Every failure surfaces as one ScoringServiceError for the whole batch;
there are no retries here.
"""
from typing import Any, List, Optional, Sequence, Tuple

import httpx
import structlog

log = structlog.get_logger()

BATCH_SCORE_PATH = "/batch-score"
UNEXPECTED_FORMAT = "Unexpected response format from server."

# (filename, content, content_type)
AudioPart = Tuple[str, bytes, str]


class ScoringServiceError(Exception):
    """The scoring service could not produce results for the batch."""


class ScoringAuthError(ScoringServiceError):
    """The service rejected the credential (HTTP 401)."""


class ScoringClient:

    def __init__(
        self,
        base_url: str,
        timeout: float = 300.0,
        api_key_header: str = "X-API-Key",
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.api_key_header = api_key_header
        self._transport = transport

    async def score_batch(self, files: Sequence[AudioPart], api_key: Optional[str] = None) -> List[Any]:
        """Upload the batch and return the raw ``results`` array."""
        headers = {self.api_key_header: api_key} if api_key else {}
        parts = [("files", (name, data, ctype)) for name, data, ctype in files]

        log.info("batch_score_request", files=len(parts), url=self.base_url + BATCH_SCORE_PATH)
        try:
            async with httpx.AsyncClient(
                base_url=self.base_url, timeout=self.timeout, transport=self._transport,
            ) as client:
                response = await client.post(BATCH_SCORE_PATH, files=parts, headers=headers)
        except httpx.HTTPError as e:
            log.error("batch_score_transport_failed", error=str(e))
            raise ScoringServiceError(f"Upload or analysis failed: {e}") from e

        if response.status_code == 401:
            log.warning("batch_score_unauthorized")
            raise ScoringAuthError("Invalid API key. Please enter it again.")
        if not response.is_success:
            log.error("batch_score_http_error", status=response.status_code)
            raise ScoringServiceError(f"Server responded with status {response.status_code}")

        try:
            data = response.json()
        except ValueError as e:
            log.error("batch_score_not_json", error=str(e))
            raise ScoringServiceError(UNEXPECTED_FORMAT) from e

        if not isinstance(data, dict):
            raise ScoringServiceError(UNEXPECTED_FORMAT)
        if data.get("error"):
            log.warning("batch_score_service_error", error=data["error"])
            raise ScoringServiceError(str(data["error"]))

        results = data.get("results")
        if not isinstance(results, list):
            raise ScoringServiceError(UNEXPECTED_FORMAT)

        log.info("batch_scored", files=len(parts), results=len(results))
        return results
