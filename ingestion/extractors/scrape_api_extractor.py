"""
Scraping API extractor.

Fetches the full pendency dataset in a single request and validates its
shape. There is no retry: a failed fetch fails the whole sync run and the
next scheduled run tries again.

- Credentials travel as query parameters (upstream contract)
- One hard timeout around the whole request
- Non-2xx, unreadable JSON and shape violations are distinct errors
"""

import asyncio
import httpx
from typing import Any, Dict, List, Optional
from pydantic import ValidationError
from core.config import settings
from core.exceptions import (
    APIExtractionError,
    AuthenticationError,
    NetworkError,
    SchemaValidationError,
    UpstreamStatusError,
    UpstreamTimeoutError,
)
from schemas.upstream import UpstreamPayload
import logging

logger = logging.getLogger(__name__)

SCRAPE_PATH = "/api/scrape"
USER_AGENT = "PainelHolmes/1.0"


class ScrapeAPIExtractor:
    """
    Client for the upstream GET /api/scrape endpoint.

    Attributes:
        base_url: Upstream root URL
        email / password: Upstream credentials
        contratos: Contract numbers requested in each fetch
        timeout: Hard bound for the whole request, in seconds (default: 600)
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        email: Optional[str] = None,
        password: Optional[str] = None,
        contratos: Optional[List[str]] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        self.base_url = (base_url or settings.SCRAPE_API_BASE_URL).rstrip("/")
        self.email = email if email is not None else settings.SCRAPE_API_EMAIL
        self.password = password if password is not None else settings.SCRAPE_API_PASSWORD
        self.contratos = contratos if contratos is not None else settings.contratos
        self.timeout = timeout or settings.SYNC_TIMEOUT_SECONDS
        self.transport = transport

    @property
    def url(self) -> str:
        return f"{self.base_url}{SCRAPE_PATH}"

    def _params(self) -> Dict[str, str]:
        return {
            "email": self.email,
            "password": self.password,
            "contrato": ",".join(self.contratos),
        }

    def _safe_context(self, **extra: Any) -> Dict[str, Any]:
        # Never put credentials in logs or error context
        return {"api_url": self.url, "contratos": len(self.contratos), **extra}

    async def _get(self) -> httpx.Response:
        headers = {
            "Accept": "application/json",
            "User-Agent": USER_AGENT,
        }
        async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
            return await client.get(self.url, params=self._params(), headers=headers)

    async def fetch_response(self) -> httpx.Response:
        """
        Issue the upstream request.

        Raises:
            UpstreamTimeoutError: The request did not finish within the timeout
            NetworkError: Connection-level failure
            AuthenticationError: HTTP 401/403
            UpstreamStatusError: Any other non-2xx status
        """
        logger.info(f"Requesting {self.url} for {len(self.contratos)} contracts (timeout {self.timeout}s)")

        try:
            response = await asyncio.wait_for(self._get(), timeout=self.timeout)
        except (asyncio.TimeoutError, httpx.TimeoutException) as e:
            raise UpstreamTimeoutError(
                f"Upstream request timed out after {self.timeout} seconds",
                context=self._safe_context(timeout=self.timeout),
                original_exception=e
            )
        except httpx.HTTPError as e:
            raise NetworkError(
                "Failed to reach upstream API",
                context=self._safe_context(),
                original_exception=e
            )

        logger.info(f"Upstream responded with status {response.status_code}")

        if response.status_code in (401, 403):
            raise AuthenticationError(
                f"Upstream rejected credentials (status {response.status_code})",
                context=self._safe_context(status_code=response.status_code)
            )

        if not response.is_success:
            raise UpstreamStatusError(
                f"API returned status {response.status_code}: {response.reason_phrase}",
                context=self._safe_context(
                    status_code=response.status_code,
                    response_body=response.text[:500]
                )
            )

        return response

    def parse_payload(self, response: httpx.Response) -> UpstreamPayload:
        """
        Decode and validate the response body.

        Raises:
            APIExtractionError: Body is not JSON
            SchemaValidationError: Body does not have the expected shape
        """
        try:
            raw = response.json()
        except ValueError as e:
            raise APIExtractionError(
                "Failed to parse JSON response",
                context=self._safe_context(response_body=response.text[:500]),
                original_exception=e
            )

        try:
            payload = UpstreamPayload.parse_obj(raw)
        except ValidationError as e:
            raise SchemaValidationError(
                "Upstream payload does not match the expected shape",
                context=self._safe_context(errors=str(e.errors()[:5])),
                original_exception=e
            )

        logger.info(
            f"Received {len(payload.data)} contracts / {payload.total_registros} records "
            f"(success={payload.success})"
        )
        return payload

    async def fetch_payload(self) -> UpstreamPayload:
        """Fetch and validate the full dataset"""
        response = await self.fetch_response()
        return self.parse_payload(response)
