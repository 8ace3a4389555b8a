"""
HTTP client for the outbound API that receives relayed emails.
"""

import httpx

from mail_relay.core.logging import get_logger
from mail_relay.core.models import ForwardResult, OutboundRecord

log = get_logger(__name__)


class Forwarder:
    """Posts outbound records to the configured API."""

    def __init__(
        self,
        client: httpx.AsyncClient | None = None,
        timeout: float = 30.0,
    ):
        self.timeout = timeout
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(timeout=timeout)

    async def forward(
        self,
        record: OutboundRecord,
        endpoint: str,
        token: str,
    ) -> ForwardResult:
        """
        POST a record as JSON to the outbound API.

        Non-2xx responses and transport errors are logged and returned as a
        failed result. Nothing is retried and nothing is raised.

        Args:
            record: Record to send
            endpoint: Outbound API URL
            token: Value for the X-Api-Token header

        Returns:
            ForwardResult describing the outcome
        """
        try:
            response = await self._client.post(
                endpoint,
                json=record.to_dict(),
                headers={
                    "Content-Type": "application/json",
                    "X-Api-Token": token,
                },
            )
        except httpx.RequestError as e:
            log.error(
                "forward_request_error",
                endpoint=endpoint,
                error=str(e),
                error_type=type(e).__name__,
            )
            return ForwardResult(ok=False, error=str(e))

        if not response.is_success:
            log.error(
                "forward_failed",
                status=response.status_code,
                reason=response.reason_phrase,
                response_body=response.text,
            )
            return ForwardResult(
                ok=False,
                status_code=response.status_code,
                error=response.text,
            )

        log.info("forward_success", status=response.status_code)
        return ForwardResult(ok=True, status_code=response.status_code)

    async def aclose(self) -> None:
        """Close the HTTP client if this forwarder created it."""
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.aclose()
