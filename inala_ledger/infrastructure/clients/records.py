"""Remote records store HTTP client with exponential backoff retry logic"""

import asyncio
import logging
from typing import Any, Callable, Dict, List, Optional, TypeVar

import httpx
from inala_ledger.config import settings
from inala_ledger.domain.exceptions import RecordsAPIError
from inala_ledger.domain.models import Expense, Payment, Sale
from inala_ledger.domain.records import expense_from_document, payment_from_document, sale_from_document
from inala_ledger.infrastructure.observability.metrics import records_fetch_latency_histogram, records_fetch_failure_counter

T = TypeVar("T")

logger = logging.getLogger(__name__)


class RecordsClient:
    """Client for the remote store holding sales, payments and expenditures"""

    def __init__(
        self,
        base_url: str | None = None,
        timeout: float | None = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = base_url or settings.records_api_base
        self.timeout = timeout or settings.http_timeout_seconds
        self.max_retries = settings.sync_max_retries
        self.backoff_base = settings.sync_backoff_base
        self.transport = transport

    async def fetch_sales(self) -> List[Sale]:
        """Fetch every sales document"""
        return await self._fetch("sales", sale_from_document)

    async def fetch_payments(self) -> List[Payment]:
        """Fetch every payment document"""
        return await self._fetch("payments", payment_from_document)

    async def fetch_expenses(self) -> List[Expense]:
        """Fetch every expenditure document"""
        return await self._fetch("expenditures", expense_from_document)

    async def _fetch(self, collection: str, mapper: Callable[[Dict[str, Any]], T]) -> List[T]:
        """
        GET {base_url}/records/{collection} and map each document.

        Retry strategy:
        - Exponential backoff: 1s, 2s, 4s... (base * 2^(attempt-1))
        - Retries on 5xx errors and network failures, not on 4xx

        Raises:
            RecordsAPIError: On HTTP errors, exhausted retries, or invalid payload
        """
        url = f"{self.base_url}/records/{collection}"
        attempt = 0
        async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
            while True:
                try:
                    with records_fetch_latency_histogram.labels(collection=collection).time():
                        response = await client.get(url)
                        response.raise_for_status()
                    documents = response.json()["records"]
                    return [mapper(doc) for doc in documents]

                except httpx.HTTPStatusError as e:
                    records_fetch_failure_counter.labels(collection=collection).inc()
                    if e.response.status_code < 500:
                        raise RecordsAPIError(f"Records API error: {e.response.status_code}") from e
                    error: Exception = e

                except httpx.RequestError as e:
                    records_fetch_failure_counter.labels(collection=collection).inc()
                    error = e

                except (KeyError, ValueError, TypeError, AttributeError) as e:
                    raise RecordsAPIError(f"Invalid {collection} payload from records API: {e}") from e

                attempt += 1
                if attempt >= self.max_retries:
                    raise RecordsAPIError(
                        f"Records API unavailable after {attempt} attempts: {error!r}"
                    ) from error

                backoff = self.backoff_base * (2 ** (attempt - 1))
                logger.warning(
                    "Records fetch failed, retrying",
                    extra={"collection": collection, "attempt": attempt, "backoff_seconds": backoff},
                )
                await asyncio.sleep(backoff)
