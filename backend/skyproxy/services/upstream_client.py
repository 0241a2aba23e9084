"""Upstream HTTP client — one shared httpx.AsyncClient per provider."""

import logging
from typing import Any

import httpx

from skyproxy.errors import ConfigurationError, NetworkError, UpstreamError
from skyproxy.services.providers import ProviderConfig
from skyproxy.services.request_budget import RequestBudget

logger = logging.getLogger(__name__)


class UpstreamClient:
    """Issues authenticated GETs against a provider and counts each attempt."""

    def __init__(
        self,
        provider: ProviderConfig,
        api_key: str,
        budget: RequestBudget,
        timeout: float = 30.0,
    ):
        self.provider = provider
        self.budget = budget
        self._api_key = api_key
        self._timeout = timeout
        self._client: httpx.AsyncClient | None = None

    @property
    def is_configured(self) -> bool:
        return bool(self._api_key)

    async def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self.provider.base_url,
                timeout=self._timeout,
            )
        return self._client

    def require_key(self):
        if not self._api_key:
            raise ConfigurationError(
                f"Please set {self.provider.api_key_setting.upper()} for provider '{self.provider.name}'"
            )

    async def get(self, path: str, params: dict[str, Any], label: str = "") -> Any:
        """GET ``path`` and return the decoded body.

        Raises UpstreamError on a non-2xx status (status and body preserved)
        and NetworkError when the request never completes.
        """
        self.require_key()
        client = await self._get_client()

        count = self.budget.increment()
        logger.info(f"[{count}/{self.budget.limit}] {label or path}")

        try:
            resp = await client.get(
                path,
                params=params,
                headers=self.provider.headers(self._api_key),
            )
        except httpx.HTTPError as e:
            logger.error(f"Upstream request error for {path}: {e}")
            raise NetworkError(str(e) or e.__class__.__name__) from e

        try:
            data = resp.json()
        except ValueError:
            data = {"raw": resp.text}

        if not resp.is_success:
            logger.error(f"API Error {resp.status_code}: {data}")
            raise UpstreamError(resp.status_code, data)

        return data

    async def close(self):
        if self._client:
            await self._client.aclose()
            self._client = None
