from __future__ import annotations

import logging
from typing import Any, Protocol

import requests

from ..restaurants.errors import NetworkError, StoreConfigError
from .config import DEFAULT_STORE_CONFIG, StoreConfig

logger = logging.getLogger(__name__)

# PostgREST refuses an unfiltered PATCH; every row has an id, so this
# filter matches the whole table.
MATCH_ALL_FILTER = {"id": "not.is.null"}


class RestaurantGateway(Protocol):
    def fetch_all(self) -> list[dict[str, Any]]: ...

    def update_one(self, restaurant_id: str, times_picked: int) -> None: ...

    def update_all_times_picked(self, value: int) -> None: ...


class SupabaseGateway:
    """``RestaurantGateway`` backed by the Supabase REST (PostgREST) API."""

    def __init__(
        self,
        config: StoreConfig = DEFAULT_STORE_CONFIG,
        session: requests.Session | None = None,
    ) -> None:
        if not config.url or not config.api_key:
            raise StoreConfigError("SUPABASE_URL and SUPABASE_ANON_KEY must be set")
        try:
            self._timeout = float(config.timeout)
        except (TypeError, ValueError):
            raise StoreConfigError(f"SUPABASE_TIMEOUT must be a number, got {config.timeout!r}") from None
        self._config = config
        self._session = session or requests.Session()
        self._session.headers.update({
            "apikey": config.api_key,
            "Authorization": f"Bearer {config.api_key}",
        })

    def _request(self, method: str, params: dict[str, str], **kwargs: Any) -> requests.Response:
        try:
            resp = self._session.request(
                method,
                self._config.rest_url,
                params=params,
                timeout=self._timeout,
                **kwargs,
            )
            resp.raise_for_status()
        except requests.RequestException as exc:
            logger.warning("Store %s %s failed", method, params, exc_info=True)
            raise NetworkError(f"Store request failed: {exc}") from exc
        return resp

    def fetch_all(self) -> list[dict[str, Any]]:
        resp = self._request("GET", {"select": "*"})
        try:
            rows = resp.json()
        except ValueError as exc:
            raise NetworkError("Store returned a non-JSON body") from exc
        if not isinstance(rows, list):
            raise NetworkError("Store returned an unexpected payload")
        return rows

    def _patch_times_picked(self, params: dict[str, str], value: int) -> None:
        self._request(
            "PATCH",
            params,
            json={"times_picked": value},
            headers={"Prefer": "return=minimal"},
        )

    def update_one(self, restaurant_id: str, times_picked: int) -> None:
        self._patch_times_picked({"id": f"eq.{restaurant_id}"}, times_picked)

    def update_all_times_picked(self, value: int) -> None:
        self._patch_times_picked(dict(MATCH_ALL_FILTER), value)
