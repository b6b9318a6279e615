# showroom/services/inventory_client.py

"""HTTP client for the dealership inventory API."""

import logging
import time
from collections.abc import Mapping
from typing import Any

from curl_cffi import requests as curl_requests

from showroom.config.settings import Settings
from showroom.models.inventory_page import InventoryPage
from showroom.models.vehicle import Vehicle
from showroom.storage.search_cache import QueryDescriptor

logger = logging.getLogger("showroom.client")

_RETRY_STATUSES = (429, 502, 503, 504)


class InventoryFetchError(Exception):
    """Raised when an inventory page cannot be fetched or decoded."""


def build_query_params(descriptor: QueryDescriptor) -> dict[str, str]:
    """Turn a filter mapping into URL query parameters.

    Unset values (``None``, ``""``, ``False``) are left out; booleans
    are sent as ``"true"``.
    """
    params: dict[str, str] = {}
    for name, value in descriptor.items():
        if value is None or value == "" or value is False:
            continue
        params[name] = "true" if value is True else str(value)
    return params


class InventoryClient:
    """Fetch inventory pages from ``GET {API_BASE_URL}/api/cars``."""

    def __init__(self, base_url: str | None = None) -> None:
        self.settings = Settings()
        self.base_url = (base_url or self.settings.API_BASE_URL).rstrip("/")
        self.session = curl_requests.Session(
            impersonate=self.settings.IMPERSONATE_BROWSER
        )
        self._current_delay: float = self.settings.REQUEST_DELAY
        self._request_timeout: int = self.settings.REQUEST_TIMEOUT

    def close(self) -> None:
        self.session.close()

    def fetch(self, descriptor: QueryDescriptor) -> InventoryPage:
        """Fetch one page of vehicles for *descriptor*.

        Raises:
            InventoryFetchError: on transport errors, non-200 responses
                after retries, or a malformed body.
        """
        url = f"{self.base_url}{self.settings.CARS_ENDPOINT}"
        params = build_query_params(descriptor)
        payload = self._get_json(url, params)
        return self._parse_page(payload)

    # ── Private helpers ──────────────────────────────────

    def _escalate_delay(self) -> None:
        """Double the current delay up to the configured max."""
        max_delay = (
            self.settings.REQUEST_DELAY
            * self.settings.MAX_DELAY_MULTIPLIER
        )
        self._current_delay = min(self._current_delay * 2, max_delay)
        logger.warning(
            "Inventory API throttled, delay escalated to %.1fs",
            self._current_delay,
        )

    def _get_json(
        self, url: str, params: Mapping[str, str]
    ) -> Any:
        """GET with retries on transient failures; return decoded JSON."""
        last_error = "no attempt made"
        for attempt in range(self.settings.MAX_RETRIES):
            try:
                resp = self.session.get(
                    url,
                    params=dict(params),
                    headers=self.settings.DEFAULT_HEADERS,
                    timeout=self._request_timeout,
                )
            except Exception as exc:
                last_error = str(exc)
                logger.warning(
                    "Request error on attempt %d: %s",
                    attempt + 1,
                    exc,
                    exc_info=True,
                )
                time.sleep(self._current_delay * (attempt + 1))
                continue

            if resp.status_code == 200:
                self._current_delay = self.settings.REQUEST_DELAY
                try:
                    return resp.json()
                except ValueError as exc:
                    msg = f"invalid JSON from {url}: {exc}"
                    raise InventoryFetchError(msg) from exc

            last_error = f"HTTP {resp.status_code}"
            logger.warning(
                "HTTP %d on attempt %d for %s",
                resp.status_code,
                attempt + 1,
                url,
            )
            if resp.status_code not in _RETRY_STATUSES:
                break
            self._escalate_delay()
            time.sleep(self._current_delay)

        msg = f"inventory request to {url} failed: {last_error}"
        raise InventoryFetchError(msg)

    @staticmethod
    def _parse_page(payload: Any) -> InventoryPage:
        """Map ``{"cars": [...], "pagination": {"total": n}}`` to a page."""
        if not isinstance(payload, dict):
            msg = f"unexpected payload type {type(payload).__name__}"
            raise InventoryFetchError(msg)

        records = payload.get("cars") or []
        pagination = payload.get("pagination") or {}
        vehicles: list[Vehicle] = []
        skipped = 0
        for record in records:
            try:
                vehicles.append(Vehicle.from_api(record))
            except (AttributeError, KeyError, TypeError, ValueError):
                skipped += 1
                logger.debug("Skipping malformed car record: %r", record)
        if skipped:
            logger.warning("Skipped %d malformed car records", skipped)

        total = pagination.get("total", len(vehicles))
        try:
            total_count = int(total)
        except (TypeError, ValueError):
            total_count = len(vehicles)
        return InventoryPage(items=vehicles, total_count=total_count)
