from __future__ import annotations

import logging
from typing import Any, Dict, Iterator, List, Optional

from .errors import ApiError
from .models import Device, PageResult
from .xiq_client import XIQClient

logger = logging.getLogger(__name__)

DEVICES_PATH = "/devices"
DEFAULT_PAGE_SIZE = 100


class DevicePager:
    # Walks GET /devices page by page (page numbers start at 1).
    # A page shorter than the limit is the last one, whatever total_pages says.

    def __init__(self, client: XIQClient, params: Optional[Dict[str, Any]] = None) -> None:
        self.client = client
        self.params = dict(params or {"deviceTypes": "REAL", "async": "false"})

    def _fetch_page(self, page: int, page_size: int) -> PageResult:
        page_params = dict(self.params)
        page_params.update({"page": page, "limit": page_size})
        data = self.client.get(DEVICES_PATH, params=page_params)
        if not isinstance(data, dict):
            raise ApiError("Unexpected devices response shape", details={"page": page})
        page_items = data.get("data") or []
        if not isinstance(page_items, list):
            raise ApiError("Unexpected devices response shape", details={"page": page})

        try:
            devices = [Device.from_api(obj) for obj in page_items]
        except (TypeError, ValueError, AttributeError) as e:
            raise ApiError(f"Malformed device object on page {page}: {e}") from e

        more = len(devices) >= page_size
        total_pages = data.get("total_pages")
        if more and isinstance(total_pages, int) and page >= total_pages:
            more = False
        return PageResult(page=page, devices=devices, more=more)

    def iter_pages(self, page_size: int = DEFAULT_PAGE_SIZE) -> Iterator[PageResult]:
        if page_size < 1:
            raise ValueError("page_size must be positive")
        page = 1
        while True:
            logger.info("Fetching page %d with limit %d...", page, page_size)
            result = self._fetch_page(page, page_size)
            logger.info("Retrieved %d devices from page %d", len(result.devices), page)
            yield result
            if not result.more:
                break
            page += 1

    def fetch_all_devices(self, page_size: int = DEFAULT_PAGE_SIZE) -> List[Device]:
        devices: List[Device] = []
        for result in self.iter_pages(page_size):
            devices.extend(result.devices)
        logger.info("Retrieved %d total devices across all pages", len(devices))
        return devices


def connected_aps(devices: List[Device]) -> List[Device]:
    return [d for d in devices if d.connected and d.is_ap]


def count_aps(devices: List[Device]) -> int:
    return sum(1 for d in devices if d.is_ap)
