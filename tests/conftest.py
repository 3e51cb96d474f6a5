"""
Shared fixtures: sample HiveOS transcripts, device objects and a fake XIQ client.
"""

import pytest
from typing import Any, Callable, Dict, List, Optional

from xiq_bssid.models import Device


SHOW_INTERFACE = """\
Name         MAC addr        Mode      State Chan(Width) VLAN  Radio   Hive      SSID
-----------  --------------  --------  ----- ----------- ----  ------  --------  --------------
Mgt0         4018:b1d0:5c00  -         U     -           1     -       MainHive  -
Eth0         4018:b1d0:5c01  backhaul  U     -           1     -       MainHive  -
Wifi0        4018:b1d0:5c10  access    U     6(20)       -     wifi0   MainHive  -
Wifi0.1      4018:b1d0:5c14  access    U     6(20)       10    wifi0   MainHive  Corporate-WiFi
Wifi1        4018:b1d0:5c20  access    U     36(80)      -     wifi1   MainHive  -
Wifi1.1      4018:b1d0:5c24  access    U     36(80)      10    wifi1   MainHive  Corporate-WiFi
"""


def make_api_device(dev_id: int, hostname: str = "", connected: bool = True, function: str = "AP") -> Dict[str, Any]:
    return {
        "id": dev_id,
        "hostname": hostname or f"ap-{dev_id}",
        "connected": connected,
        "device_function": function,
        "ip_address": f"10.0.0.{dev_id % 250}",
        "serial_number": f"SN{dev_id:06d}",
        "product_type": "AP_410C",
        "software_version": "10.6.1.0",
        "simulated": False,
        "org_id": 42,
        "locations": [{"id": 1, "name": "HQ"}],
    }


class FakeClient:
    """Stands in for XIQClient: canned pages for GET, a callable for POST."""

    def __init__(
        self,
        pages: Optional[List[Any]] = None,
        on_post: Optional[Callable[[str, Dict[str, Any]], Any]] = None,
    ):
        self.pages = list(pages or [])
        self.on_post = on_post
        self.get_calls: List[Dict[str, Any]] = []
        self.post_calls: List[Dict[str, Any]] = []

    def get(self, path, params=None):
        self.get_calls.append({"path": path, "params": dict(params or {})})
        item = self.pages.pop(0)
        if isinstance(item, Exception):
            raise item
        return item

    def post(self, path, json_body):
        self.post_calls.append({"path": path, "body": json_body})
        return self.on_post(path, json_body)


@pytest.fixture
def show_interface_output() -> str:
    return SHOW_INTERFACE


@pytest.fixture
def ap_devices() -> List[Device]:
    return [Device.from_api(make_api_device(i)) for i in (101, 102, 103)]
