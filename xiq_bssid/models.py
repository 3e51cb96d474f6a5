from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

AP_FUNCTION = "AP"
ACCESS_MODE = "access"


@dataclass(frozen=True)
class Device:
    id: int
    hostname: str
    connected: bool = False
    device_function: Optional[str] = None
    raw: Dict[str, Any] = field(default_factory=dict, compare=False, repr=False)

    @classmethod
    def from_api(cls, obj: Dict[str, Any]) -> "Device":
        # XIQ device objects: {"id": 9170..., "hostname": "...", "connected": true, "device_function": "AP", ...}
        dev_id = obj.get("id")
        if isinstance(dev_id, bool) or not isinstance(dev_id, int):
            try:
                dev_id = int(dev_id)
            except (TypeError, ValueError):
                raise ValueError(f"device object has no numeric id: {obj.get('id')!r}") from None
        return cls(
            id=dev_id,
            hostname=obj.get("hostname") or "unknown",
            connected=bool(obj.get("connected", False)),
            device_function=obj.get("device_function"),
            raw=dict(obj),
        )

    @property
    def is_ap(self) -> bool:
        return self.device_function == AP_FUNCTION


@dataclass(frozen=True)
class InterfaceRecord:
    device_id: int
    name: str
    mac: str
    mode: Optional[str] = None
    state: Optional[str] = None
    channel: Optional[str] = None
    vlan: Optional[str] = None
    radio: Optional[str] = None
    hive: Optional[str] = None
    ssid: Optional[str] = None

    @property
    def is_access(self) -> bool:
        return (self.mode or "").lower() == ACCESS_MODE

    def columns(self) -> List[Optional[str]]:
        return [
            self.name, self.mac, self.mode, self.state, self.channel,
            self.vlan, self.radio, self.hive, self.ssid,
        ]


@dataclass(frozen=True)
class CommandResult:
    device: Device
    output: Optional[str] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass(frozen=True)
class PageResult:
    page: int
    devices: List[Device]
    more: bool
