"""
Parser for HiveOS `show interface` output as returned by the XIQ CLI endpoint.

Typical transcript:

    Name       MAC addr        Mode      State Chan(Width) VLAN Radio  Hive   SSID
    ---------- --------------  --------  ----- ----------- ---- -----  -----  ------
    Mgt0       4018:b1d0:5c00  -         U     -           1    -      hive0  -
    Wifi0.1    4018:b1d0:5c14  access    U     36(80)      10   wifi0  hive0  Corp

Columns drift with the content, so lines are split on whitespace runs rather
than sliced at fixed offsets. A `-` column means "absent".
"""

import logging
import re
from typing import Iterable, List, Optional

from .errors import FormatError
from .mac import normalize_mac
from .models import InterfaceRecord

logger = logging.getLogger(__name__)

ABSENT = "-"

_LINE_RE = re.compile(
    r"^(?P<name>\S+)\s+"
    r"(?P<mac>\S+)\s+"
    r"(?P<mode>\S+)\s+"
    r"(?P<state>\S+)\s+"
    r"(?P<channel>\S+)\s+"
    r"(?P<vlan>\S+)\s+"
    r"(?P<radio>\S+)\s+"
    r"(?P<hive>\S+)"
    r"(?:\s+(?P<ssid>\S.*?))?\s*$"
)
_HEADER_RE = re.compile(r"^name\s|mac\s+addr", re.IGNORECASE)
_LABELED_MAC_RE = re.compile(
    r"\b([0-9A-Fa-f]{2}(?:[:\-][0-9A-Fa-f]{2}){5}"
    r"|[0-9A-Fa-f]{4}\.[0-9A-Fa-f]{4}\.[0-9A-Fa-f]{4}"
    r"|[0-9A-Fa-f]{4}:[0-9A-Fa-f]{4}:[0-9A-Fa-f]{4})\b"
)


def _value(text: Optional[str]) -> Optional[str]:
    if text is None:
        return None
    text = text.strip()
    if not text or text == ABSENT:
        return None
    return text


def _is_skippable(line: str) -> bool:
    # blank, column titles, dash/equals separators, "--- host (ID: n) ---" banners
    if not line:
        return True
    if line[0] in "-=":
        return True
    return bool(_HEADER_RE.search(line))


def parse_line(line: str, device_id: int = 0) -> Optional[InterfaceRecord]:
    """Parse one interface line; None for anything that is not one."""
    stripped = (line or "").strip()
    if _is_skippable(stripped):
        return None

    m = _LINE_RE.match(stripped)
    if not m:
        return None

    try:
        mac = normalize_mac(m.group("mac"))
    except FormatError as e:
        logger.warning("Dropping interface line for device %s: %s | %s", device_id, e, stripped)
        return None

    return InterfaceRecord(
        device_id=device_id,
        name=m.group("name"),
        mac=mac,
        mode=_value(m.group("mode")),
        state=_value(m.group("state")),
        channel=_value(m.group("channel")),
        vlan=_value(m.group("vlan")),
        radio=_value(m.group("radio")),
        hive=_value(m.group("hive")),
        ssid=_value(m.group("ssid")),
    )


def parse_transcript(device_id: int, raw_text: Optional[str]) -> List[InterfaceRecord]:
    records: List[InterfaceRecord] = []
    if not raw_text:
        return records
    for line in raw_text.splitlines():
        record = parse_line(line, device_id)
        if record is not None:
            records.append(record)
    logger.debug("Device %s: %d interface record(s)", device_id, len(records))
    return records


def access_only(records: Iterable[InterfaceRecord]) -> List[InterfaceRecord]:
    return [r for r in records if r.is_access]


def extract_bssids(raw_text: Optional[str], records: Optional[Iterable[InterfaceRecord]] = None) -> List[str]:
    # Parsed interface MACs first, then any MAC on a line labelled "BSSID"
    # (some firmware prints "BSSID: aa:bb:..." blocks instead of the table).
    # Pass `records` when the transcript was already parsed.
    if records is None:
        records = parse_transcript(0, raw_text)
    bssids = [r.mac for r in records]
    for line in (raw_text or "").splitlines():
        if "bssid" not in line.lower():
            continue
        for found in _LABELED_MAC_RE.findall(line):
            mac = normalize_mac(found)
            if mac not in bssids:
                bssids.append(mac)
    return bssids
