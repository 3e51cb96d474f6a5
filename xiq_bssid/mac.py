import re

from .errors import FormatError

_SEPARATORS = re.compile(r"[.:\-]")
_HEX12 = re.compile(r"^[0-9A-Fa-f]{12}$")


def normalize_mac(raw: str) -> str:
    """
    Canonicalize a MAC address to XX:XX:XX:XX:XX:XX (uppercase).

    Accepts 0011.2233.4455, 00-11-22-33-44-55, 00:11:22:33:44:55,
    001122334455 and HiveOS 0011:2233:4455, in any letter case.
    Raises FormatError unless exactly 12 hex digits remain once the
    separators are stripped.
    """
    if raw is None:
        raise FormatError("MAC address is empty")
    hex_only = _SEPARATORS.sub("", str(raw).strip())
    if not _HEX12.match(hex_only):
        raise FormatError("Not a MAC address", {"value": raw})
    hex_only = hex_only.upper()
    return ":".join(hex_only[i:i + 2] for i in range(0, 12, 2))


def is_valid_mac(raw: str) -> bool:
    try:
        normalize_mac(raw)
    except FormatError:
        return False
    return True
