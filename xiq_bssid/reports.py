"""
Report writers for parsed interface records.

- bssids.txt       every interface, one section per device
- wifi-bssids.txt  access-mode interfaces of all devices, fixed width
- wifi-bssids.csv  same rows as wifi-bssids.txt, comma separated
- devices.json / full_cli.json raw dumps of the inventory and transcripts
"""

import csv
import io
import json
import os
from typing import Any, Dict, List, Mapping, Optional, Sequence

from .models import CommandResult, Device, InterfaceRecord
from .parser import access_only

GROUPED_FILE = "bssids.txt"
ACCESS_TXT_FILE = "wifi-bssids.txt"
ACCESS_CSV_FILE = "wifi-bssids.csv"
DEVICES_JSON_FILE = "devices.json"
CLI_JSON_FILE = "full_cli.json"

INTERFACE_COLUMNS = ["Name", "MAC", "Mode", "State", "Channel", "VLAN", "Radio", "Hive", "SSID"]
ACCESS_COLUMNS = ["Device", "DeviceID"] + INTERFACE_COLUMNS

GROUPED_ROW = "{:<12} {:<20} {:<8} {:<8} {:<12} {:<6} {:<8} {:<12} {}"
ACCESS_ROW = "{:<20} {:<20} {:<12} {:<20} {:<8} {:<8} {:<12} {:<6} {:<12} {:<12} {}"
GROUPED_RULE = "-" * 100
ACCESS_RULE = "-" * 140

DeviceRecords = Mapping[Device, Sequence[InterfaceRecord]]


def _txt(value: Optional[str]) -> str:
    return "-" if value is None else value


def _csv(value: Optional[str]) -> str:
    return "" if value is None else value


def render_grouped(device_records: DeviceRecords) -> str:
    lines: List[str] = []
    for device, records in device_records.items():
        if not records:
            continue
        lines.append(f"--- {device.hostname} (ID: {device.id}) ---")
        lines.append(GROUPED_ROW.format(*INTERFACE_COLUMNS))
        lines.append(GROUPED_RULE)
        for r in records:
            lines.append(GROUPED_ROW.format(*[_txt(v) for v in r.columns()]))
        lines.append("")
    return "\n".join(lines) + ("\n" if lines else "")


def _access_rows(device_records: DeviceRecords) -> List[List[Optional[str]]]:
    rows = []
    for device, records in device_records.items():
        for r in access_only(records):
            rows.append([device.hostname, str(device.id)] + r.columns())
    return rows


def render_access_table(device_records: DeviceRecords) -> str:
    lines = [ACCESS_ROW.format(*ACCESS_COLUMNS), ACCESS_RULE]
    for row in _access_rows(device_records):
        lines.append(ACCESS_ROW.format(*[_txt(v) for v in row]))
    return "\n".join(lines) + "\n"


def render_access_csv(device_records: DeviceRecords) -> str:
    buf = io.StringIO()
    w = csv.writer(buf, lineterminator="\n")
    w.writerow(ACCESS_COLUMNS)
    for row in _access_rows(device_records):
        w.writerow([_csv(v) for v in row])
    return buf.getvalue()


def _write(path: str, text: str) -> str:
    with open(path, "w", encoding="utf-8", newline="") as f:
        f.write(text)
    return path


def write_reports(out_dir: str, device_records: DeviceRecords) -> Dict[str, str]:
    os.makedirs(out_dir, exist_ok=True)
    return {
        "grouped": _write(os.path.join(out_dir, GROUPED_FILE), render_grouped(device_records)),
        "access_txt": _write(os.path.join(out_dir, ACCESS_TXT_FILE), render_access_table(device_records)),
        "access_csv": _write(os.path.join(out_dir, ACCESS_CSV_FILE), render_access_csv(device_records)),
    }


def write_devices_json(path: str, devices: Sequence[Device]) -> str:
    return _write(path, json.dumps([d.raw for d in devices], indent=2))


def write_cli_json(path: str, command: str, results: Sequence[CommandResult]) -> str:
    payload: List[Dict[str, Any]] = []
    for r in results:
        payload.append({
            "device_id": r.device.id,
            "hostname": r.device.hostname,
            "command": command,
            "output": r.output,
            "error": r.error,
        })
    return _write(path, json.dumps(payload, indent=2))
