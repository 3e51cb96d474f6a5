#!/usr/bin/env python3
"""
xiq-bssid: pull the device inventory from ExtremeCloud IQ, run a CLI command
(default `show interface`) on every connected AP and write BSSID reports.

Usage:
    xiq-bssid                       # show interface on all connected APs
    xiq-bssid show interface wifi0  # any other command
    xiq-bssid --out reports --workers 20 --no-db

Credentials come from XIQ_USERNAME / XIQ_PASSWORD (environment or .env).
"""

import argparse
import logging
import os
import sys
from typing import Dict, List, Optional, Sequence

from .cmdrunner import CommandDispatcher
from .config import Settings
from .errors import XIQError
from .inventory import DevicePager, connected_aps, count_aps
from .models import CommandResult, Device, InterfaceRecord
from .parser import access_only, extract_bssids, parse_transcript
from .reports import CLI_JSON_FILE, DEVICES_JSON_FILE, write_cli_json, write_devices_json, write_reports
from .store import DeviceStore
from .xiq_client import XIQClient


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(description="Collect AP interface/BSSID inventory from ExtremeCloud IQ.")
    ap.add_argument("command", nargs="*", help="CLI command to run (default from settings: 'show interface')")
    ap.add_argument("--settings", default="settings.yaml", help="Path to settings YAML (optional file)")
    ap.add_argument("--out", default=None, help="Output folder for reports")
    ap.add_argument("--workers", type=int, default=None, help="Parallel CLI calls (default: 10)")
    ap.add_argument("--page-size", type=int, default=None, help="Devices per inventory page (default: 100)")
    ap.add_argument("--all-devices", action="store_true", help="Target every connected device, not only APs")
    ap.add_argument("--no-db", action="store_true", help="Skip saving the inventory to SQLite")
    ap.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    return ap


def collect_records(results: Sequence[CommandResult]) -> Dict[Device, List[InterfaceRecord]]:
    # dispatch order in, dispatch order out; failed devices get an empty list
    device_records: Dict[Device, List[InterfaceRecord]] = {}
    for r in results:
        device_records[r.device] = parse_transcript(r.device.id, r.output) if r.ok else []
    return device_records


def print_summary(results: Sequence[CommandResult], device_records: Dict[Device, List[InterfaceRecord]]) -> None:
    print("\n=== CLI Command Results ===\n")
    for r in results:
        dev = r.device
        if not r.ok:
            continue
        records = device_records.get(dev, [])
        bssids = extract_bssids(r.output, records)
        print(f"  {dev.hostname} (ID: {dev.id}): Found {len(records)} interface(s), {len(bssids)} BSSID(s)")

    failed = [r for r in results if not r.ok]
    if failed:
        print(f"\n[!] {len(failed)} device(s) failed:")
        for r in failed:
            print(f"  - {r.device.hostname} (ID: {r.device.id}): {r.error}")


def run(settings: Settings, command: str, out_dir: str, all_devices: bool = False, use_db: bool = True) -> int:
    client = XIQClient(
        base_url=settings.base_url, username=settings.username, password=settings.password,
        verify=settings.verify_ssl, timeout=settings.timeout, proxies=settings.proxies()
    )
    print("Authenticating with ExtremeCloud IQ...")
    client.login()
    print("[+] Authentication successful.\n")

    print("Fetching devices...")
    devices = DevicePager(client).fetch_all_devices(settings.page_size)
    os.makedirs(out_dir, exist_ok=True)
    write_devices_json(os.path.join(out_dir, DEVICES_JSON_FILE), devices)
    print(f"[+] {len(devices)} devices saved to {DEVICES_JSON_FILE}")

    if use_db:
        with DeviceStore(os.path.join(out_dir, settings.database)) as store:
            store.save_devices(devices)
            print("\n=== Device Import Summary ===")
            print(f"Total devices imported: {len(devices)}")
            print(f"Devices with device_function 'AP': {count_aps(devices)}")
            print(f"Database now contains {store.count_devices()} devices")
            print("============================\n")

    targets = [d for d in devices if d.connected] if all_devices else connected_aps(devices)
    if not targets:
        print("No connected APs found.")
        return 0

    print(f"=== Found {len(targets)} connected device(s) ===")
    for d in targets:
        print(f"  - {d.hostname} (ID: {d.id})")
    print(f"\n[>] Sending command '{command}' to {len(targets)} device(s)...")

    results = CommandDispatcher(client, workers=settings.workers).run_command(command, targets)
    device_records = collect_records(results)

    paths = write_reports(out_dir, device_records)
    write_cli_json(os.path.join(out_dir, CLI_JSON_FILE), command, results)
    print_summary(results, device_records)

    total = sum(len(v) for v in device_records.values())
    total_access = sum(len(access_only(v)) for v in device_records.values())
    print(f"\n[+] CLI results saved to {CLI_JSON_FILE}")
    print(f"[+] Interfaces saved to {paths['grouped']} ({total} BSSIDs found)")
    print(f"[+] Access mode BSSIDs saved to {paths['access_txt']} and {paths['access_csv']} ({total_access} entries)")
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        settings = Settings(args.settings)
        if args.workers is not None:
            settings.workers = args.workers
        if args.page_size is not None:
            settings.page_size = args.page_size
        settings.validate()
        command = " ".join(args.command) if args.command else settings.command
        out_dir = args.out or settings.output_dir
        return run(settings, command, out_dir, all_devices=args.all_devices, use_db=not args.no_db)
    except XIQError as e:
        print(f"[ERROR] {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    try:
        sys.exit(main())
    except KeyboardInterrupt:
        print("\nCancelled by user.")
        sys.exit(130)
