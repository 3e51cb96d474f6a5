#!/usr/bin/env python
# List all XIQ devices and (optionally) write CSV.
import argparse, csv
from xiq_bssid.config import Settings
from xiq_bssid.inventory import DevicePager
from xiq_bssid.xiq_client import XIQClient

def main():
    parser = argparse.ArgumentParser()
    parser.add_argument("--csv", default=None, help="Path to write inventory CSV (optional)")
    parser.add_argument("--limit", type=int, default=10, help="Print preview count (default: 10)")
    args = parser.parse_args()

    s = Settings()
    s.validate()
    client = XIQClient(
        base_url=s.base_url, username=s.username, password=s.password,
        verify=s.verify_ssl, timeout=s.timeout, proxies=s.proxies()
    )
    client.login()
    devices = DevicePager(client).fetch_all_devices(s.page_size)
    print(f"Devices: {len(devices)}")
    for d in devices[: args.limit]:
        print(d.hostname, d.raw.get("ip_address"), d.device_function, "connected" if d.connected else "disconnected")

    if args.csv:
        import os
        os.makedirs(os.path.dirname(os.path.abspath(args.csv)), exist_ok=True)
        with open(args.csv, "w", newline="", encoding="utf-8") as f:
            w = csv.writer(f)
            w.writerow(["hostname","ip","function","connected","productType","softwareVersion","serialNumber","id"])
            for d in devices:
                w.writerow([
                    d.hostname,
                    d.raw.get("ip_address"),
                    d.device_function,
                    d.connected,
                    d.raw.get("product_type"),
                    d.raw.get("software_version"),
                    d.raw.get("serial_number"),
                    d.id,
                ])
        print(f"Wrote CSV: {args.csv}")

if __name__ == "__main__":
    main()
