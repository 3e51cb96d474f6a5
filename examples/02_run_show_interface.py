#!/usr/bin/env python
# Run `show interface` on one device and print the parsed interfaces.
import argparse
from xiq_bssid.cmdrunner import send_cli_command
from xiq_bssid.config import Settings
from xiq_bssid.parser import parse_transcript
from xiq_bssid.xiq_client import XIQClient

def main():
    parser = argparse.ArgumentParser()
    parser.add_argument("--device", required=True, type=int, help="XIQ device id")
    parser.add_argument("--command", default="show interface", help="CLI command (default: show interface)")
    parser.add_argument("--raw", action="store_true", help="Print the raw transcript too")
    args = parser.parse_args()

    s = Settings()
    s.validate()
    client = XIQClient(
        base_url=s.base_url, username=s.username, password=s.password,
        verify=s.verify_ssl, timeout=s.timeout, proxies=s.proxies()
    )
    client.login()

    output = send_cli_command(client, args.device, args.command)
    if args.raw:
        print(output)
    for r in parse_transcript(args.device, output):
        print(f"{r.name:12} {r.mac:20} {r.mode or '-':8} {r.channel or '-':12} {r.ssid or '-'}")

if __name__ == "__main__":
    main()
