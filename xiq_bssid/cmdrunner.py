from __future__ import annotations

import json
import logging
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import Any, Dict, List, Optional, Sequence

from .errors import ApiError, AuthError, XIQError
from .models import CommandResult, Device
from .xiq_client import XIQClient

logger = logging.getLogger(__name__)

CLI_PATH = "/devices/:cli"
DEFAULT_WORKERS = 10


def send_cli_command(client: XIQClient, device_id: int, command: str) -> str:
    # Run one CLI command on one device.
    # Endpoint: POST /devices/:cli -> {"device_cli_outputs": {"<id>": [{"output": "..."}]}}
    body = {"devices": {"ids": [device_id]}, "clis": [command]}
    data = client.post(CLI_PATH, body)
    outputs = data.get("device_cli_outputs") if isinstance(data, dict) else None
    if not isinstance(outputs, dict):
        raise ApiError("No device_cli_outputs in CLI response", details={"device_id": device_id})
    if str(device_id) not in outputs:
        raise ApiError("Device missing from CLI response", details={"device_id": device_id})
    return _output_text(outputs[str(device_id)])


def _output_text(value: Any) -> str:
    # Output shapes seen: list of {"output": "..."} objects, a bare string, or some other JSON.
    if isinstance(value, list):
        parts = []
        for item in value:
            if isinstance(item, dict) and isinstance(item.get("output"), str):
                parts.append(item["output"])
            elif isinstance(item, str):
                parts.append(item)
        return "\n".join(parts)
    if isinstance(value, str):
        return value
    return json.dumps(value)


class CommandDispatcher:
    """
    Sends one CLI command to every connected device through a bounded thread pool.

    A device that fails (timeout, rejected command, odd response) yields a
    CommandResult carrying `error`; the rest of the batch keeps going.
    An AuthError is the exception: it cancels what is still queued and is raised.
    Results land in one slot per target, so the returned list follows the
    dispatch order of the connected devices.
    """

    def __init__(self, client: XIQClient, workers: int = DEFAULT_WORKERS) -> None:
        if workers < 1:
            raise ValueError("workers must be positive")
        self.client = client
        self.workers = workers

    def _run_one(self, device: Device, command: str) -> CommandResult:
        try:
            output = send_cli_command(self.client, device.id, command)
        except AuthError:
            raise
        except XIQError as e:
            logger.warning("Command failed on %s (ID: %s): %s", device.hostname, device.id, e)
            return CommandResult(device=device, error=str(e))
        return CommandResult(device=device, output=output)

    def run_command(self, command: str, devices: Sequence[Device]) -> List[CommandResult]:
        targets = [d for d in devices if d.connected]
        skipped = len(devices) - len(targets)
        if skipped:
            logger.info("Skipping %d disconnected device(s)", skipped)
        if not targets:
            return []

        slots: List[Optional[CommandResult]] = [None] * len(targets)
        with ThreadPoolExecutor(max_workers=min(self.workers, len(targets))) as ex:
            futs = {ex.submit(self._run_one, d, command): i for i, d in enumerate(targets)}
            for fut in as_completed(futs):
                i = futs[fut]
                try:
                    slots[i] = fut.result()
                except AuthError:
                    # credentials are gone for every device; stop the batch
                    logger.error("Authentication failed on device %s, aborting dispatch", targets[i].id)
                    for pending in futs:
                        pending.cancel()
                    raise
                except Exception as e:
                    # anything not already mapped by the client (bugs, odd payloads)
                    logger.exception("Unhandled error on device %s", targets[i].id)
                    slots[i] = CommandResult(device=targets[i], error=f"Unhandled error: {e}")

        return [r for r in slots if r is not None]


def results_by_id(results: Sequence[CommandResult]) -> Dict[int, CommandResult]:
    return {r.device.id: r for r in results}
