from __future__ import annotations

import logging
import sqlite3
from typing import Any, Optional, Sequence

from .errors import PersistenceError
from .models import Device

logger = logging.getLogger(__name__)

COLUMNS = [
    "id", "config_mismatch", "connected", "description", "device_admin_state",
    "device_function", "hostname", "ip_address", "mac_address", "managed_by",
    "org_id", "product_type", "serial_number", "simulated", "software_version",
    "system_up_time",
]

CREATE_TABLE = """
CREATE TABLE IF NOT EXISTS devices (
    id INTEGER PRIMARY KEY,
    config_mismatch BOOLEAN,
    connected BOOLEAN,
    description TEXT,
    device_admin_state TEXT,
    device_function TEXT,
    hostname TEXT,
    ip_address TEXT,
    mac_address TEXT,
    managed_by TEXT,
    org_id INTEGER,
    product_type TEXT,
    serial_number TEXT,
    simulated BOOLEAN,
    software_version TEXT,
    system_up_time INTEGER,
    fetched_at DATETIME DEFAULT CURRENT_TIMESTAMP
)
"""


def _column_value(device: Device, key: str) -> Any:
    if key in ("id", "hostname", "connected", "device_function"):
        return getattr(device, key)
    v = device.raw.get(key)
    # nested objects/lists have no column type; keep scalars only
    if isinstance(v, (dict, list)):
        return None
    return v


class DeviceStore:
    # SQLite snapshot of the device inventory: `<name>.db`, table `devices`.
    # save_devices() replaces the previous snapshot in one transaction.

    def __init__(self, database_name: str = "xiq-db") -> None:
        self.path = database_name if database_name.endswith(".db") or database_name == ":memory:" else f"{database_name}.db"
        try:
            self.conn = sqlite3.connect(self.path)
            self.conn.execute(CREATE_TABLE)
            self.conn.commit()
        except sqlite3.Error as e:
            raise PersistenceError(f"Failed to open database: {e}", {"path": self.path}) from e

    def __enter__(self) -> "DeviceStore":
        return self

    def __exit__(self, *exc: Any) -> None:
        self.close()

    def close(self) -> None:
        self.conn.close()

    def save_devices(self, devices: Sequence[Device]) -> int:
        placeholders = ", ".join("?" for _ in COLUMNS)
        sql = f"INSERT INTO devices ({', '.join(COLUMNS)}) VALUES ({placeholders})"
        rows = [[_column_value(d, c) for c in COLUMNS] for d in devices]
        try:
            with self.conn:
                self.conn.execute("DELETE FROM devices")
                self.conn.executemany(sql, rows)
        except sqlite3.Error as e:
            raise PersistenceError(f"Failed to save devices: {e}", {"path": self.path}) from e
        logger.info("Saved %d devices to %s", len(rows), self.path)
        return len(rows)

    def count_devices(self) -> int:
        try:
            row: Optional[tuple] = self.conn.execute("SELECT COUNT(*) FROM devices").fetchone()
        except sqlite3.Error as e:
            raise PersistenceError(f"Failed to count devices: {e}", {"path": self.path}) from e
        return row[0] if row else 0
