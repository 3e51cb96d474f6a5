import os
from typing import Any, Dict, Optional

import yaml
from dotenv import load_dotenv

from .errors import ConfigError
from .xiq_client import DEFAULT_BASE_URL

load_dotenv()

DEFAULTS: Dict[str, Any] = {
    "page_size": 100,
    "workers": 10,
    "command": "show interface",
    "output_dir": ".",
    "database": "xiq-db",
}


def env_bool(key: str, default: bool=False) -> bool:
    v = os.getenv(key, str(default)).strip().lower()
    return v in ("1", "true", "yes", "on")


class Settings:
    def __init__(self, settings_path: str = "settings.yaml") -> None:
        self.base_url = os.getenv("XIQ_BASE_URL") or DEFAULT_BASE_URL
        self.username = os.getenv("XIQ_USERNAME")
        self.password = os.getenv("XIQ_PASSWORD")
        self.verify_ssl = env_bool("XIQ_VERIFY_SSL", True)
        self.timeout = int(os.getenv("XIQ_TIMEOUT", "30"))
        self.http_proxy = os.getenv("HTTP_PROXY")
        self.https_proxy = os.getenv("HTTPS_PROXY")

        data: Dict[str, Any] = {}
        if settings_path and os.path.exists(settings_path):
            with open(settings_path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        self.global_cfg = {**DEFAULTS, **(data.get("global") or {})}

        self.page_size = int(self.global_cfg["page_size"])
        self.workers = int(self.global_cfg["workers"])
        self.command = str(self.global_cfg["command"])
        self.output_dir = str(self.global_cfg["output_dir"])
        self.database = str(self.global_cfg["database"])

    def validate(self) -> None:
        missing = [k for k, v in (("XIQ_USERNAME", self.username), ("XIQ_PASSWORD", self.password)) if not v]
        if missing:
            raise ConfigError(f"{', '.join(missing)} environment variable not set")
        if self.page_size < 1 or self.workers < 1:
            raise ConfigError("page_size and workers must be positive", {"page_size": self.page_size, "workers": self.workers})

    def proxies(self) -> Optional[Dict[str, str]]:
        proxies = {}
        if self.http_proxy:
            proxies["http"] = self.http_proxy
        if self.https_proxy:
            proxies["https"] = self.https_proxy
        return proxies if proxies else None
