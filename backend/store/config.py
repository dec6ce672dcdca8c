from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

# Load .env from project root
load_dotenv(Path(__file__).resolve().parent.parent.parent / ".env")


@dataclass(frozen=True)
class StoreConfig:
    url: str = os.getenv("SUPABASE_URL", "")
    api_key: str = os.getenv("SUPABASE_ANON_KEY", "")
    table: str = os.getenv("SUPABASE_TABLE", "restaurants")
    # parsed when the gateway is built
    timeout: float | str = os.getenv("SUPABASE_TIMEOUT", "10")

    @property
    def rest_url(self) -> str:
        return f"{self.url.rstrip('/')}/rest/v1/{self.table}"


DEFAULT_STORE_CONFIG = StoreConfig()
