from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

load_dotenv(Path(__file__).resolve().parent.parent.parent / ".env")


@dataclass(frozen=True)
class StoreConfig:
    mongo_uri: str = os.getenv("MONGO_URI", "")
    database_name: str = os.getenv("MONGO_DB", "swipy")

    @property
    def use_mongo(self) -> bool:
        return bool(self.mongo_uri)


DEFAULT_STORE_CONFIG = StoreConfig()
