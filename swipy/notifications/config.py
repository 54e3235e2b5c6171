from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

load_dotenv(Path(__file__).resolve().parent.parent.parent / ".env")


@dataclass(frozen=True)
class PushConfig:
    url: str = os.getenv("EXPO_PUSH_URL", "https://exp.host/--/api/v2/push/send")
    access_token: str = os.getenv("EXPO_ACCESS_TOKEN", "")
    timeout: float = float(os.getenv("PUSH_TIMEOUT", "10"))
    chunk_size: int = 100
    enabled: bool = os.getenv("PUSH_ENABLED", "true").lower() == "true"


DEFAULT_PUSH_CONFIG = PushConfig()
