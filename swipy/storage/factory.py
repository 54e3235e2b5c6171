from __future__ import annotations

import logging

from .base import DocumentStore
from .config import DEFAULT_STORE_CONFIG, StoreConfig
from .memory import MemoryStore

logger = logging.getLogger(__name__)


def build_store(config: StoreConfig = DEFAULT_STORE_CONFIG) -> DocumentStore:
    """Return a MongoStore when ``MONGO_URI`` is configured, else a MemoryStore."""
    if config.use_mongo:
        from .mongo import MongoStore

        logger.info("Using MongoDB database '%s'", config.database_name)
        return MongoStore(config)
    logger.warning("MONGO_URI not set, using in-memory store (data is not persisted)")
    return MemoryStore()
