"""
Storage backends. Which one serves requests is a configuration choice only.
"""
import logging

from leadwell.config import STORAGE_BACKEND
from leadwell.errors import ConfigurationError
from leadwell.storage.base import Storage

logger = logging.getLogger('storage')


def build_storage(backend=None) -> Storage:
    """Instantiate the configured backend ('sql' or 'memory')."""
    backend = backend or STORAGE_BACKEND
    if backend == 'memory':
        from leadwell.storage.memory import MemoryStorage
        storage = MemoryStorage()
    elif backend == 'sql':
        from leadwell.storage.sql import SqlStorage
        storage = SqlStorage()
    else:
        raise ConfigurationError(f"Unknown storage backend '{backend}'")
    logger.info("Storage backend: %s", backend)
    return storage
