"""
Infrastructure layer - storage backends, configuration and logging.
"""

from rawsync.infrastructure.config_loader import ConfigLoader
from rawsync.infrastructure.excel_storage import WorkbookStorage
from rawsync.infrastructure.memory_storage import InMemoryStorage

__all__ = ["ConfigLoader", "InMemoryStorage", "WorkbookStorage"]
