from resolver_status.db.config import (
    ConfigurationError,
    MissingConfigurationError,
    NotionConfig,
    get_notion_config,
)
from resolver_status.db.memory import InMemoryTracker, make_page
from resolver_status.db.notion import NotionTracker

__all__ = [
    "ConfigurationError",
    "InMemoryTracker",
    "MissingConfigurationError",
    "NotionConfig",
    "NotionTracker",
    "get_notion_config",
    "make_page",
]
