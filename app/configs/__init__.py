from app.configs.settings import (
    DEFAULT_PAGE_SIZE,
    MAX_PAGE_SIZE,
    MAX_SECTION_IMAGES,
    Settings,
    settings,
)

__all__ = [
    "DEFAULT_PAGE_SIZE",
    "MAX_PAGE_SIZE",
    "MAX_SECTION_IMAGES",
    "Settings",
    "settings",
]
