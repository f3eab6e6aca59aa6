from .data_storage import DataStorage, ConfigManager, Logger, compact
from .normalizer import (
    parse_amount,
    strip_digits,
    extract_neighborhood,
    is_content_image,
    merge_images,
    first_present,
)

__all__ = [
    "DataStorage",
    "ConfigManager",
    "Logger",
    "compact",
    "parse_amount",
    "strip_digits",
    "extract_neighborhood",
    "is_content_image",
    "merge_images",
    "first_present",
]
