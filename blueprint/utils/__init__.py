"""Utility functions for logging, AWS lookups and the lookup context."""

from .logging_config import get_logger, set_log_level
from .aws_helpers import convert_tags_to_dict, lookup_vpc

__all__ = ["get_logger", "set_log_level", "convert_tags_to_dict", "lookup_vpc"]
