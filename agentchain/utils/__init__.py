"""
AgentChain Utilities

Common utilities used across the application.
"""

from .json_parser import (
    clean_json_string,
    extract_first_json_object,
    parse_json_object,
    strip_code_fences,
)

__all__ = [
    "clean_json_string",
    "extract_first_json_object",
    "parse_json_object",
    "strip_code_fences",
]
