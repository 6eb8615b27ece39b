"""
Context configuration package.

This package provides:
- ContextConfigLoader for merging and publishing per-environment configuration
- ContextSource implementations backed by files or in-memory documents
"""

from .constants import (
    CONTEXT_FILE_ENV_VAR,
    DEFAULT_CONTEXT_FILE,
    MAX_CONTEXT_SIZE_BYTES,
    SAUCELABS_KEY,
    get_context_file_path,
)
from .loader import ContextConfigLoader
from .source import ContextSnapshot, ContextSource, DictContextSource, FileContextSource

__all__ = [
    "ContextConfigLoader",
    "ContextSnapshot",
    "ContextSource",
    "DictContextSource",
    "FileContextSource",
    "CONTEXT_FILE_ENV_VAR",
    "DEFAULT_CONTEXT_FILE",
    "MAX_CONTEXT_SIZE_BYTES",
    "SAUCELABS_KEY",
    "get_context_file_path",
]
