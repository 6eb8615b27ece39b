"""
Context configuration constants.
"""

import os

# Top-level key of the environment-independent SauceLabs overlay
SAUCELABS_KEY = "_saucelabs"

# Environment variable overriding the context file location
CONTEXT_FILE_ENV_VAR = "WEBINFRA_CONTEXT_FILE"

# Context file used when no path is given, relative to the working directory
DEFAULT_CONTEXT_FILE = os.path.join("src", "test", "resources", "contexts", "context.json")

# Maximum context file size (10MB)
MAX_CONTEXT_SIZE_BYTES = 10 * 1024 * 1024


def get_context_file_path() -> str:
    """Return the context file path, honouring WEBINFRA_CONTEXT_FILE."""
    return os.environ.get(CONTEXT_FILE_ENV_VAR) or DEFAULT_CONTEXT_FILE
