"""Default configuration values.

DEFAULT_CONFIG is a plain dict so it can be fed straight into deep_merge,
which copies its inputs.
"""

from typing import Any

from bmgit.repository import DEFAULT_AUTHOR_EMAIL, DEFAULT_AUTHOR_NAME

ENV_PREFIX = "BMGIT_"

DEFAULT_CONFIG: dict[str, Any] = {  # pyright: ignore[reportExplicitAny]
    "user": {
        "name": DEFAULT_AUTHOR_NAME,
        "email": DEFAULT_AUTHOR_EMAIL,
    },
    "tracker": {
        "auto_commit": True,
        "commit_delay": 1.0,
        "history_limit": 100,
        "bookmarks_file": "",
    },
    "storage": {
        "path": "",
    },
    "logging": {
        "level": "info",
        "format": "json",
        "file": "",
    },
}
