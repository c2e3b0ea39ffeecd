"""

    Configuration data

    This module reads process-level configuration parameters
    from environment variables. Database settings are read by
    bookshelf.db.config.

"""

from __future__ import annotations

import os


# Are we running in a local development environment or on a GAE server?
running_local: bool = os.environ.get("SERVER_SOFTWARE", "").startswith("Development")

# Root logging level
LOG_LEVEL: str = os.environ.get("LOG_LEVEL", "INFO").upper()
