"""Exit codes for the gpothos commands.

- 0: Success
- 3: Invalid usage (bad arguments, broken config)
- 4: Bootstrap failure (unsupported platform, download or write failed)
- 127: The installed binary could not be started

The launcher otherwise exits with the delegated binary's own exit code.
"""

from __future__ import annotations

EXIT_SUCCESS = 0
EXIT_INVALID_USAGE = 3
EXIT_BOOTSTRAP_FAILURE = 4
EXIT_SPAWN_FAILED = 127
