"""Shared type aliases for SessionProbe."""

from __future__ import annotations

# HTTP headers dictionary.
Headers = dict[str, str]

# HTTP Basic credentials (username, password).
Credentials = tuple[str, str]
