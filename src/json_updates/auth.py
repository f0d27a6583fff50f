"""Access checks for json-updates writes.

The token travels in the request body, not a header, so the check runs
inside the write pipeline rather than as a FastAPI dependency.
Token first, collection prefix second. The first failure wins.
"""

from __future__ import annotations

import hmac
from typing import Callable

from json_updates.errors import ForbiddenError, UnauthorizedError

AccessChecker = Callable[[str, str], None]


def make_access_checker(expected_token: str, collections_prefix: str) -> AccessChecker:
    """Return a callable that validates (token, collection) or raises."""

    def check_access(token: str, collection: str) -> None:
        if not hmac.compare_digest(token.encode(), expected_token.encode()):
            raise UnauthorizedError()
        if not collection.startswith(collections_prefix):
            raise ForbiddenError()

    return check_access
