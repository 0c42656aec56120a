# campus_market/core/security.py
import hmac
from enum import Enum
from typing import Optional

from campus_market.core.errors import Forbidden

ADMIN_HEADER = "x-admin-password"


class Decision(str, Enum):
    ALLOW = "allow"
    DENY = "deny"


class AccessGuard:
    """
    Shared-secret check for mutating requests.

    The configured secret is handed in once at start-up; the guard keeps no
    other state (no rate limiting or lockout).
    """

    def __init__(self, secret: str):
        self._secret = secret or ""

    def check(self, claimed: Optional[str]) -> Decision:
        if not claimed or not self._secret:
            return Decision.DENY
        if hmac.compare_digest(claimed.encode("utf-8"), self._secret.encode("utf-8")):
            return Decision.ALLOW
        return Decision.DENY

    def require(self, claimed: Optional[str]) -> None:
        """Raise Forbidden unless `claimed` matches the secret."""
        if self.check(claimed) is Decision.DENY:
            raise Forbidden()
