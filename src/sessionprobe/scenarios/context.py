"""Values threaded through scenario functions."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from sessionprobe._internal.config import SessionProbeConfig
    from sessionprobe._internal.types import Credentials


@dataclass(frozen=True)
class Accounts:
    """Principals and resources a scenario exercises.

    Attributes:
        user: Credentials of a principal allowed on ``user_path`` only.
        admin: Credentials of a principal allowed on ``admin_path``.
        public_path: Resource reachable without authentication.
        user_path: Resource requiring any authenticated principal.
        admin_path: Resource requiring the admin principal.
    """

    user: Credentials = ("user", "user")
    admin: Credentials = ("admin", "admin")
    public_path: str = "/"
    user_path: str = "/user"
    admin_path: str = "/admin"

    @classmethod
    def from_config(cls, config: SessionProbeConfig) -> Accounts:
        return cls(user=config.user, admin=config.admin)


@dataclass
class SessionHolder:
    """The session token a scenario keeps presenting.

    A scenario captures a token once and presents it on every later step,
    whatever new session the server tries to hand out in between.
    """

    token: str | None = None
