from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class User:
    email: str = ""
    username: str = ""
    external_id: str = ""
    is_confirmed: bool = False


@dataclass(frozen=True)
class Session:
    """Payload of POST /sessions. The token is opaque; the remote side owns its expiry."""

    session_token: str = field(default="", repr=False)
    user: User = field(default_factory=User)
    context: str = ""
