# models/session.py
from dataclasses import dataclass, field
from enum import Enum
# Session model: the credential plus the operator profile behind it.

class SessionState(str, Enum):
    UNAUTHENTICATED = "UNAUTHENTICATED"
    AUTHENTICATING = "AUTHENTICATING"
    AUTHENTICATED = "AUTHENTICATED"


@dataclass
class UserProfile:
    id: str | None
    email: str = ""
    name: str = ""
    role: str = ""
    extra: dict = field(default_factory=dict)

    @classmethod
    def from_api(cls, data: dict) -> "UserProfile":
        known = {"id", "email", "name", "role"}
        return cls(
            id=data.get("id"),
            email=data.get("email") or "",
            name=data.get("name") or "",
            role=data.get("role") or "",
            extra={k: v for k, v in data.items() if k not in known},
        )


@dataclass(frozen=True)
class Session:
    credential: str | None = None
    profile: UserProfile | None = None
    state: SessionState = SessionState.UNAUTHENTICATED

    @property
    def is_authenticated(self) -> bool:
        return self.state == SessionState.AUTHENTICATED
