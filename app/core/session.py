from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, MutableMapping, Optional, TypedDict

from app.core.logger import logger


class UserRole(str, Enum):
    ADMIN = "admin"
    INFLUENCER = "influencer"
    BUYER = "buyer"


class SessionData(TypedDict, total=False):
    """Fields the cookie session may carry. Every key is optional."""

    admin_id: str
    influencer_id: str
    user_id: str
    user_role: str      # UserRole value
    session_id: str     # anonymous / cart session


SESSION_KEYS = ("admin_id", "influencer_id", "user_id", "user_role", "session_id")

# id key written for each principal kind
ROLE_ID_KEYS: Dict[UserRole, str] = {
    UserRole.ADMIN: "admin_id",
    UserRole.INFLUENCER: "influencer_id",
    UserRole.BUYER: "user_id",
}


@dataclass(frozen=True)
class Principal:
    role: UserRole
    id: str


def read_session(raw: MutableMapping[str, Any]) -> SessionData:
    data: SessionData = {}

    for key in SESSION_KEYS:
        value = raw.get(key)
        if value is None:
            continue
        if not isinstance(value, str):
            logger.warning(f"SESSION VALUE DROPPED | key={key} | type={type(value).__name__}")
            continue
        data[key] = value  # type: ignore[literal-required]

    role = data.get("user_role")
    if role is not None and role not in {r.value for r in UserRole}:
        logger.warning(f"SESSION ROLE DROPPED | user_role={role}")
        del data["user_role"]

    return data


def get_principal(raw: MutableMapping[str, Any]) -> Optional[Principal]:
    """
    Current principal of the session, or None for anonymous.

    Only the id stored under the key of ``user_role`` counts; ids of
    other kinds are ignored.
    """
    data = read_session(raw)
    role_value = data.get("user_role")

    if role_value is None:
        stray = [key for key in ROLE_ID_KEYS.values() if key in data]
        if stray:
            logger.warning(f"SESSION INCONSISTENT | ids without role | keys={stray}")
        return None

    role = UserRole(role_value)
    principal_id = data.get(ROLE_ID_KEYS[role])  # type: ignore[misc]
    if not principal_id:
        logger.warning(f"SESSION INCONSISTENT | role without id | user_role={role.value}")
        return None

    stray = [
        key for r, key in ROLE_ID_KEYS.items()
        if r is not role and key in data
    ]
    if stray:
        logger.warning(
            f"SESSION INCONSISTENT | foreign ids ignored | user_role={role.value} | keys={stray}"
        )

    return Principal(role=role, id=principal_id)


def set_principal(raw: MutableMapping[str, Any], principal: Principal) -> None:
    for key in ROLE_ID_KEYS.values():
        raw.pop(key, None)

    raw[ROLE_ID_KEYS[principal.role]] = principal.id
    raw["user_role"] = principal.role.value


def clear_principal(raw: MutableMapping[str, Any]) -> None:
    for key in ROLE_ID_KEYS.values():
        raw.pop(key, None)
    raw.pop("user_role", None)
