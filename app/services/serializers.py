"""
Response serializers for user-like entities.

Every account table stores a bcrypt hash in ``password``. Handlers pass
rows through these functions before returning them so the hash never
leaves the process. ``None`` stays ``None``.
"""
from typing import Any, Dict, Mapping, Optional, Union

from sqlalchemy import inspect

from app.db.base import Base
from app.models.users import Admin, Influencer, User

PASSWORD_FIELD = "password"

SerializedBuyer = Dict[str, Any]
SerializedInfluencer = Dict[str, Any]
SerializedAdmin = Dict[str, Any]

Entity = Union[Mapping[str, Any], Base]


def _entity_fields(entity: Entity) -> Mapping[str, Any]:
    if isinstance(entity, Mapping):
        return entity
    if isinstance(entity, Base):
        return {
            attr.key: getattr(entity, attr.key)
            for attr in inspect(entity).mapper.column_attrs
        }
    raise TypeError(
        f"cannot serialize {type(entity).__name__}: expected a mapping or a model instance"
    )


def omit_password(entity: Entity) -> Dict[str, Any]:
    return {
        key: value
        for key, value in _entity_fields(entity).items()
        if key != PASSWORD_FIELD
    }


def serialize_buyer(buyer: Optional[Union[User, Mapping[str, Any]]]) -> Optional[SerializedBuyer]:
    if buyer is None:
        return None
    return omit_password(buyer)


def serialize_influencer(
    influencer: Optional[Union[Influencer, Mapping[str, Any]]]
) -> Optional[SerializedInfluencer]:
    if influencer is None:
        return None
    return omit_password(influencer)


def serialize_admin(admin: Optional[Union[Admin, Mapping[str, Any]]]) -> Optional[SerializedAdmin]:
    if admin is None:
        return None
    return omit_password(admin)
