from typing import Optional

from fastapi import HTTPException
from sqlalchemy.orm import Session

from app.core.logger import logger
from app.core.security import hash_password
from app.core.session import Principal, UserRole
from app.models.users import Admin, Influencer, User
from app.services.serializers import (
    serialize_admin,
    serialize_buyer,
    serialize_influencer,
)


def get_buyer(db: Session, user_id: str) -> Optional[User]:
    return db.query(User).filter(User.id == user_id).first()


def get_influencer(db: Session, influencer_id: str) -> Optional[Influencer]:
    return db.query(Influencer).filter(Influencer.id == influencer_id).first()


def get_admin(db: Session, admin_id: str) -> Optional[Admin]:
    return db.query(Admin).filter(Admin.id == admin_id).first()


_LOOKUPS = {
    UserRole.BUYER: (get_buyer, serialize_buyer),
    UserRole.INFLUENCER: (get_influencer, serialize_influencer),
    UserRole.ADMIN: (get_admin, serialize_admin),
}


def get_principal_entity(db: Session, principal: Optional[Principal]):
    """Row behind the session principal, or None when anonymous or deleted."""
    if principal is None:
        return None

    lookup, _ = _LOOKUPS[principal.role]
    entity = lookup(db, principal.id)
    if entity is None:
        logger.warning(
            f"PRINCIPAL NOT FOUND | role={principal.role.value} | id={principal.id}"
        )
    return entity


def serialize_principal_entity(db: Session, principal: Optional[Principal]):
    entity = get_principal_entity(db, principal)
    if entity is None:
        return None

    _, serialize = _LOOKUPS[principal.role]
    return serialize(entity)


# =====================================================
# CREATION
# =====================================================

def _ensure_phone_free(db: Session, model, phone: str):
    if db.query(model).filter(model.phone == phone).first():
        raise HTTPException(400, f"{model.__name__} with this phone already exists")


def _hashed(password: Optional[str]) -> Optional[str]:
    return hash_password(password) if password else None


def create_buyer(db: Session, phone: str, password: Optional[str] = None, **fields) -> User:
    _ensure_phone_free(db, User, phone)

    buyer = User(phone=phone, password=_hashed(password), **fields)
    db.add(buyer)
    db.commit()
    db.refresh(buyer)
    return buyer


def create_influencer(db: Session, name: str, phone: str, password: Optional[str] = None, **fields) -> Influencer:
    _ensure_phone_free(db, Influencer, phone)

    influencer = Influencer(name=name, phone=phone, password=_hashed(password), **fields)
    db.add(influencer)
    db.commit()
    db.refresh(influencer)
    return influencer


def create_admin(db: Session, name: str, phone: str, password: Optional[str] = None, **fields) -> Admin:
    _ensure_phone_free(db, Admin, phone)

    admin = Admin(name=name, phone=phone, password=_hashed(password), **fields)
    db.add(admin)
    db.commit()
    db.refresh(admin)
    return admin
