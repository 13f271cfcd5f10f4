from typing import Optional

from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session

from app.core.logger import logger
from app.core.session import SESSION_KEYS, Principal, SessionData, clear_principal
from app.db.session import get_db
from app.dependencies.session import (
    get_current_principal,
    get_session_data,
    get_session_id,
)
from app.services.user_service import serialize_principal_entity

router = APIRouter(prefix="/auth", tags=["Auth"])


@router.get("/me")
def get_me(
    principal: Optional[Principal] = Depends(get_current_principal),
    db: Session = Depends(get_db),
):
    if principal is None:
        return {"role": None, "user": None}

    return {
        "role": principal.role.value,
        "user": serialize_principal_entity(db, principal),
    }


@router.get("/session")
def get_session_info(session: SessionData = Depends(get_session_data)):
    return {key: session.get(key) for key in SESSION_KEYS}


@router.post("/logout")
def logout(
    request: Request,
    principal: Optional[Principal] = Depends(get_current_principal),
    session_id: Optional[str] = Depends(get_session_id),
):
    clear_principal(request.session)

    if principal is not None:
        logger.info(
            f"LOGOUT | role={principal.role.value} | id={principal.id} | session_id={session_id}"
        )

    return {"message": "Logged out successfully", "session_id": session_id}
