from typing import Optional

from fastapi import Depends, Request

from app.core.session import Principal, SessionData, get_principal, read_session


def get_session_data(request: Request) -> SessionData:
    return read_session(request.session)


def get_current_principal(request: Request) -> Optional[Principal]:
    return get_principal(request.session)


def get_session_id(
    session: SessionData = Depends(get_session_data)
) -> Optional[str]:
    return session.get("session_id")
