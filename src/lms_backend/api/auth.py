from typing import Annotated
from fastapi import APIRouter, Depends, Request, Response
from sqlalchemy.orm import Session

from lms_backend.api.exceptions import UnauthorizedException
from lms_backend.database import get_db
from lms_backend.interface.auth import LoginRequest, MeGet, SessionGet, SignupRequest, UserGet
from lms_backend.permissions.auth import get_current_principal, get_session_token
from lms_backend.permissions.principal import Principal
from lms_backend.services.sessions import authenticate, create_session, delete_session
from lms_backend.services.users import signup
from lms_backend.settings import settings

auth_router = APIRouter()


def _set_session_cookie(response: Response, session_token: str):
    response.set_cookie(
        key=settings.SESSION_COOKIE_NAME,
        value=session_token,
        max_age=settings.SESSION_TTL_MINUTES * 60,
        httponly=True,
        samesite="lax",
    )


@auth_router.post("/signup", response_model=UserGet, status_code=201)
def signup_user(payload: SignupRequest, db: Session = Depends(get_db)):
    return signup(payload.name, payload.email, payload.password, db)


@auth_router.post("/login", response_model=SessionGet)
def login(payload: LoginRequest, response: Response, db: Session = Depends(get_db)):

    user = authenticate(payload.email, payload.password, db)
    session = create_session(user, db)

    _set_session_cookie(response, session.session_token)

    return session


@auth_router.post("/logout", status_code=204)
def logout(request: Request, response: Response, db: Session = Depends(get_db)):

    session_token = get_session_token(request)

    if session_token is None or not delete_session(session_token, db):
        raise UnauthorizedException("Not authenticated")

    response.delete_cookie(settings.SESSION_COOKIE_NAME)


@auth_router.get("/me", response_model=MeGet)
def get_me(request: Request, principal: Annotated[Principal, Depends(get_current_principal)]):
    """The signed-in user and the permission keys they hold in the current organization"""

    return MeGet(
        user=UserGet.model_validate(request.state.user, from_attributes=True),
        organization_id=principal.organization_id,
        permissions=sorted(principal.permissions),
    )
