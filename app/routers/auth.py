# app/routers/auth.py
from fastapi import APIRouter, Depends, Response
from sqlalchemy.orm import Session

from app.config.security import SecurityConfig
from app.database import get_db
from app.schemas import Envelope, LoginResult, PendingRegistrationOut, UserLogin, UserRegister
from app.services.registration_service import RegistrationService

router = APIRouter()


def set_session_cookie(response: Response, token: str, max_age: int):
    response.set_cookie(
        key=SecurityConfig.COOKIE['name'],
        value=token,
        max_age=max_age,
        path=SecurityConfig.COOKIE['path'],
        httponly=SecurityConfig.COOKIE['httponly'],
        secure=SecurityConfig.is_production(),
        samesite=SecurityConfig.COOKIE['samesite'],
    )


@router.post("/register", response_model=Envelope[PendingRegistrationOut])
def register(payload: UserRegister, db: Session = Depends(get_db)):
    pending = RegistrationService(db).register(payload.name, payload.email, payload.password)
    return Envelope(data=pending, message="Registration successful")


@router.post("/login", response_model=Envelope[LoginResult])
def login(payload: UserLogin, response: Response, db: Session = Depends(get_db)):
    user, token = RegistrationService(db).login(payload.email, payload.password)
    set_session_cookie(response, token, SecurityConfig.cookie_max_age())
    return Envelope(data=LoginResult(id=user.id, role=user.role), message="Login successful")


@router.post("/logout", response_model=Envelope)
@router.get("/logout", response_model=Envelope)
def logout(response: Response):
    """Stateless tokens: logging out only expires the cookie"""
    set_session_cookie(response, "", 0)
    return Envelope(message="Logout successful")
