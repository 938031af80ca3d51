# app/routers/user.py
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from typing import List

from app.database import get_db
from app.schemas import (
    ApprovalDecision, Envelope, Identity, PendingRegistrationOut, UserCreate, UserOut,
    UserProfile, UserSelfUpdate, UserUpdate,
)
from app.services.registration_service import RegistrationService
from app.services.user_service import UserService
from app.utils.auth import get_current_identity, require_admin, require_self_or_privileged

router = APIRouter()


@router.get("/", response_model=Envelope[List[UserOut]])
def get_all_users(db: Session = Depends(get_db), identity: Identity = Depends(require_admin)):
    """All non-admin users with their team"""
    return Envelope(data=UserService(db).list_users())


@router.post("/", response_model=Envelope[UserOut], status_code=status.HTTP_201_CREATED)
def create_user(payload: UserCreate, db: Session = Depends(get_db), identity: Identity = Depends(require_admin)):
    user = UserService(db).create_user(
        name=payload.name,
        email=payload.email,
        password=payload.password,
        role=payload.role,
        team_id=payload.team_id,
        acting_user_id=identity.id,
    )
    return Envelope(data=user, message="User created successfully")


@router.get("/me", response_model=Envelope[UserProfile])
def get_current_user_info(db: Session = Depends(get_db), identity: Identity = Depends(get_current_identity)):
    return Envelope(data=UserService(db).get_user(identity.id))


@router.put("/me", response_model=Envelope[UserOut])
def update_current_user(
    payload: UserSelfUpdate,
    db: Session = Depends(get_db),
    identity: Identity = Depends(get_current_identity),
):
    """Users may only change their own name and email"""
    user = UserService(db).update_self(identity.id, payload.model_dump(exclude_unset=True))
    return Envelope(data=user)


@router.get("/pending", response_model=Envelope[List[PendingRegistrationOut]])
def get_pending_registrations(db: Session = Depends(get_db), identity: Identity = Depends(require_admin)):
    return Envelope(data=RegistrationService(db).list_pending())


@router.post("/approve", response_model=Envelope[UserOut])
def process_registration(
    decision: ApprovalDecision,
    db: Session = Depends(get_db),
    identity: Identity = Depends(require_admin),
):
    """Approve (create the user) or reject (discard) a pending registration"""
    service = RegistrationService(db)
    if decision.approve:
        user = service.approve(decision.pending_id, acting_user_id=identity.id)
        return Envelope(data=user, message="User approved")
    service.reject(decision.pending_id, acting_user_id=identity.id)
    return Envelope(message="Registration rejected")


@router.get("/{user_id}", response_model=Envelope[UserProfile])
def get_user(user_id: int, db: Session = Depends(get_db), identity: Identity = Depends(get_current_identity)):
    require_self_or_privileged(identity, user_id)
    return Envelope(data=UserService(db).get_user(user_id))


@router.put("/{user_id}", response_model=Envelope[UserOut])
def update_user(
    user_id: int,
    user_update: UserUpdate,
    db: Session = Depends(get_db),
    identity: Identity = Depends(require_admin),
):
    user = UserService(db).update_user(
        user_id, user_update.model_dump(exclude_unset=True), acting_user_id=identity.id
    )
    return Envelope(data=user)


@router.delete("/{user_id}", response_model=Envelope)
def delete_user(user_id: int, db: Session = Depends(get_db), identity: Identity = Depends(require_admin)):
    UserService(db).delete_user(user_id, acting_user_id=identity.id)
    return Envelope(message="User deleted successfully")
