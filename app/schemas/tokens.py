# app/schemas/tokens.py
from pydantic import BaseModel
from app.models.user import UserRole


class Identity(BaseModel):
    """Who is calling: the {id, role} pair carried by a verified session token"""
    id: int
    role: UserRole

    model_config = {
        "frozen": True
    }


class LoginResult(BaseModel):
    id: int
    role: UserRole
