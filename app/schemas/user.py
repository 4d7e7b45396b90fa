# app/schemas/user.py
import uuid
from typing import Literal

from sqlmodel import SQLModel

UserRole = Literal["user", "admin"]


class AuthUser(SQLModel):
    """
    Authenticated caller, resolved from a Supabase JWT.

    The role comes from the `user_roles` table; anyone without an
    admin row is a plain "user".
    """

    id: uuid.UUID
    email: str | None = None
    role: UserRole = "user"
