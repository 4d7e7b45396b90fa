# app/repositories/user_repo.py
import uuid

from supabase import Client


class UserRoleRepository:
    """
    Data access layer for the Supabase `user_roles` table.

    Responsibilities:
      - Pure table queries
      - No FastAPI, no HTTP, no business logic
    """

    TABLE = "user_roles"

    def __init__(self, client: Client):
        self.client = client

    def has_role(self, user_id: uuid.UUID, role: str) -> bool:
        """Return True if a (user_id, role) row exists."""
        res = (
            self.client.table(self.TABLE)
            .select("id")
            .eq("user_id", str(user_id))
            .eq("role", role)
            .limit(1)
            .execute()
        )
        return bool(res.data)
