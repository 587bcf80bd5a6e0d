"""Account Schema — user record at users/{id} plus its index entries.

Invariants:
    - username/email are stored normalized (trimmed, lower-cased)
    - password_hash and security_answer_hash are salt$digest strings, never plaintext
    - public_view() is the only shape handed to display code
"""

from pydantic import Field

from syncnote.core.timestamps import now_ms
from syncnote.schemas.base import StoreDocument


class Account(StoreDocument):
    username: str
    email: str
    password_hash: str | None = Field(None, alias="passwordHash", repr=False)
    security_question: str | None = Field(None, alias="securityQuestion")
    security_answer_hash: str | None = Field(
        None, alias="securityAnswerHash", repr=False,
    )
    created_at: int = Field(default_factory=now_ms, alias="createdAt")
    last_login: int | None = Field(None, alias="lastLogin")

    def public_view(self) -> dict:
        return {
            "id": self.id,
            "username": self.username,
            "email": self.email,
            "createdAt": self.created_at,
            "lastLogin": self.last_login,
        }
