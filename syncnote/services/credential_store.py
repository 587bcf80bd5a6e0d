"""Credential Store — account registration, authentication, and password recovery.

Invariants:
    - usernames/{username} and emails/{email-key} each map to exactly one account id
    - register checks username, then email, then creates the account and both
      index entries in ONE multi_write
    - authenticate never returns account data unless the password verified
    - lastLogin update is best-effort: its failure never fails authenticate
    - verify_security_answer / reset_password / change_password resolve to bool

Design Decisions:
    - Known race: the username/email checks and the final multi_write are not one
      transaction. Two concurrent registrations of the same username can both pass
      the check; the later multi_write then repoints the index entry. The store
      offers no multi-key constraint, so this stays best-effort.
    - Unknown usernames resolve to NotFoundError with the same generic message as
      BadCredentialsError, so the caller cannot tell them apart by text
"""

import logging

from syncnote.core.domain_types import AccountId
from syncnote.core.errors import (
    BadCredentialsError, EmailTakenError, ErrorContext, NotFoundError,
    UsernameTakenError, ValidationError,
)
from syncnote.core.passwords import (
    hash_password, hash_security_answer, verify_password, verify_security_answer,
)
from syncnote.core.paths import (
    EMAILS, USERNAMES, USERS, email_key, join_path, normalize_email,
    normalize_username, validate_segment,
)
from syncnote.core.store_protocols import TreeStore
from syncnote.core.timestamps import Clock, now_ms
from syncnote.schemas.account import Account
from syncnote.services.boundary import returns_bool, returns_result

logger = logging.getLogger(__name__)


def _index_key(value: str) -> str | None:
    """Normalized value as a legal store key, or None when it cannot be one."""
    try:
        return validate_segment(value)
    except ValueError:
        return None


class CredentialStore:
    """Accounts plus their username/email secondary indices."""

    def __init__(self, store: TreeStore, clock: Clock = now_ms):
        self.store = store
        self.clock = clock

    # ─── Registration ───────────────────────────────────────────

    @returns_result("register")
    async def register(
        self,
        username: str,
        email: str,
        password: str,
        security_question: str | None = None,
        security_answer: str | None = None,
    ) -> AccountId:
        """Create an account. Fails with UsernameTaken / EmailTaken / StoreFailure."""
        uname = normalize_username(username or "")
        mail = normalize_email(email or "")
        if not uname:
            raise ValidationError("Username is required", "username")
        if _index_key(uname) is None:
            raise ValidationError(
                "Username cannot contain . # $ [ ] or /", "username",
            )
        if not mail or "@" not in mail:
            raise ValidationError("A valid email is required", "email")
        if _index_key(email_key(mail)) is None:
            raise ValidationError("Email cannot contain # $ [ ] or /", "email")
        if not password:
            raise ValidationError("Password is required", "password")

        if await self.store.read(join_path(USERNAMES, uname)) is not None:
            raise UsernameTakenError(uname)
        if await self.store.read(join_path(EMAILS, email_key(mail))) is not None:
            raise EmailTakenError(mail)

        account_id = await self.store.push_id(USERS)
        account = Account(
            id=account_id,
            username=uname,
            email=mail,
            password_hash=hash_password(password),
            security_question=security_question,
            security_answer_hash=(
                hash_security_answer(security_answer)
                if security_answer is not None else None
            ),
            created_at=self.clock(),
        )
        await self.store.multi_write({
            join_path(USERS, account_id): account.to_document(),
            join_path(USERNAMES, uname): account_id,
            join_path(EMAILS, email_key(mail)): account_id,
        })
        logger.info("Account registered", extra={"account_id": account_id})
        return AccountId(account_id)

    @returns_bool("username_exists")
    async def username_exists(self, username: str) -> bool:
        key = _index_key(normalize_username(username or ""))
        if key is None:
            return False
        return await self.store.read(join_path(USERNAMES, key)) is not None

    @returns_bool("email_exists")
    async def email_exists(self, email: str) -> bool:
        key = _index_key(email_key(email or ""))
        if key is None:
            return False
        return await self.store.read(join_path(EMAILS, key)) is not None

    # ─── Lookups ────────────────────────────────────────────────

    async def _resolve_username(self, username: str) -> str:
        uname = normalize_username(username or "")
        key = _index_key(uname)
        account_id = (
            await self.store.read(join_path(USERNAMES, key)) if key else None
        )
        if not isinstance(account_id, str) or not account_id:
            raise NotFoundError("Account", uname)
        return account_id

    async def _load(self, account_id: str) -> Account:
        key = _index_key(account_id or "")
        document = await self.store.read(join_path(USERS, key)) if key else None
        if not isinstance(document, dict):
            raise NotFoundError(
                "Account", account_id, ErrorContext(account_id=account_id),
            )
        return Account.from_document(account_id, document)

    @returns_result("get_account")
    async def get_account(self, account_id: str) -> Account:
        return await self._load(account_id)

    @returns_result("get_account_by_username")
    async def get_account_by_username(self, username: str) -> Account:
        return await self._load(await self._resolve_username(username))

    # ─── Authentication ─────────────────────────────────────────

    @returns_result("authenticate")
    async def authenticate(self, username: str, password: str) -> Account:
        """Verify credentials; NotFound for unknown users, BadCredentials otherwise."""
        try:
            account_id = await self._resolve_username(username)
            account = await self._load(account_id)
        except NotFoundError as e:
            e.context.user_message = "Invalid username or password"
            raise
        if not verify_password(password, account.password_hash):
            raise BadCredentialsError(ErrorContext(account_id=account_id))

        account.last_login = self.clock()
        await self._touch_last_login(account_id, account.last_login)
        return account

    async def _touch_last_login(self, account_id: str, timestamp: int) -> None:
        try:
            await self.store.write(
                join_path(USERS, account_id, "lastLogin"), timestamp,
            )
        except Exception as e:
            logger.warning(
                f"lastLogin update failed: {e}", extra={"account_id": account_id},
            )

    # ─── Recovery ───────────────────────────────────────────────

    async def verify_security_answer(self, username: str, answer: str) -> bool:
        """True only when the account exists and the answer matches. Never raises."""
        try:
            account = await self._load(await self._resolve_username(username))
        except Exception as e:
            logger.info(f"Security answer check failed: {e}")
            return False
        return verify_security_answer(answer, account.security_answer_hash)

    @returns_bool("reset_password")
    async def reset_password(self, username: str, new_password: str) -> bool:
        if not new_password:
            raise ValidationError("Password is required", "new_password")
        account_id = await self._resolve_username(username)
        await self.store.write(
            join_path(USERS, account_id, "passwordHash"), hash_password(new_password),
        )
        logger.info("Password reset", extra={"account_id": account_id})
        return True

    @returns_bool("change_password")
    async def change_password(
        self, account_id: str, current_password: str, new_password: str,
    ) -> bool:
        """Re-read the stored hash, verify the current password, then overwrite."""
        if not new_password:
            raise ValidationError("Password is required", "new_password")
        account = await self._load(account_id)
        if not verify_password(current_password, account.password_hash):
            raise BadCredentialsError(ErrorContext(account_id=account_id))
        await self.store.write(
            join_path(USERS, account_id, "passwordHash"), hash_password(new_password),
        )
        logger.info("Password changed", extra={"account_id": account_id})
        return True
