# =============================================================================
# inventory_core/services/account_service.py
# Account Registration, Login and User Administration
# =============================================================================
"""
AccountService - local-first account operations.

The local store is the source of truth for accounts. The remote mirror
receives a best-effort copy on registration and is consulted for login
only when the local lookup misses.
"""

from __future__ import annotations
from typing import Any, Dict, List, Optional

from inventory_core.api import RemoteGateway
from inventory_core.errors import (
    DuplicateAccountError,
    InvalidCredentialsError,
    InventorySyncError,
    RemoteParseError,
    handle_error,
)
from inventory_core.models import Account
from inventory_core.offline.local_store import USERS_KEY, LocalStore
from inventory_core.offline.sync_queue import SyncQueueService
from inventory_core.services.base_service import (
    RemoteBackedService,
    RemotePolicy,
    ServiceResult,
)
from inventory_core.ui.presenter import Presenter, loading


class AccountService(RemoteBackedService):
    """
    Usage:
        accounts = AccountService(store, gateway, sync_queue)
        accounts.register_user("Ana", "a@x.com", "pw1")
        result = accounts.login_user("a@x.com", "pw1")
        result.to_dict()  # {"success": True, "message": ..., "user": {...}}
    """

    def __init__(
        self,
        local_store: LocalStore,
        gateway: RemoteGateway,
        sync_queue: SyncQueueService,
        presenter: Optional[Presenter] = None,
        policies: Optional[Dict[str, RemotePolicy]] = None,
    ):
        super().__init__(gateway, presenter, policies)
        self.local_store = local_store
        self.sync_queue = sync_queue

    # =========================================================================
    # LOCAL ACCOUNTS
    # =========================================================================

    def local_accounts(self) -> List[Account]:
        return [Account.from_dict(r) for r in self.local_store.get(USERS_KEY)]

    def find_local_account(self, email: str) -> Optional[Account]:
        for account in self.local_accounts():
            if account.matches_email(email):
                return account
        return None

    def _append_account(self, account: Account) -> None:
        records = self.local_store.get(USERS_KEY)
        records.append(account.to_dict())
        self.local_store.put(USERS_KEY, records)

    # =========================================================================
    # REGISTRATION / LOGIN
    # =========================================================================

    def register_user(
        self,
        name: str,
        email: str,
        password: str,
        security_question: str = "",
        security_answer: str = "",
        hint: str = "",
        defer_mirror: bool = False,
    ) -> ServiceResult:
        """
        Register an account locally, then mirror it to the remote service.

        Args:
            defer_mirror: Hand the remote copy to the sync queue instead of
                sending it now

        Returns:
            ServiceResult; fails with ACCOUNT_001 if the email exists locally
        """
        email = email.strip()
        if self.find_local_account(email) is not None:
            return ServiceResult.from_exception(DuplicateAccountError(email))

        with self.log_operation(f"Saving account {email} locally"):
            self._append_account(Account(name=name, email=email, password=password, hint=hint or ""))
        self.logger.info(f"User saved to local store: {email}")

        if self.is_configured:
            mirror = {
                "name": name,
                "email": email,
                "password": password,
                "securityQuestion": security_question or "",
                "securityAnswer": security_answer or "",
                "hint": hint or "",
            }
            if defer_mirror:
                self.sync_queue.enqueue("register", mirror)
            else:
                self._mirror_registration(mirror)

        return ServiceResult.ok("Registration successful")

    def _mirror_registration(self, fields: Dict[str, Any]) -> None:
        # Best effort: failures are logged only, never queued
        result = self.gateway.invoke("register", fields)
        error = result.error()
        if error is None:
            self.logger.info(f"User synced to remote mirror: {fields['email']}")
        else:
            self.logger.warning(f"Remote mirror sync failed (local copy kept): {error}")

    def login_user(self, email: str, password: str) -> ServiceResult:
        """
        Log in against the local store first, then the remote mirror.

        A remote success caches the account locally for future logins.
        """
        check_email = email.strip().lower()
        check_password = password.strip()

        for account in self.local_accounts():
            if account.matches_email(check_email) and account.password == check_password:
                self.logger.info("Login success from local store")
                return ServiceResult.ok("Login successful", data={"user": account.public_view()})

        if self.is_configured:
            with loading(self.presenter, self.policy("login").loading_message):
                result = self.gateway.invoke("login", {"email": email, "password": password})

            try:
                result.raise_for_failure()
                body = self._parse_object(result)
            except InventorySyncError as e:
                # Unreachable or unparseable: fall through to invalid credentials
                handle_error(e)
            else:
                user = body.get("user")
                if body.get("success") and isinstance(user, dict):
                    self._cache_remote_account(user, password)
                return ServiceResult.from_body(body)

        return ServiceResult.from_exception(InvalidCredentialsError())

    def _cache_remote_account(self, user: Dict[str, Any], password: str) -> None:
        remote_email = str(user.get("email") or "")
        if not remote_email or self.find_local_account(remote_email) is not None:
            return
        self._append_account(
            Account(name=str(user.get("name") or ""), email=remote_email, password=password)
        )
        self.logger.info("User cached to local store from remote mirror")

    def reset_password(self, email: str, new_password: str) -> ServiceResult:
        """
        Queue a password reset for the remote mirror.

        The local copy of the password is left unchanged.
        """
        if not self.is_configured:
            return self._unconfigured("resetPassword")

        entry = self.sync_queue.enqueue(
            "resetPassword", {"email": email, "newPassword": new_password}
        )
        return ServiceResult.ok(
            "Password reset will sync in the background",
            metadata={"queued": entry.id},
        )

    # =========================================================================
    # USER ADMINISTRATION (remote)
    # =========================================================================

    def find_user(self, email: str, suppress_loading: bool = False) -> Optional[Dict[str, Any]]:
        """
        Look up one user on the remote mirror.

        Returns:
            The parsed response body, or None on any failure
        """
        if not self.is_configured:
            self.logger.error("findUser: remote endpoint not configured")
            return None

        with loading(self.presenter, self.policy("findUser").loading_message, suppress=suppress_loading):
            result = self.gateway.invoke("findUser", {"email": email})

        error = result.error()
        if error is not None:
            handle_error(error)
            return None
        try:
            return self._parse_object(result)
        except RemoteParseError as e:
            handle_error(e)
            return None

    def get_users(self) -> Optional[List[Dict[str, Any]]]:
        return self._listing("getUsers", "users")

    def delete_user(self, email: str) -> ServiceResult:
        """Delete a user on the remote mirror. The local store is not touched."""
        return self._mutation("deleteUser", {"email": email})
