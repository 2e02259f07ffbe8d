"""
Memory Identity Provider - In-process identity provider (testing only).
"""

import secrets
from dataclasses import dataclass, field
from typing import Dict, Any, List, Optional
from hr_portal.errors import RequestFailed
from hr_portal.ports.identity_port import IdentityProviderPort, ProviderUser, AuthStateListener
from hr_portal.ports.subscription import Subscription
from hr_portal.adapters.id_token import IdTokenAdapter


@dataclass
class _Account:
    user: ProviderUser
    password: str
    claims: Dict[str, Any] = field(default_factory=dict)


class MemoryIdentityProvider(IdentityProviderPort):
    """
    In-memory identity provider.

    Accounts are registered with add_account(). ID tokens are HS256 JWTs
    carrying the account's custom claims. Auth-state listeners are notified
    synchronously on sign-in and sign-out.

    WARNING: Only for testing and local development.
    """

    def __init__(self, secret: Optional[str] = None):
        """
        Initialize in-memory provider.

        Args:
            secret: ID token signing secret (random if omitted)
        """
        self.tokens = IdTokenAdapter(secret=secret or secrets.token_urlsafe(32))
        self._accounts: Dict[str, _Account] = {}
        self._current: Optional[ProviderUser] = None
        self._listeners: List[AuthStateListener] = []

    def add_account(
        self,
        email: str,
        password: str,
        uid: Optional[str] = None,
        role: Optional[str] = None,
        display_name: Optional[str] = None,
    ) -> ProviderUser:
        """
        Register an account.

        Args:
            email: Sign-in email
            password: Sign-in password
            uid: Provider identity (random if omitted)
            role: Optional 'role' custom claim
            display_name: Optional display name

        Returns:
            The provider user
        """
        user = ProviderUser(
            uid=uid or secrets.token_hex(14),
            email=email,
            display_name=display_name,
        )
        claims = {"role": role} if role else {}
        self._accounts[email.lower()] = _Account(user=user, password=password, claims=claims)
        return user

    def set_claims(self, uid: str, claims: Dict[str, Any]) -> None:
        """Replace an account's custom claims."""
        for account in self._accounts.values():
            if account.user.uid == uid:
                account.claims = dict(claims)
                return
        raise KeyError(uid)

    def _notify(self) -> None:
        for listener in list(self._listeners):
            listener(self._current)

    async def sign_in(self, email: str, password: str) -> ProviderUser:
        account = self._accounts.get((email or "").lower())
        if account is None or not secrets.compare_digest(account.password, password or ""):
            raise RequestFailed("Invalid email or password", status_code=400)

        self._current = account.user
        self._notify()
        return account.user

    async def sign_out(self) -> None:
        if self._current is None:
            return
        self._current = None
        self._notify()

    def current_user(self) -> Optional[ProviderUser]:
        return self._current

    async def get_id_token(self, user: ProviderUser) -> str:
        claims = {}
        for account in self._accounts.values():
            if account.user.uid == user.uid:
                claims = account.claims
                break
        return self.tokens.issue(user.uid, email=user.email, claims=claims)

    async def change_password(self, current_password: str, new_password: str) -> None:
        if self._current is None:
            raise RequestFailed("Not signed in")

        account = self._accounts[self._current.email.lower()]
        if not secrets.compare_digest(account.password, current_password or ""):
            raise RequestFailed("Current password is incorrect", status_code=400)
        account.password = new_password

    def subscribe(self, listener: AuthStateListener) -> Subscription:
        self._listeners.append(listener)

        def unsubscribe():
            if listener in self._listeners:
                self._listeners.remove(listener)

        return Subscription(unsubscribe)
