"""
Identity Provider Port - Interface for a hosted identity provider.

Used by the managed-backend binding. The provider owns sign-in and issues
ID tokens whose claims may carry the console role.

Implementations:
- MemoryIdentityProvider: In-process provider (testing, local development)
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Callable, Optional
from hr_portal.ports.subscription import Subscription


@dataclass(frozen=True)
class ProviderUser:
    """Identity as reported by the provider."""
    uid: str
    email: Optional[str] = None
    display_name: Optional[str] = None


AuthStateListener = Callable[[Optional[ProviderUser]], None]


class IdentityProviderPort(ABC):
    """Port: Sign users in and out and report auth-state transitions."""

    @abstractmethod
    async def sign_in(self, email: str, password: str) -> ProviderUser:
        """
        Sign in with email and password.

        Args:
            email: Account email
            password: Account password

        Returns:
            Signed-in user

        Raises:
            RequestFailed: If the provider rejects the credentials
        """
        pass

    @abstractmethod
    async def sign_out(self) -> None:
        """Sign the current user out."""
        pass

    @abstractmethod
    def current_user(self) -> Optional[ProviderUser]:
        """Currently signed-in user, or None."""
        pass

    @abstractmethod
    async def get_id_token(self, user: ProviderUser) -> str:
        """
        Get a fresh ID token for a user.

        Returns:
            Encoded ID token (JWT)
        """
        pass

    @abstractmethod
    async def change_password(self, current_password: str, new_password: str) -> None:
        """
        Change the current user's password.

        Raises:
            RequestFailed: If the current password is wrong or no one is signed in
        """
        pass

    @abstractmethod
    def subscribe(self, listener: AuthStateListener) -> Subscription:
        """
        Register for auth-state transitions.

        The listener receives the signed-in user, or None on sign-out.

        Returns:
            Handle that removes the listener when closed
        """
        pass
