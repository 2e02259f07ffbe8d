"""
Session Resolvers - Turn credentials and provider events into a Session.

- TokenSessionResolver: REST binding (bearer token, /auth/me)
- ProviderSessionResolver: managed binding (identity provider + profiles)

Startup resumption never raises: any failure leaves the console signed out.
"""

import asyncio
import logging
from abc import ABC, abstractmethod
from typing import Optional, Tuple
from hr_portal.errors import HRPortalError, RequestFailed, ProfileResolutionFailed
from hr_portal.domain.session import Session
from hr_portal.domain.user import Role, LoginMode
from hr_portal.ports.credential_port import CredentialStorePort, TOKEN_KEY, LOGIN_MODE_KEY
from hr_portal.ports.identity_port import IdentityProviderPort, ProviderUser
from hr_portal.ports.document_port import ProfileStorePort
from hr_portal.ports.subscription import Subscription
from hr_portal.adapters.id_token import IdTokenAdapter
from hr_portal.adapters.rest_auth import RestAuthAdapter
from hr_portal.sdk.store import SessionStore


logger = logging.getLogger(__name__)


class SessionResolver(ABC):
    """
    Base resolver. Owns the persisted credential and the login-mode hint.

    Together with the unauthorized handler (teardown), resolvers are the
    only writers of the session store.
    """

    def __init__(self, store: SessionStore, credentials: CredentialStorePort):
        self._store = store
        self._credentials = credentials
        self._warning: Optional[ProfileResolutionFailed] = None

    @property
    def store(self) -> SessionStore:
        return self._store

    @property
    def warning(self) -> Optional[ProfileResolutionFailed]:
        """Non-fatal problem from the last resolution, for a banner."""
        return self._warning

    @property
    def login_mode(self) -> LoginMode:
        """Last login tab chosen. Defaults to admin."""
        value = self._credentials.retrieve(LOGIN_MODE_KEY)
        try:
            return LoginMode(value)
        except ValueError:
            return LoginMode.ADMIN

    def set_login_mode(self, mode: LoginMode) -> None:
        self._credentials.store(LOGIN_MODE_KEY, LoginMode(mode).value)

    def teardown(self) -> None:
        """Clear the persisted credential and the session."""
        self._credentials.delete(TOKEN_KEY)
        self._warning = None
        self._store.clear()

    @abstractmethod
    async def resume(self) -> Optional[Session]:
        """
        Resume a session on startup.

        Returns:
            Resumed session, or None. Never raises.
        """
        pass

    @abstractmethod
    async def sign_in(
        self,
        username: str,
        password: str,
        mode: Optional[LoginMode] = None,
    ) -> Optional[Session]:
        """
        Exchange credentials for a session and publish it.

        Raises:
            RequestFailed: Credentials rejected
        """
        pass

    @abstractmethod
    async def sign_out(self) -> None:
        """End the session."""
        pass

    @abstractmethod
    async def change_password(self, current_password: str, new_password: str) -> None:
        """Change the signed-in user's password."""
        pass

    def close(self) -> None:
        """Release subscriptions held by the resolver."""
        pass


class TokenSessionResolver(SessionResolver):
    """
    REST binding resolver.

    Example:
        resolver = TokenSessionResolver(RestAuthAdapter(client), store, credentials)
        client.set_unauthorized_handler(resolver.teardown)
        session = await resolver.sign_in("alice", "secret")
    """

    def __init__(
        self,
        auth: RestAuthAdapter,
        store: SessionStore,
        credentials: CredentialStorePort,
    ):
        super().__init__(store, credentials)
        self._auth = auth

    async def resume(self) -> Optional[Session]:
        if not self._credentials.retrieve(TOKEN_KEY):
            return None

        generation = self._store.generation
        try:
            session = Session.from_dict(await self._auth.me())
        except (HRPortalError, ValueError) as e:
            logger.debug("Session resume failed: %s", e)
            return None

        if not self._store.is_current(generation):
            # A sign-in or sign-out happened while /auth/me was in flight
            return self._store.session

        self._store.replace(session)
        return session

    async def sign_in(
        self,
        username: str,
        password: str,
        mode: Optional[LoginMode] = None,
    ) -> Session:
        if mode is not None:
            self.set_login_mode(mode)

        result = await self._auth.login(username, password)
        try:
            session = Session.from_dict(result.user)
        except ValueError as e:
            logger.warning("Login returned an unusable user payload: %s", e)
            raise RequestFailed("Login failed") from e

        self._credentials.store(TOKEN_KEY, result.token)
        self._warning = None
        self._store.replace(session)
        logger.info("Signed in %s as %s", session.username, session.role.value)
        return session

    async def sign_out(self) -> None:
        self.teardown()

    async def change_password(self, current_password: str, new_password: str) -> None:
        await self._auth.change_password(current_password, new_password)


class ProviderSessionResolver(SessionResolver):
    """
    Managed-backend resolver.

    On each signed-in transition: read the role claim from the ID token,
    fetch the users/{uid} profile, and derive the role as
    claim role -> profile role -> employee. A first login with no profile
    provisions a minimal admin profile when the role claim is admin, or when
    there is no role claim and the login-mode hint is admin. An explicit
    non-admin claim never provisions one, whatever the hint. Any failure
    along the way degrades to a minimal employee session plus a warning.
    """

    def __init__(
        self,
        provider: IdentityProviderPort,
        profiles: ProfileStorePort,
        store: SessionStore,
        credentials: CredentialStorePort,
        tokens: Optional[IdTokenAdapter] = None,
    ):
        """
        Initialize provider resolver.

        Args:
            provider: Identity provider
            profiles: Profile store (users/{uid})
            store: Session store
            credentials: Client-local storage for the ID token and hint
            tokens: Claims reader (unverified decode if omitted)
        """
        super().__init__(store, credentials)
        self._provider = provider
        self._profiles = profiles
        self._tokens = tokens or IdTokenAdapter()
        self._subscription: Optional[Subscription] = None
        self._pending: Optional[Tuple[str, "asyncio.Future[Optional[Session]]"]] = None
        self._sign_out_task: Optional["asyncio.Task[None]"] = None

    def start(self) -> None:
        """Subscribe to provider auth-state transitions."""
        if self._subscription is None:
            self._subscription = self._provider.subscribe(self._on_auth_state)

    def close(self) -> None:
        if self._subscription is not None:
            self._subscription.close()
            self._subscription = None

    def _on_auth_state(self, user: Optional[ProviderUser]) -> None:
        if user is None:
            self._pending = None
            super().teardown()
            return

        current = self._store.session
        if current is not None and current.user_id == user.uid:
            return

        try:
            self._schedule(user)
        except RuntimeError:
            # No running loop; the next resume() or sign_in() resolves
            logger.debug("Auth state changed outside an event loop for %s", user.uid)

    def _schedule(self, user: ProviderUser) -> "asyncio.Future[Optional[Session]]":
        """One in-flight resolution per uid."""
        if self._pending is not None:
            uid, task = self._pending
            if uid == user.uid and not task.done():
                return task

        task = asyncio.get_running_loop().create_task(self._resolve(user))
        self._pending = (user.uid, task)
        return task

    async def _resolve(self, user: ProviderUser) -> Optional[Session]:
        token = None
        try:
            token = await self._provider.get_id_token(user)
            session = await self._build_session(user, token)
            self._warning = None
        except Exception as e:
            logger.warning("Profile resolution failed for %s: %s", user.uid, e)
            self._warning = ProfileResolutionFailed()
            session = Session.minimal(
                user.uid,
                username=user.display_name or user.email,
                email=user.email,
            )

        current = self._provider.current_user()
        if current is None or current.uid != user.uid:
            logger.debug("Discarding resolution for %s, provider moved on", user.uid)
            return None

        # Persisted only once the provider still reports this user
        if token:
            self._credentials.store(TOKEN_KEY, token)
        self._store.replace(session)
        logger.info("Signed in %s as %s", session.username, session.role.value)
        return session

    async def _build_session(self, user: ProviderUser, token: str) -> Session:
        claim_role = self._tokens.role_claim(token)

        profile = await self._profiles.get_profile(user.uid)
        if profile is None and self._should_bootstrap_admin(claim_role):
            logger.info("Provisioning first admin profile for %s", user.uid)
            profile = await self._profiles.create_profile(user.uid, {
                "role": Role.ADMIN.value,
                "username": user.email or user.uid,
                "email": user.email,
            })
        profile = profile or {}

        if claim_role is not None:
            role = claim_role
        elif profile.get("role"):
            role = Role.parse(profile["role"])
        else:
            role = Role.EMPLOYEE

        return Session.create(
            user_id=user.uid,
            username=profile.get("username") or user.email or user.uid,
            role=role,
            permissions=profile.get("permissions"),
            employee_id=profile.get("employee_id"),
            display_name=profile.get("name") or user.display_name,
            email=user.email,
        )

    def _should_bootstrap_admin(self, claim_role: Optional[Role]) -> bool:
        # The hint only breaks the tie when the provider asserts no role
        if claim_role is not None:
            return claim_role is Role.ADMIN
        return self.login_mode is LoginMode.ADMIN

    def teardown(self) -> None:
        super().teardown()
        if self._provider.current_user() is None:
            return
        try:
            task = asyncio.get_running_loop().create_task(self._provider.sign_out())
        except RuntimeError:
            logger.debug("No running loop, provider sign-out skipped")
            return
        self._sign_out_task = task
        task.add_done_callback(self._on_sign_out_done)

    def _on_sign_out_done(self, task: "asyncio.Task[None]") -> None:
        if self._sign_out_task is task:
            self._sign_out_task = None
        if task.cancelled():
            return
        error = task.exception()
        if error is not None:
            logger.warning("Provider sign-out failed: %s", error)

    async def resume(self) -> Optional[Session]:
        self.start()
        user = self._provider.current_user()
        if user is None:
            return None
        current = self._store.session
        if current is not None and current.user_id == user.uid:
            return current
        return await self._schedule(user)

    async def sign_in(
        self,
        username: str,
        password: str,
        mode: Optional[LoginMode] = None,
    ) -> Optional[Session]:
        if mode is not None:
            self.set_login_mode(mode)

        self.start()
        user = await self._provider.sign_in(username, password)
        # Joins the resolution the auth-state listener already started
        return await self._schedule(user)

    async def sign_out(self) -> None:
        await self._provider.sign_out()
        super().teardown()

    async def change_password(self, current_password: str, new_password: str) -> None:
        await self._provider.change_password(current_password, new_password)
