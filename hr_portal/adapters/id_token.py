"""
ID Token Adapter - Issue and read identity-provider ID tokens with PyJWT.
"""

import jwt
import logging
from datetime import datetime, timedelta, timezone
from typing import Dict, Any, Optional
from hr_portal.domain.user import Role


logger = logging.getLogger(__name__)


class IdTokenAdapter:
    """
    Reads the claims of an ID token, and issues tokens for in-process providers.

    With a secret, signatures are verified. Without one, claims are decoded
    unverified: the client only reads its own token to pick a role, and the
    backend verifies the token on every call.
    """

    def __init__(
        self,
        secret: Optional[str] = None,
        algorithm: str = "HS256",
        issuer: str = "hr-portal",
    ):
        """
        Initialize ID token adapter.

        Args:
            secret: Signing secret (required for issue())
            algorithm: JWT algorithm (default HS256)
            issuer: Token issuer claim
        """
        self._secret = secret
        self._algorithm = algorithm
        self._issuer = issuer

    def issue(
        self,
        uid: str,
        email: Optional[str] = None,
        claims: Optional[Dict[str, Any]] = None,
        expires_in: int = 3600,
    ) -> str:
        """
        Create a signed ID token.

        Args:
            uid: Provider identity (becomes 'sub')
            email: Account email
            claims: Custom claims (e.g., {"role": "admin"})
            expires_in: Token expiration in seconds

        Returns:
            JWT token string
        """
        if not self._secret:
            raise ValueError("Issuing ID tokens requires a secret")

        now = datetime.now(timezone.utc)
        payload = dict(claims or {})
        payload.update({
            "sub": uid,
            "email": email,
            "iat": now,
            "exp": now + timedelta(seconds=expires_in),
            "iss": self._issuer,
        })

        return jwt.encode(payload, self._secret, algorithm=self._algorithm)

    def read_claims(self, token: str) -> Optional[Dict[str, Any]]:
        """
        Read the claims of an ID token.

        Args:
            token: JWT token string

        Returns:
            Claims if the token is readable (and valid, when verifying), None otherwise
        """
        if not token:
            return None

        try:
            if self._secret:
                return jwt.decode(
                    token,
                    self._secret,
                    algorithms=[self._algorithm],
                    issuer=self._issuer,
                )
            return jwt.decode(token, options={"verify_signature": False})
        except jwt.ExpiredSignatureError:
            logger.debug("ID token expired")
            return None
        except jwt.InvalidTokenError:
            logger.debug("ID token invalid")
            return None

    def role_claim(self, token: str) -> Optional[Role]:
        """
        Role asserted by the token's 'role' claim.

        Returns:
            Role, or None if the claim is missing or not a known role
        """
        claims = self.read_claims(token)
        if not claims or claims.get("role") is None:
            return None

        try:
            return Role.parse(claims["role"])
        except ValueError:
            logger.warning("Ignoring unknown role claim %r", claims["role"])
            return None
