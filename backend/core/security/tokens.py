"""
JWT verification for access tokens issued by the auth provider.
"""

from dataclasses import dataclass
from datetime import UTC, datetime, timedelta

from jose import JWTError, jwt


@dataclass
class TokenPayload:
    """JWT token payload structure."""

    sub: str  # Subject (user ID)
    exp: datetime  # Expiration time
    iat: datetime  # Issued at
    role: str | None = None
    email: str | None = None


class TokenService:
    """Service for validating (and, in development and tests, minting) access tokens."""

    def __init__(
        self,
        secret_key: str,
        algorithm: str = "HS256",
        audience: str | None = "authenticated",
        access_token_expire_minutes: int = 60,
    ):
        """
        Initialize the token service.

        Args:
            secret_key: Secret the auth provider signs tokens with
            algorithm: JWT algorithm (default: HS256)
            audience: Expected ``aud`` claim, or None to skip the check
            access_token_expire_minutes: Lifetime of tokens minted by create_access_token
        """
        self._secret_key = secret_key
        self._algorithm = algorithm
        self._audience = audience
        self._access_token_expire_minutes = access_token_expire_minutes

    def create_access_token(
        self,
        user_id: str,
        email: str | None = None,
        role: str = "authenticated",
    ) -> str:
        """
        Create an access token shaped like the provider's.

        Args:
            user_id: User ID to encode in the token
            email: Optional email to include
            role: Role claim

        Returns:
            Encoded JWT access token
        """
        now = datetime.now(UTC)
        expire = now + timedelta(minutes=self._access_token_expire_minutes)

        payload = {
            "sub": user_id,
            "exp": expire,
            "iat": now,
            "role": role,
        }
        if self._audience:
            payload["aud"] = self._audience
        if email:
            payload["email"] = email

        return jwt.encode(payload, self._secret_key, algorithm=self._algorithm)

    def verify_access_token(self, token: str) -> TokenPayload | None:
        """
        Decode and validate an access token.

        Args:
            token: JWT token to verify

        Returns:
            TokenPayload if valid, None if invalid, expired or for another audience
        """
        try:
            payload = jwt.decode(
                token,
                self._secret_key,
                algorithms=[self._algorithm],
                audience=self._audience,
                options={"verify_aud": self._audience is not None},
            )

            # Validate required fields exist before accessing them
            for field in ("sub", "exp"):
                if field not in payload:
                    raise JWTError(f"Missing required field: {field}")

            return TokenPayload(
                sub=str(payload["sub"]),
                exp=datetime.fromtimestamp(payload["exp"], tz=UTC),
                iat=datetime.fromtimestamp(payload.get("iat", 0), tz=UTC),
                role=payload.get("role"),
                email=payload.get("email"),
            )
        except JWTError:
            return None
