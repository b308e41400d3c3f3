"""Auth request and response models with validation."""

from pydantic import BaseModel, Field

from tickify.models.user import Role


class LoginRequest(BaseModel):
    """Login credentials for authentication.

    Attributes:
        username: User's unique name (min 3 chars)
        password: User's password (8-100 chars)
    """

    username: str = Field(..., min_length=3)
    password: str = Field(..., min_length=8, max_length=100)


class TokenResponse(BaseModel):
    """Successful authentication response carrying a bearer token."""

    token: str


class VerifyTokenRequest(BaseModel):
    """Request to check whether a token is valid."""

    token: str


class TokenClaims(BaseModel):
    """Claims carried inside a signed access token.

    Attributes:
        sub: Username of the token holder
        role: Role at issuance time
        iat: Issued-at, seconds since epoch
        exp: Expiry, seconds since epoch
    """

    sub: str
    role: Role
    iat: int
    exp: int
