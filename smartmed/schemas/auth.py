from uuid import UUID

from pydantic import BaseModel


class AuthUser(BaseModel):
    """User as reported by the identity provider."""

    id: UUID
    email: str | None = None
    role: str | None = None


class AuthError(BaseModel):
    message: str
    status: int | None = None


class AuthUserResponse(BaseModel):
    """
    Result of asking the identity provider for the session's user.
    Exactly one of ``user`` / ``error`` is set.
    """

    user: AuthUser | None = None
    error: AuthError | None = None


class MenuLink(BaseModel):
    label: str
    href: str


class AccountMenu(BaseModel):
    name: str
    email: str
    links: list[MenuLink]
