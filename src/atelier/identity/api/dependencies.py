"""Request identity, read from the headers set by the authenticating proxy."""

from fastapi import Depends, Header

from atelier.identity.identity import Identity
from atelier.ordering.checkout.errors import AuthenticationRequiredError


def current_identity(
    x_user_id: str | None = Header(None),
    x_user_name: str | None = Header(None),
    x_user_email: str | None = Header(None),
) -> Identity | None:
    """The signed-in customer, or None for a guest."""
    if not x_user_id or not x_user_id.strip():
        return None
    return Identity(user_id=x_user_id.strip(), display_name=x_user_name, email=x_user_email)


def require_identity(identity: Identity | None = Depends(current_identity)) -> Identity:
    if identity is None:
        raise AuthenticationRequiredError("Sign in to continue")
    return identity
