"""The signed-in customer as seen by the storefront."""

from dataclasses import dataclass


@dataclass(frozen=True)
class Identity:
    user_id: str
    display_name: str | None = None
    email: str | None = None
