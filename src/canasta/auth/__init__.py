"""Identity gateway for Canasta."""

from .gateway import AuthExchangeError, IdentityGateway, SqlIdentityGateway, User

__all__ = ["AuthExchangeError", "IdentityGateway", "SqlIdentityGateway", "User"]
