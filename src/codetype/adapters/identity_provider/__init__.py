"""IdentityProviderAdmin adapters."""

from .http import HttpIdentityProviderAdmin

__all__ = ["HttpIdentityProviderAdmin"]
