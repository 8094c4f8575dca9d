"""Supabase identity provider adapter."""

from .client import MockIdentityClient, RealSupabaseIdentityClient

__all__ = ["RealSupabaseIdentityClient", "MockIdentityClient"]
