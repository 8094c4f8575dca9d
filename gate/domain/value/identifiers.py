"""Strongly typed identifiers for gate domain entities.

Local records use UUIDs. Identity-provider ids are opaque strings owned by
the provider, so they are typed separately to keep them from being mixed up
with local ids.
"""

from typing import NewType
from uuid import UUID

OperatorId = NewType("OperatorId", UUID)
StoreId = NewType("StoreId", UUID)

# Reference into the external identity provider (weak, never owned)
ExternalIdentityId = NewType("ExternalIdentityId", str)
