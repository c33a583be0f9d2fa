"""Asset and owner identifiers.

Both are opaque values supplied by an external identity collaborator and
serialize as bare strings.
INVARIANT: identifiers are immutable and compared by value.
"""

from __future__ import annotations

from typing import Annotated

from pydantic import ConfigDict, Field, RootModel

MAINTENANCE_OWNER = "MAINTENANCE"
WITHDRAWAL_OWNER = "WITHDRAWAL"

RESERVED_OWNER_IDS: frozenset[str] = frozenset({MAINTENANCE_OWNER, WITHDRAWAL_OWNER})

_NonEmpty = Annotated[str, Field(min_length=1)]


class AssetId(RootModel[_NonEmpty]):
    """Identifier of the asset whose availability is tracked."""

    model_config = ConfigDict(frozen=True)

    @classmethod
    def of(cls, value: str) -> AssetId:
        return cls(value.strip())

    @property
    def value(self) -> str:
        return self.root

    def __str__(self) -> str:
        return self.root


class OwnerId(RootModel[_NonEmpty]):
    """Identifier of a lock holder (a tenant or a sentinel)."""

    model_config = ConfigDict(frozen=True)

    @classmethod
    def of(cls, value: str) -> OwnerId:
        return cls(value.strip())

    @property
    def value(self) -> str:
        return self.root

    def is_reserved(self) -> bool:
        """True for the sentinel owners used by maintenance and withdrawal locks."""
        return self.root in RESERVED_OWNER_IDS

    def __str__(self) -> str:
        return self.root
