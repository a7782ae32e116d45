"""Value objects for the tenancy domain."""

from __future__ import annotations

import re
from dataclasses import dataclass

from ulid import ULID

_TENANT_ID_PATTERN = re.compile(r"^[A-Za-z0-9][A-Za-z0-9_-]{0,63}$")


@dataclass(frozen=True)
class TenantId:
    """Identifier for a Tenant aggregate.

    Tenant ids are chosen by administrators (for example ``acme`` so they can
    double as subdomain labels) or generated as ULIDs. Either way they are
    1-64 characters of letters, digits, ``-`` and ``_``, starting with a
    letter or digit. Ids are compared exactly; no case folding.
    """

    value: str

    def __post_init__(self) -> None:
        if not _TENANT_ID_PATTERN.match(self.value):
            raise ValueError(f"Invalid TenantId: {self.value!r}")

    def __str__(self) -> str:
        """Return string representation."""
        return self.value

    @classmethod
    def generate(cls) -> TenantId:
        """Generate a new TenantId using ULID."""
        return cls(value=str(ULID()))

    @classmethod
    def from_string(cls, value: str) -> TenantId:
        """Create TenantId from a raw string, trimming surrounding whitespace.

        Raises:
            ValueError: If the value is not a well-formed tenant id
        """
        return cls(value=value.strip())

    @classmethod
    def is_well_formed(cls, value: str) -> bool:
        return bool(_TENANT_ID_PATTERN.match(value))
