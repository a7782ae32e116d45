"""Tenant resolution for inbound requests.

A ``TenantResolver`` turns a small, transport-neutral view of the request
(``RequestMetadata``) into a ``TenantContext``:

1. The configured ``TenantSignalStrategy`` extracts a candidate identifier.
2. No candidate: the strict policy raises ``MissingTenantError``; the lenient
   policy returns an unresolved context and logs a warning.
3. A candidate is validated against the ``TenantDirectory``; anything but an
   existing, active tenant raises ``InvalidTenantError``.

The resolver never opens a data access session and never writes to a
request scope; settling the scope is the caller's job once ``resolve()``
returned.
"""

from __future__ import annotations

import asyncio
import ipaddress
from dataclasses import dataclass, field
from enum import StrEnum
from typing import TYPE_CHECKING, Mapping, Protocol, Sequence

from jose import JWTError, jwt

from shared_kernel.middleware.exceptions import InvalidTenantError, MissingTenantError
from shared_kernel.middleware.observability import (
    DefaultTenantContextProbe,
    TenantContextProbe,
)
from shared_kernel.middleware.tenant_context import TenantContext, TenantSource
from tenancy.ports.repositories import TenantDirectory

if TYPE_CHECKING:
    from infrastructure.settings import TenancySettings


@dataclass(frozen=True)
class RequestMetadata:
    """The parts of a request tenant strategies are allowed to look at.

    Attributes:
        headers: Header values keyed by lower-cased header name.
        host: Value of the Host header, possibly with a port.
    """

    headers: Mapping[str, str] = field(default_factory=dict)
    host: str | None = None

    @classmethod
    def from_headers(cls, headers: Mapping[str, str]) -> RequestMetadata:
        """Build metadata from request headers.

        A header sent more than once keeps its first value, matching
        Starlette's ``Headers.get``. Names are compared case-insensitively.
        """
        lowered: dict[str, str] = {}
        for name, value in headers.items():
            lowered.setdefault(name.lower(), value)
        return cls(headers=lowered, host=lowered.get("host"))

    def header(self, name: str) -> str | None:
        """Header value with whitespace trimmed; None when absent or blank."""
        value = self.headers.get(name.lower())
        if value is None:
            return None
        value = value.strip()
        return value or None


class TenantSignalRejected(Exception):
    """A tenant signal is present but cannot be trusted (e.g. bad signature)."""

    def __init__(self, reason: str) -> None:
        super().__init__(reason)
        self.reason = reason


class TenantSignalStrategy(Protocol):
    """Extracts a raw tenant candidate from request metadata."""

    name: str
    source: TenantSource

    def extract(self, metadata: RequestMetadata) -> str | None:
        """Return the candidate, or None when the request carries no signal.

        Raises:
            TenantSignalRejected: The signal is present but unverifiable.
        """
        ...


class HeaderTenantStrategy:
    """Reads the tenant from a request header."""

    source: TenantSource = "header"

    def __init__(self, header_name: str = "tenant") -> None:
        self._header_name = header_name
        self.name = f"header:{header_name}"

    def extract(self, metadata: RequestMetadata) -> str | None:
        return metadata.header(self._header_name)


class ClaimTenantStrategy:
    """Reads the tenant from a claim of a signed bearer token.

    The token signature (and audience, when configured) is verified before
    the claim is trusted. A request without a bearer token carries no signal.
    """

    source: TenantSource = "claim"

    def __init__(
        self,
        secret: str,
        algorithms: Sequence[str] = ("HS256",),
        claim_name: str = "tenant",
        audience: str | None = None,
    ) -> None:
        if not secret:
            raise ValueError("ClaimTenantStrategy requires a verification secret")
        self._secret = secret
        self._algorithms = list(algorithms)
        self._claim_name = claim_name
        self._audience = audience
        self.name = f"claim:{claim_name}"

    def extract(self, metadata: RequestMetadata) -> str | None:
        authorization = metadata.header("authorization")
        if authorization is None:
            return None

        scheme, _, token = authorization.partition(" ")
        if scheme.lower() != "bearer" or not token.strip():
            return None

        try:
            claims = jwt.decode(
                token.strip(),
                self._secret,
                algorithms=self._algorithms,
                audience=self._audience,
                options={"verify_aud": self._audience is not None},
            )
        except JWTError as e:
            raise TenantSignalRejected(f"token verification failed: {e}") from e

        value = claims.get(self._claim_name)
        if value is None:
            return None
        if not isinstance(value, str):
            raise TenantSignalRejected(f"claim '{self._claim_name}' is not a string")
        return value.strip() or None


class SubdomainTenantStrategy:
    """Reads the tenant from the leading label of the request host.

    With a base domain configured (``example.com``) only hosts of the form
    ``<tenant>.example.com`` carry a signal. Without one, any host with at
    least three labels does. IP literals and apex hosts never do.
    """

    source: TenantSource = "subdomain"
    name = "subdomain"

    def __init__(self, base_domain: str | None = None) -> None:
        self._base_domain = base_domain.strip(".").lower() if base_domain else None

    @staticmethod
    def _hostname(host: str) -> str:
        host = host.strip().lower()
        if host.startswith("["):
            # Bracketed IPv6 literal, with or without port
            return host[1 : host.find("]")] if "]" in host else host
        if host.count(":") == 1:
            host = host.split(":", 1)[0]
        return host.rstrip(".")

    @staticmethod
    def _is_ip_literal(hostname: str) -> bool:
        try:
            ipaddress.ip_address(hostname)
        except ValueError:
            return False
        return True

    def extract(self, metadata: RequestMetadata) -> str | None:
        if not metadata.host:
            return None
        hostname = self._hostname(metadata.host)
        if not hostname or self._is_ip_literal(hostname):
            return None

        if self._base_domain is not None:
            suffix = f".{self._base_domain}"
            if not hostname.endswith(suffix):
                return None
            prefix = hostname[: -len(suffix)]
            if not prefix or "." in prefix:
                return None
            return prefix

        labels = hostname.split(".")
        if len(labels) < 3 or not labels[0]:
            return None
        return labels[0]


class ResolutionPolicy(StrEnum):
    """What happens when a request carries no tenant signal."""

    STRICT = "strict"
    LENIENT = "lenient"


class TenantResolver:
    """Resolves the tenant of one request using one strategy."""

    def __init__(
        self,
        strategy: TenantSignalStrategy,
        directory: TenantDirectory,
        policy: ResolutionPolicy | str = ResolutionPolicy.STRICT,
        probe: TenantContextProbe | None = None,
    ) -> None:
        """Initialize the resolver.

        Args:
            strategy: Source of the tenant candidate
            directory: Authority validating candidates
            policy: Strict (default) or lenient handling of absent signals
            probe: Optional domain probe for observability
        """
        self._strategy = strategy
        self._directory = directory
        self._policy = ResolutionPolicy(policy)
        self._probe = probe or DefaultTenantContextProbe()

    @property
    def policy(self) -> ResolutionPolicy:
        return self._policy

    async def resolve(self, metadata: RequestMetadata) -> TenantContext:
        """Produce the tenant context for a request.

        Args:
            metadata: Request view the strategy extracts the candidate from

        Returns:
            A resolved context, or an unresolved one under the lenient policy

        Raises:
            MissingTenantError: No signal under the strict policy
            InvalidTenantError: Signal unverifiable, unknown or inactive tenant
            asyncio.CancelledError: The request was cancelled mid-lookup
        """
        try:
            candidate = self._strategy.extract(metadata)
        except TenantSignalRejected as e:
            self._probe.tenant_signal_rejected(self._strategy.name, e.reason)
            raise InvalidTenantError("Tenant signal could not be verified") from e

        if candidate is None:
            if self._policy is ResolutionPolicy.LENIENT:
                self._probe.unresolved_context_allowed(self._strategy.name)
                return TenantContext.unresolved()
            self._probe.tenant_signal_missing(self._strategy.name)
            raise MissingTenantError("Tenant identifier is required")

        try:
            validation = await self._directory.validate(candidate)
        except asyncio.CancelledError:
            self._probe.resolution_cancelled(candidate)
            raise
        except Exception as e:
            self._probe.directory_lookup_failed(candidate, e)
            raise

        if not validation.valid:
            self._probe.invalid_tenant(candidate, validation.reason)
            raise InvalidTenantError(f"Unknown or inactive tenant: '{candidate}'")

        self._probe.tenant_resolved(candidate, self._strategy.source)
        return TenantContext(tenant_id=candidate, source=self._strategy.source)


def build_strategy(settings: TenancySettings) -> TenantSignalStrategy:
    """Create the strategy selected by ``MULTITENANT_TENANCY_STRATEGY``."""
    if settings.strategy == "claim":
        return ClaimTenantStrategy(
            secret=settings.claim_secret.get_secret_value(),
            algorithms=settings.claim_algorithms,
            claim_name=settings.claim_name,
            audience=settings.claim_audience,
        )
    if settings.strategy == "subdomain":
        return SubdomainTenantStrategy(base_domain=settings.base_domain)
    return HeaderTenantStrategy(header_name=settings.header_name)
