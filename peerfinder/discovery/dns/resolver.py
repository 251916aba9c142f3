"""
SRV lookups for peer discovery.

Each member of the governing service is published as an SRV record under
``<service>.<domain>``. The record targets are the members' fully-qualified
hostnames, which make up the peer set.
"""

import asyncio
from dataclasses import dataclass, field
from typing import Protocol, Sequence

import aiodns


class DNSError(Exception):
    """Raised when an SRV lookup fails."""

    def __init__(
        self,
        hostname: str,
        message: str,
        peers: set[str] | None = None,
    ):
        self.hostname = hostname
        self.reason = message
        # Peers collected from the names queried before the failing one.
        self.peers: set[str] = peers if peers is not None else set()
        super().__init__(f"DNS resolution failed for '{hostname}': {message}")


@dataclass(slots=True)
class SRVRecord:
    """Represents a DNS SRV record."""

    priority: int
    """Priority of the target host (lower values are preferred)."""

    weight: int
    """Weight for hosts with the same priority."""

    port: int
    """Port number of the service."""

    target: str
    """Target hostname, as returned by the resolver."""


def strip_root_separator(target: str) -> str:
    """Remove the single trailing "." naming the DNS root, if present."""
    if target.endswith("."):
        return target[:-1]

    return target


class SupportsSRV(Protocol):
    async def resolve_srv(self, service_name: str) -> list[SRVRecord]: ...


@dataclass
class SRVResolver:
    """
    Resolves SRV records with aiodns.

    The aiodns resolver needs a running event loop, so it is created on
    first use unless one is supplied.
    """

    resolution_timeout_seconds: float = 5.0
    """Timeout for an individual SRV query."""

    aiodns_resolver: aiodns.DNSResolver | None = field(default=None, repr=False)

    async def resolve_srv(self, service_name: str) -> list[SRVRecord]:
        """
        Resolve the SRV records published under ``service_name``.

        Args:
            service_name: Fully-qualified name, e.g. ``web.ns1.svc.cluster.local``

        Returns:
            SRV records in resolver order

        Raises:
            DNSError: If the query fails, times out or returns no records
        """
        if self.aiodns_resolver is None:
            self.aiodns_resolver = aiodns.DNSResolver()

        try:
            srv_results = await asyncio.wait_for(
                self.aiodns_resolver.query(service_name, "SRV"),
                timeout=self.resolution_timeout_seconds,
            )

        except asyncio.TimeoutError:
            raise DNSError(
                service_name,
                f"SRV resolution timeout ({self.resolution_timeout_seconds}s)",
            )

        except aiodns.error.DNSError as exc:
            raise DNSError(service_name, f"SRV query failed: {exc}") from exc

        if not srv_results:
            raise DNSError(service_name, "No SRV records returned")

        return [
            SRVRecord(
                priority=srv.priority,
                weight=srv.weight,
                port=srv.port,
                target=srv.host,
            )
            for srv in srv_results
        ]


@dataclass
class PeerLookup:
    """
    Collects the peer set for a list of qualified service names.

    Names are queried one at a time, in order. The first failure ends the
    lookup; the peers gathered so far travel on the raised ``DNSError``.
    """

    resolver: SupportsSRV = field(default_factory=SRVResolver)

    async def lookup(self, service_names: Sequence[str]) -> set[str]:
        peers: set[str] = set()

        for service_name in service_names:
            try:
                records = await self.resolver.resolve_srv(service_name)

            except DNSError as err:
                raise DNSError(err.hostname, err.reason, peers=peers) from err

            for record in records:
                peers.add(strip_root_separator(record.target))

        return peers
