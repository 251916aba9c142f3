"""
Startup configuration for peer discovery.
"""

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class PeerFinderConfig:
    """
    Immutable set of startup options.

    Built once by the CLI from flags and the environment, then handed to
    the domain resolver, the watcher and the peer finder facade.
    """

    service: str = ""
    """Governing service whose SRV records enumerate the peers."""

    namespace: str = ""
    """Namespace this member runs in (already merged with POD_NAMESPACE)."""

    domain: str = ""
    """Cluster domain. Inferred from the resolver configuration when empty."""

    extra_domains: str = ""
    """Comma-separated list of additional domains to probe."""

    on_start: str = ""
    """Script run once on the first actionable membership."""

    on_change: str = ""
    """Script run on every later actionable membership."""

    resolv_conf_path: str = "/etc/resolv.conf"
    """Resolver configuration consulted when no domain is configured."""

    poll_interval: float = 1.0
    """Seconds slept between lookups."""

    dns_timeout: float = 5.0
    """Upper bound in seconds for a single SRV query."""

    @property
    def start_script(self) -> str:
        """The script due on the first firing."""
        return self.on_start or self.on_change

    @property
    def extra_domain_entries(self) -> list[str]:
        return [entry for entry in self.extra_domains.split(",") if entry]
