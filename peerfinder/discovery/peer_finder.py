"""
Peer finder facade.

Wires domain resolution, SRV lookup, the membership watcher and the action
runner from a single ``PeerFinderConfig``.

Usage:
    config = PeerFinderConfig(
        service="web",
        namespace="ns1",
        on_start="/scripts/on-start.sh",
        on_change="/scripts/on-change.sh",
    )

    finder = PeerFinder(config)
    await finder.run()
"""

import socket
from dataclasses import dataclass, field

from peerfinder.discovery.domains.domain_resolver import DomainResolver
from peerfinder.discovery.errors import ConfigurationError
from peerfinder.discovery.logging_models import DiscoveryInfo
from peerfinder.discovery.models.peer_finder_config import PeerFinderConfig
from peerfinder.discovery.watcher.membership_watcher import (
    MembershipWatcher,
    SupportsLookup,
    SupportsRun,
)
from peerfinder.logging import Logger


INCOMPLETE_ARGS_MESSAGE = (
    "Incomplete args, require -on-change and/or -on-start, -service and -ns "
    "or an env var for POD_NAMESPACE."
)


def validate_config(config: PeerFinderConfig, primary_domain: str) -> None:
    if (
        not config.service
        or not primary_domain
        or (not config.on_change and not config.on_start)
    ):
        raise ConfigurationError(INCOMPLETE_ARGS_MESSAGE)


def self_identity(hostname: str, service: str, primary_domain: str) -> str:
    return ".".join([hostname, service, primary_domain])


def qualified_service_names(service: str, domains: list[str]) -> list[str]:
    return [".".join([service, domain]) for domain in domains]


@dataclass
class PeerFinder:
    """
    Startup and run loop for peer discovery.

    ``start()`` resolves domains, validates the configuration and builds the
    watcher. ``run()`` does the same and then polls until the watcher has no
    script left to fire.
    """

    config: PeerFinderConfig
    """Startup configuration."""

    hostname: str | None = None
    """Local hostname. Looked up from the OS when not given."""

    lookup: SupportsLookup | None = None
    """Peer lookup override. Defaults to an aiodns-backed lookup."""

    runner: SupportsRun | None = None
    """Action runner override. Defaults to running scripts in a shell."""

    logger: Logger = field(default_factory=Logger)

    _domains: list[str] = field(default_factory=list, init=False)
    _watcher: MembershipWatcher | None = field(default=None, init=False)

    @property
    def domains(self) -> list[str]:
        return list(self._domains)

    @property
    def watcher(self) -> MembershipWatcher | None:
        return self._watcher

    async def start(self) -> MembershipWatcher:
        hostname = self.hostname
        if hostname is None:
            try:
                hostname = socket.gethostname()

            except OSError as err:
                raise ConfigurationError(f"Failed to get hostname: {err}") from err

        resolver = DomainResolver(self.config, logger=self.logger)
        self._domains = await resolver.resolve()

        primary_domain = self._domains[0]
        validate_config(self.config, primary_domain)

        identity = self_identity(hostname, self.config.service, primary_domain)

        if not self.config.on_start:
            await self.logger.log(
                DiscoveryInfo(
                    message=(
                        f"No on-start supplied, on-change {self.config.on_change} "
                        "will be applied on start."
                    ),
                    service=self.config.service,
                    self_identity=identity,
                )
            )

        self._watcher = MembershipWatcher(
            self.config,
            qualified_service_names(self.config.service, self._domains),
            identity,
            lookup=self.lookup,
            runner=self.runner,
            logger=self.logger,
        )

        return self._watcher

    async def run(self):
        watcher = await self.start()
        await watcher.run()
