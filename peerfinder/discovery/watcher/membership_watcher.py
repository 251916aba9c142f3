"""
Membership polling loop.

The watcher looks up the peer set once per tick and fires the active script
when the set is actionable: it differs from the last accepted set AND it
contains this member's own identity. Until this member shows up in DNS,
nothing fires, however much the rest of the set moves.

The first firing uses the on-start script (or on-change when no on-start
was given). Every later firing uses on-change. When on-change is empty the
loop ends after the first firing.
"""

import asyncio
from typing import Iterable, Protocol, Sequence

from peerfinder.discovery.actions.action_runner import ActionResult, ActionRunner
from peerfinder.discovery.dns.resolver import DNSError, PeerLookup, SRVResolver
from peerfinder.discovery.logging_models import (
    DiscoveryDebug,
    DiscoveryInfo,
    DiscoveryWarning,
)
from peerfinder.discovery.models.peer_finder_config import PeerFinderConfig
from peerfinder.discovery.models.watcher_state import WatcherState
from peerfinder.logging import Logger


class SupportsLookup(Protocol):
    async def lookup(self, service_names: Sequence[str]) -> set[str]: ...


class SupportsRun(Protocol):
    async def run(self, peers: Sequence[str], script: str) -> ActionResult: ...


class MembershipWatcher:
    def __init__(
        self,
        config: PeerFinderConfig,
        service_names: Iterable[str],
        self_identity: str,
        lookup: SupportsLookup | None = None,
        runner: SupportsRun | None = None,
        logger: Logger | None = None,
    ) -> None:
        self._config = config
        self._service_names = list(service_names)
        self._self_identity = self_identity
        self._logger = logger or Logger()

        if lookup is None:
            lookup = PeerLookup(
                resolver=SRVResolver(
                    resolution_timeout_seconds=config.dns_timeout,
                )
            )

        self._lookup = lookup
        self._runner = runner or ActionRunner(logger=self._logger)

        self._peers: frozenset[str] = frozenset()
        self._script = config.start_script
        self._state = WatcherState.AWAITING_SELF

    @property
    def peers(self) -> frozenset[str]:
        """The membership last delivered to a script."""
        return self._peers

    @property
    def script(self) -> str:
        """The script due on the next actionable tick."""
        return self._script

    @property
    def state(self) -> WatcherState:
        return self._state

    @property
    def self_identity(self) -> str:
        return self._self_identity

    @property
    def service_names(self) -> list[str]:
        return list(self._service_names)

    def is_actionable(self, new_peers: set[str] | frozenset[str]) -> bool:
        return not (
            new_peers == self._peers or self._self_identity not in new_peers
        )

    async def tick(self) -> bool:
        """
        Run one lookup and fire the active script if the result is
        actionable. Returns True when the script ran.

        Lookup failures are logged and leave all state untouched. Script
        failures propagate as ``ActionInvocationError``.
        """
        if not self._script:
            return False

        try:
            new_peers = await self._lookup.lookup(self._service_names)

        except DNSError as err:
            await self._logger.log(
                DiscoveryWarning(
                    message=str(err),
                    service=self._config.service,
                    self_identity=self._self_identity,
                )
            )
            return False

        await self._logger.log(
            DiscoveryDebug(
                message=f"Lookup returned {len(new_peers)} peers",
                service=self._config.service,
                self_identity=self._self_identity,
            )
        )

        if self._self_identity in new_peers:
            self._state = WatcherState.TRACKING

        if not self.is_actionable(new_peers):
            await self._logger.log(
                DiscoveryInfo(
                    message=(
                        "Have not found myself in list yet.\n"
                        f"My Hostname: {self._self_identity}\n"
                        f"Hosts in list: {', '.join(sorted(new_peers))}"
                    ),
                    service=self._config.service,
                    self_identity=self._self_identity,
                )
            )
            return False

        peer_list = sorted(new_peers)

        await self._logger.log(
            DiscoveryInfo(
                message=f"Peer list updated\nwas {sorted(self._peers)}\nnow {peer_list}",
                service=self._config.service,
                self_identity=self._self_identity,
            )
        )

        await self._runner.run(peer_list, self._script)

        self._peers = frozenset(new_peers)
        self._script = self._config.on_change

        return True

    async def run(self):
        """
        Poll until the active script is empty, sleeping the poll interval
        after every tick.
        """
        while self._script:
            await self.tick()
            await asyncio.sleep(self._config.poll_interval)

        await self._logger.log(
            DiscoveryInfo(
                message="Peer finder exiting",
                service=self._config.service,
                self_identity=self._self_identity,
            )
        )
