"""
DNS-based peer discovery.

Finds the members of a governing service from its SRV records, waits until
this member is visible among them, and runs a script with the sorted peer
list whenever the membership changes.

Usage:
    from peerfinder.discovery import PeerFinder, PeerFinderConfig

    finder = PeerFinder(
        PeerFinderConfig(
            service="web",
            namespace="ns1",
            on_change="/scripts/on-change.sh",
        )
    )
    await finder.run()
"""

# Errors
from peerfinder.discovery.errors import (
    ActionInvocationError as ActionInvocationError,
    ConfigurationError as ConfigurationError,
    PeerFinderError as PeerFinderError,
)

# Models
from peerfinder.discovery.models import (
    PeerFinderConfig as PeerFinderConfig,
    WatcherState as WatcherState,
)

# Domains
from peerfinder.discovery.domains import (
    DomainResolver as DomainResolver,
)

# DNS
from peerfinder.discovery.dns import (
    DNSError as DNSError,
    PeerLookup as PeerLookup,
    SRVRecord as SRVRecord,
    SRVResolver as SRVResolver,
)

# Actions
from peerfinder.discovery.actions import (
    ActionResult as ActionResult,
    ActionRunner as ActionRunner,
)

# Watcher
from peerfinder.discovery.watcher import (
    MembershipWatcher as MembershipWatcher,
)

# Facade
from peerfinder.discovery.peer_finder import (
    PeerFinder as PeerFinder,
    qualified_service_names as qualified_service_names,
    self_identity as self_identity,
    validate_config as validate_config,
)
