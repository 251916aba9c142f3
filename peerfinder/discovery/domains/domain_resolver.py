"""
Cluster domain resolution for peer discovery.

Derives the ordered list of domains the governing service is queried under.
The first domain is the primary domain: it is the one this member's own
identity lives under. Additional domains extend the search for multi-cluster
peer finding.

When no cluster domain is configured, it is inferred from the ``search``
directive of the resolver configuration, e.g. a Kubernetes pod's:

    search ns1.svc.cluster.local svc.cluster.local cluster.local
    nameserver 10.96.0.10
    options ndots:5

Without a namespace the whole ``<label>.svc.<suffix>`` token is the domain.
With a namespace the ``svc.<suffix>`` token is matched and the namespace is
prepended.
"""

import asyncio
import re

from peerfinder.discovery.errors import ConfigurationError
from peerfinder.discovery.logging_models import DomainInfo
from peerfinder.discovery.models.peer_finder_config import PeerFinderConfig
from peerfinder.logging import Logger


SEARCH_DIRECTIVE = re.compile(r"^search\s", flags=re.MULTILINE)

# The dots around "svc" are unescaped and match any character. Domains
# produced here must stay byte-for-byte stable.
SERVICE_DOMAIN_PATTERN = re.compile(
    r"[a-zA-Z0-9-]{1,63}.svc.([a-zA-Z0-9-]{1,63}\.)*[a-zA-Z0-9]{2,63}"
)

NAMESPACED_DOMAIN_PATTERN = re.compile(
    r"svc.([a-zA-Z0-9-]{1,63}\.)*[a-zA-Z0-9]{2,63}"
)

LOCAL_SUFFIX = ".local"


def infer_domain(resolv_conf: str, namespace: str = "") -> str:
    """
    Infer the primary domain from resolver configuration text.

    Candidates are the positions following whitespace anywhere after the
    first ``search`` directive. The last candidate the domain pattern
    matches at wins, scanning back from the end of the text.

    Returns an empty string when no candidate has the expected shape.
    """
    search = SEARCH_DIRECTIVE.search(resolv_conf)
    if search is None:
        return ""

    pattern = NAMESPACED_DOMAIN_PATTERN if namespace else SERVICE_DOMAIN_PATTERN

    for start in range(len(resolv_conf) - 1, search.end() - 1, -1):
        if not resolv_conf[start - 1].isspace():
            continue

        match = pattern.match(resolv_conf, start)
        if match is None:
            continue

        if namespace:
            return f"{namespace}.{match.group(0)}"

        return match.group(0)

    return ""


def extra_domain(namespace: str, entry: str) -> str:
    if entry.endswith(LOCAL_SUFFIX):
        return ".".join([namespace, "svc", entry])

    return ".".join([namespace, "svc", entry, "local"])


class DomainResolver:
    """
    Resolves the primary and extra domains for a peer finder configuration.

    Resolution happens once at startup; the resolver configuration file is
    read at most once per resolver.
    """

    def __init__(
        self,
        config: PeerFinderConfig,
        logger: Logger | None = None,
    ) -> None:
        self._config = config
        self._logger = logger or Logger()
        self._resolv_conf: str | None = None

    def primary_domain(self) -> str:
        if self._config.domain:
            return ".".join([self._config.namespace, "svc", self._config.domain])

        return infer_domain(
            self._read_resolv_conf(),
            namespace=self._config.namespace,
        )

    def extra_domains(self) -> list[str]:
        return [
            extra_domain(self._config.namespace, entry)
            for entry in self._config.extra_domain_entries
        ]

    async def resolve(self) -> list[str]:
        loop = asyncio.get_running_loop()

        primary = await loop.run_in_executor(None, self.primary_domain)

        if not self._config.domain:
            await self._logger.log(
                DomainInfo(
                    message=f"Determined Domain to be {primary}",
                    namespace=self._config.namespace,
                    domains=[primary],
                )
            )

        domains = [primary, *self.extra_domains()]

        await self._logger.log(
            DomainInfo(
                message=f"Following domains will be searched {domains}",
                namespace=self._config.namespace,
                domains=domains,
            )
        )

        return domains

    def _read_resolv_conf(self) -> str:
        if self._resolv_conf is None:
            try:
                with open(self._config.resolv_conf_path) as resolv_conf:
                    self._resolv_conf = resolv_conf.read()

            except OSError as err:
                raise ConfigurationError(
                    f"Unable to read {self._config.resolv_conf_path}: {err}"
                ) from err

        return self._resolv_conf
