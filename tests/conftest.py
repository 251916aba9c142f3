"""
Pytest configuration for peer-finder tests.

Configures pytest-asyncio markers and provides scripted stand-ins for the
DNS lookup and the action runner so the watcher can be driven tick by tick.
"""

from dataclasses import dataclass, field
from typing import Callable, Sequence

import pytest

from peerfinder.discovery.actions.action_runner import ActionResult
from peerfinder.discovery.dns.resolver import DNSError, SRVRecord
from peerfinder.discovery.models.peer_finder_config import PeerFinderConfig
from peerfinder.logging import LoggingConfig


KUBERNETES_RESOLV_CONF = (
    "search ns1.svc.cluster.local svc.cluster.local cluster.local\n"
    "nameserver 10.96.0.10\n"
    "options ndots:5\n"
)


def pytest_configure(config):
    """Configure custom markers."""
    config.addinivalue_line(
        "markers", "asyncio: mark test as async"
    )


@pytest.fixture(autouse=True)
def reset_logging_config():
    logging_config = LoggingConfig()
    logging_config.reset()
    yield
    logging_config.reset()


@dataclass
class ScriptedLookup:
    """
    Peer lookup returning one scripted result per call.

    Each result is either a set of peers or an exception to raise. Once the
    script runs out, the last result repeats.
    """

    results: list[set[str] | Exception]
    calls: list[list[str]] = field(default_factory=list)

    async def lookup(self, service_names: Sequence[str]) -> set[str]:
        self.calls.append(list(service_names))

        index = min(len(self.calls), len(self.results)) - 1
        result = self.results[index]

        if isinstance(result, Exception):
            raise result

        return set(result)


@dataclass
class RecordingRunner:
    """Action runner that records each invocation instead of spawning."""

    invocations: list[tuple[list[str], str]] = field(default_factory=list)
    error: Exception | None = None

    async def run(self, peers: Sequence[str], script: str) -> ActionResult:
        self.invocations.append((list(peers), script))

        if self.error:
            raise self.error

        return ActionResult(
            script=script,
            return_code=0,
            output="",
        )

    @property
    def scripts(self) -> list[str]:
        return [script for _, script in self.invocations]


@dataclass
class FakeSRVResolver:
    """SRV resolver serving records and failures from dictionaries."""

    records: dict[str, list[SRVRecord]] = field(default_factory=dict)
    failures: dict[str, str] = field(default_factory=dict)
    queried: list[str] = field(default_factory=list)

    async def resolve_srv(self, service_name: str) -> list[SRVRecord]:
        self.queried.append(service_name)

        if service_name in self.failures:
            raise DNSError(service_name, self.failures[service_name])

        return self.records.get(service_name, [])


def make_srv(target: str, port: int = 80) -> SRVRecord:
    return SRVRecord(priority=10, weight=100, port=port, target=target)


@pytest.fixture
def make_config() -> Callable[..., PeerFinderConfig]:
    def create_config(**overrides) -> PeerFinderConfig:
        values = {
            "service": "web",
            "namespace": "ns1",
            "domain": "cluster.local",
            "on_start": "/scripts/on-start.sh",
            "on_change": "/scripts/on-change.sh",
            "poll_interval": 0.0,
        }
        values.update(overrides)
        return PeerFinderConfig(**values)

    return create_config


@pytest.fixture
def resolv_conf_factory(tmp_path):
    def write_resolv_conf(contents: str = KUBERNETES_RESOLV_CONF) -> str:
        path = tmp_path / "resolv.conf"
        path.write_text(contents)
        return str(path)

    return write_resolv_conf


@pytest.fixture
def scripted_lookup() -> Callable[..., ScriptedLookup]:
    def create_lookup(*results: set[str] | Exception) -> ScriptedLookup:
        return ScriptedLookup(results=list(results))

    return create_lookup


@pytest.fixture
def recording_runner() -> RecordingRunner:
    return RecordingRunner()


@pytest.fixture
def fake_srv_resolver() -> FakeSRVResolver:
    return FakeSRVResolver()


@pytest.fixture
def srv_record() -> Callable[..., SRVRecord]:
    return make_srv
