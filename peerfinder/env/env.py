from __future__ import annotations

from typing import Callable, Dict, Literal, Union

from pydantic import BaseModel, StrictStr

from .time_parser import TimeParser

PrimaryType = Union[str, int, float, bytes, bool]


class Env(BaseModel):
    POD_NAMESPACE: StrictStr | None = None
    PEER_FINDER_RESOLV_CONF: StrictStr = "/etc/resolv.conf"
    PEER_FINDER_POLL_INTERVAL: StrictStr = "1s"
    PEER_FINDER_DNS_TIMEOUT: StrictStr = "5s"
    PEER_FINDER_LOG_LEVEL: Literal[
        "trace", "debug", "info", "warn", "error", "critical", "fatal"
    ] = "info"
    PEER_FINDER_LOG_OUTPUT: Literal["stdout", "stderr"] = "stderr"
    PEER_FINDER_LOGS_DIRECTORY: StrictStr | None = None

    @classmethod
    def types_map(cls) -> Dict[str, Callable[[str], PrimaryType]]:
        return {
            "POD_NAMESPACE": str,
            "PEER_FINDER_RESOLV_CONF": str,
            "PEER_FINDER_POLL_INTERVAL": str,
            "PEER_FINDER_DNS_TIMEOUT": str,
            "PEER_FINDER_LOG_LEVEL": str.lower,
            "PEER_FINDER_LOG_OUTPUT": str.lower,
            "PEER_FINDER_LOGS_DIRECTORY": str,
        }

    @property
    def poll_interval_seconds(self) -> float:
        return TimeParser().parse(self.PEER_FINDER_POLL_INTERVAL)

    @property
    def dns_timeout_seconds(self) -> float:
        return TimeParser().parse(self.PEER_FINDER_DNS_TIMEOUT)
