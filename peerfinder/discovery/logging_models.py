"""
Logging models for peer discovery.

Discovery entries identify the governing service and the identity this
member expects to find in DNS. Action entries identify the script run.
"""

from peerfinder.logging.models import Entry, LogLevel


class DiscoveryDebug(Entry, kw_only=True):
    service: str
    self_identity: str
    level: LogLevel = LogLevel.DEBUG


class DiscoveryInfo(Entry, kw_only=True):
    service: str
    self_identity: str
    level: LogLevel = LogLevel.INFO


class DiscoveryWarning(Entry, kw_only=True):
    service: str
    self_identity: str
    level: LogLevel = LogLevel.WARN


class DiscoveryFatal(Entry, kw_only=True):
    service: str
    self_identity: str = ""
    level: LogLevel = LogLevel.FATAL


class DomainInfo(Entry, kw_only=True):
    """Startup domain resolution, before any self identity exists."""
    namespace: str
    domains: list[str]
    level: LogLevel = LogLevel.INFO


class ActionInfo(Entry, kw_only=True):
    script: str
    level: LogLevel = LogLevel.INFO


class ActionError(Entry, kw_only=True):
    script: str
    return_code: int | None = None
    level: LogLevel = LogLevel.ERROR
