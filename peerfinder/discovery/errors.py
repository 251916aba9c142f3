"""
Exceptions raised by peer discovery.

Configuration and action failures are fatal to the process. DNS failures
live beside the resolver (``peerfinder.discovery.dns.resolver.DNSError``)
and are retried by the watcher on its next tick.
"""


class PeerFinderError(Exception):
    """Base class for every peer-finder failure."""


class ConfigurationError(PeerFinderError):
    """
    Raised at startup when required inputs are missing, the resolver
    configuration cannot be read, or no cluster domain could be determined.
    """


class ActionInvocationError(PeerFinderError):
    """
    Raised when an on-start or on-change script cannot be launched or exits
    with a non-zero status. There is no retry.
    """

    def __init__(
        self,
        script: str,
        message: str,
        output: str = "",
        return_code: int | None = None,
    ):
        self.script = script
        self.output = output
        self.return_code = return_code
        super().__init__(f"Failed to execute {script}: {output}, err: {message}")
