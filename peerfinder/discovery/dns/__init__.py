from .resolver import (
    DNSError as DNSError,
    PeerLookup as PeerLookup,
    SRVRecord as SRVRecord,
    SRVResolver as SRVResolver,
    strip_root_separator as strip_root_separator,
)
