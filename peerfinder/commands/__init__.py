from .root import (
    peer_finder as peer_finder,
    run as run,
)
