from .peer_finder_config import PeerFinderConfig as PeerFinderConfig
from .watcher_state import WatcherState as WatcherState
