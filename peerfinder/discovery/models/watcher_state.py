from enum import Enum


class WatcherState(Enum):
    AWAITING_SELF = "awaiting_self"
    TRACKING = "tracking"
