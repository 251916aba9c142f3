from .membership_watcher import MembershipWatcher as MembershipWatcher
