from restarter.snapshot.restore import PositionRestorer
from restarter.snapshot.store import PositionSnapshotStore

__all__ = ["PositionRestorer", "PositionSnapshotStore"]
