"""
Persistência do Spaceflow.

API pública exposta:
    - save_snapshot / load_snapshot → JSON determinístico de um snapshot
    - SnapshotStore                 → um arquivo por Space (save/load/list/delete)
"""

from .snapshot_store import SnapshotStore, load_snapshot, save_snapshot

__all__ = ["SnapshotStore", "load_snapshot", "save_snapshot"]
