"""
Persistence for the dashboard snapshot.

Usage:
    from tickerdash.storage import SnapshotStore, create_store

    snapshots = SnapshotStore(create_store("file", ".tickerdash"))
    snapshot = snapshots.load()
"""

from .backends import FileStore, KeyValueStore, MemoryStore, create_store
from .snapshot import SnapshotStore, decode_snapshot, encode_snapshot

__all__ = [
    'KeyValueStore', 'MemoryStore', 'FileStore', 'create_store',
    'SnapshotStore', 'encode_snapshot', 'decode_snapshot',
]
