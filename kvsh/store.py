"""Database factory."""

from .kv.base import Database


def open_database(
    path: str | None = None,
    *,
    storage: str = "disk",
    read_only: bool = False,
) -> Database:
    """Open a database handle.

    Args:
        path: Directory of the disk database. Required when
            ``storage="disk"``.
        storage: ``"disk"`` (default) or ``"memory"``.
        read_only: Refuse read-write transactions. A read-only disk
            database must already exist.

    Returns:
        An open ``Database``; close it (or use it as a context manager)
        when done.

    Raises:
        OpenError: If the disk database cannot be opened.
    """
    if storage == "memory":
        from .kv.memory import Memory

        return Memory(read_only=read_only)
    if storage == "disk":
        if not path:
            raise ValueError("path is required when storage='disk'")
        from .kv.disk import Disk

        return Disk(path, read_only=read_only)
    raise ValueError(f"Unknown storage: {storage!r}")
