"""Locks that serialise read-compute-write sequences against one spreadsheet."""

from __future__ import annotations

import contextlib
import hashlib
import os
import threading
import time
from typing import Iterator

# Support Unix (fcntl) and Windows (msvcrt)
try:  # pragma: no cover - platform dependent import
    import fcntl

    _HAS_FCNTL = True
except ImportError:  # pragma: no cover - Windows fallback
    _HAS_FCNTL = False
    import msvcrt


@contextlib.contextmanager
def file_lock(lock_path: str, timeout: float = 0) -> Iterator[None]:
    """Acquire a file-based lock with optional timeout.

    Args:
        lock_path: Destination path for the lock file.
        timeout: Seconds to keep trying to acquire the lock. If 0, try once.

    Raises:
        TimeoutError: If the lock cannot be acquired before the timeout expires.
    """

    directory = os.path.dirname(lock_path) or "."
    os.makedirs(directory, exist_ok=True)
    f = open(lock_path, "a+")
    start = time.time()

    def _try_lock() -> bool:
        if _HAS_FCNTL:
            try:
                fcntl.flock(f.fileno(), fcntl.LOCK_EX | fcntl.LOCK_NB)
                return True
            except BlockingIOError:
                return False
        else:  # pragma: no cover - Windows specific path
            try:
                msvcrt.locking(f.fileno(), msvcrt.LK_NBLCK, 1)
                return True
            except OSError:
                return False

    acquired = _try_lock()
    while not acquired and timeout > 0 and (time.time() - start) < timeout:
        time.sleep(0.05)
        acquired = _try_lock()

    if not acquired:
        f.close()
        raise TimeoutError(f"Could not acquire lock: {lock_path}")

    try:
        f.seek(0)
        f.truncate(0)
        f.write(str(os.getpid()))
        f.flush()
        yield
    finally:
        try:
            if _HAS_FCNTL:
                fcntl.flock(f.fileno(), fcntl.LOCK_UN)
            else:  # pragma: no cover - Windows specific path
                try:
                    msvcrt.locking(f.fileno(), msvcrt.LK_UNLCK, 1)
                except OSError:
                    pass
        finally:
            f.close()


_registry_guard = threading.Lock()
_thread_locks: dict[str, threading.Lock] = {}


def _thread_lock_for(resource_id: str) -> threading.Lock:
    with _registry_guard:
        return _thread_locks.setdefault(resource_id, threading.Lock())


class ResourceLock:
    """Per-resource mutual exclusion.

    Always serialises threads of this process; when ``lock_dir`` is set it also
    takes a file lock so workers sharing the host are serialised too.
    """

    def __init__(self, resource_id: str, lock_dir: str | None = None, timeout: float = 30) -> None:
        self.resource_id = resource_id
        self.lock_dir = lock_dir
        self.timeout = timeout

    @property
    def lock_path(self) -> str | None:
        if not self.lock_dir:
            return None
        digest = hashlib.sha1(self.resource_id.encode("utf-8")).hexdigest()[:16]
        return os.path.join(self.lock_dir, f"sheet-{digest}.lock")

    @contextlib.contextmanager
    def hold(self) -> Iterator[None]:
        thread_lock = _thread_lock_for(self.resource_id)
        if not thread_lock.acquire(timeout=self.timeout):
            raise TimeoutError(f"Could not acquire lock for {self.resource_id}")
        try:
            path = self.lock_path
            if path is None:
                yield
            else:
                with file_lock(path, timeout=self.timeout):
                    yield
        finally:
            thread_lock.release()
