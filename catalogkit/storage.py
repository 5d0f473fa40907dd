"""Durable storage for the product catalog.

The whole catalog lives in a single file that is only ever replaced
atomically: payloads are written to a temporary sibling, fsynced and then
``os.replace``d over the live path. Backups (``.bakN``) are rotated before
each write by copying the live file, so the live path never disappears and a
concurrent reader always sees a complete catalog.

Writers serialise through :meth:`CatalogStore.mutate`, which holds a
process-wide lock for the full load/mutate/save sequence. Every store that
points at the same resolved path shares that lock.
"""
from __future__ import annotations

import logging
import os
import shutil
import threading
import weakref
from pathlib import Path
from typing import Callable, Iterable, List, Sequence

from .codec import CatalogCodec, JsonCodec
from .errors import CorruptDataError, StoreError
from .models import Product

logger = logging.getLogger(__name__)

Mutator = Callable[[List[Product]], Iterable[Product] | None]

# Entries drop out once no store holds the lock any more.
_LOCKS: weakref.WeakValueDictionary[Path, threading.RLock] = weakref.WeakValueDictionary()
_LOCKS_GUARD = threading.Lock()


def _lock_for(path: Path) -> threading.RLock:
    with _LOCKS_GUARD:
        lock = _LOCKS.get(path)
        if lock is None:
            lock = _LOCKS[path] = threading.RLock()
        return lock


class CatalogStore:
    """Single-file catalog store with atomic writes and rotating backups."""

    def __init__(
        self,
        path: Path | str,
        codec: CatalogCodec | None = None,
        backups: int = 2,
        *,
        recover_from_backup: bool = False,
        recovery_label: str = "product catalog",
    ) -> None:
        self.path = Path(path).resolve()
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise StoreError(f"Cannot create catalog directory: {exc}") from exc
        self.codec = codec or JsonCodec()
        self.backups = max(0, backups)
        self.recover_from_backup = recover_from_backup
        self._recovery_label = recovery_label
        self._lock = _lock_for(self.path)

    # ------------------------------------------------------------------
    # Persistence helpers
    # ------------------------------------------------------------------
    def _backup_path(self, index: int) -> Path:
        return self.path.with_suffix(self.path.suffix + f".bak{index}")

    def _backup_paths(self) -> list[Path]:
        return [self._backup_path(idx) for idx in range(1, self.backups + 1)]

    def _read_catalog(self, path: Path) -> List[Product] | None:
        try:
            raw = path.read_bytes()
        except FileNotFoundError:
            return None
        except OSError as exc:
            raise StoreError(f"Failed to read {path.name}: {exc}") from exc
        return self.codec.decode(raw)

    def _write_atomic(self, payload: bytes) -> None:
        tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        try:
            with tmp_path.open("wb") as fh:
                fh.write(payload)
                fh.flush()
                os.fsync(fh.fileno())
            os.replace(tmp_path, self.path)
        except OSError as exc:
            raise StoreError(f"Failed to write {self.path.name}: {exc}") from exc
        finally:
            tmp_path.unlink(missing_ok=True)

    def _rotate_backups(self) -> None:
        if self.backups <= 0 or not self.path.exists():
            return
        for idx in range(self.backups, 1, -1):
            src = self._backup_path(idx - 1)
            if src.exists():
                try:
                    os.replace(src, self._backup_path(idx))
                except OSError as exc:
                    logger.warning("Could not rotate %s: %s", src.name, exc)
        try:
            shutil.copy2(self.path, self._backup_path(1))
        except OSError as exc:
            logger.warning("Could not back up %s: %s", self.path.name, exc)

    def _recover(self, error: CorruptDataError) -> List[Product]:
        for candidate in self._backup_paths():
            try:
                data = self._read_catalog(candidate)
            except CorruptDataError:
                continue
            if data is not None:
                logger.warning("Recovered %s from backup %s", self._recovery_label, candidate.name)
                return data
        raise error

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------
    def load(self) -> List[Product]:
        """Return the most recently saved catalog, or ``[]`` if none exists."""

        try:
            data = self._read_catalog(self.path)
        except CorruptDataError as exc:
            if not self.recover_from_backup:
                raise
            return self._recover(exc)
        return data if data is not None else []

    def save(self, catalog: Sequence[Product]) -> List[Product]:
        snapshot = list(catalog)
        payload = self.codec.encode(snapshot)
        with self._lock:
            self._rotate_backups()
            self._write_atomic(payload)
        return snapshot

    def mutate(self, mutator: Mutator) -> List[Product]:
        """Run ``mutator`` against a fresh snapshot and persist the result.

        The lock is held from load until the save completes. ``mutator`` may
        edit the list in place and return ``None`` or return a replacement.
        Nothing is written if it raises.
        """

        with self._lock:
            snapshot = self.load()
            outcome = mutator(snapshot)
            updated = snapshot if outcome is None else list(outcome)
            return self.save(updated)
