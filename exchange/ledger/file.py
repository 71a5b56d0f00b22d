"""Directory-backed ledger: one file per key."""

from __future__ import annotations

import os
import re
import tempfile
import threading
import uuid
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

import structlog

from exchange.errors import StoreFailure
from exchange.ledger.base import BufferedTransaction

logger = structlog.get_logger()

_KEY_RE = re.compile(r"[A-Za-z0-9_.-]+")


class _FileSnapshot:
    """Lazy read-only view of the committed files."""

    def __init__(self, ledger: FileLedger) -> None:
        self._ledger = ledger

    def get(self, key: str) -> bytes | None:
        return self._ledger._read_committed(key)


class FileLedger:
    """Ledger persisted under a directory, with atomic per-key replacement.

    Transactions are serialized within one process. Staged writes are
    flushed to temporary files and moved into place only after the
    transaction body succeeds.
    """

    def __init__(self, root: str | Path) -> None:
        self.root = Path(root)
        try:
            self.root.mkdir(parents=True, exist_ok=True)
        except OSError as err:
            raise StoreFailure(f"cannot create ledger directory {self.root}: {err}") from err
        self._lock = threading.Lock()

    def path_for(self, key: str) -> Path:
        if not _KEY_RE.fullmatch(key) or key in (".", ".."):
            raise StoreFailure(f"invalid ledger key: {key!r}")
        return self.root / f"{key}.json"

    @contextmanager
    def transaction(self, caller: str) -> Iterator[BufferedTransaction]:
        with self._lock:
            tx = BufferedTransaction(_FileSnapshot(self), caller, uuid.uuid4().hex)
            yield tx
            for key, data in tx.pending.items():
                self._write_committed(key, data)
            if tx.pending:
                logger.debug("ledger_commit", tx_id=tx.transaction_id(), keys=sorted(tx.pending))

    def _read_committed(self, key: str) -> bytes | None:
        path = self.path_for(key)
        try:
            return path.read_bytes()
        except FileNotFoundError:
            return None
        except OSError as err:
            raise StoreFailure(f"failed to read {key!r}: {err}") from err

    def _write_committed(self, key: str, data: bytes) -> None:
        path = self.path_for(key)
        tmp_path: Path | None = None
        try:
            fd, tmp_name = tempfile.mkstemp(dir=self.root, prefix=f".{key}.", suffix=".tmp")
            tmp_path = Path(tmp_name)
            with os.fdopen(fd, "wb") as f:
                f.write(data)
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp_path, path)
        except OSError as err:
            if tmp_path is not None:
                tmp_path.unlink(missing_ok=True)
            raise StoreFailure(f"failed to write {key!r}: {err}") from err
