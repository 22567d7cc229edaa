"""The JSON document behind every repository.

Orders, accounts, ratings and deals live in one file, so a transaction
that touches several of them is written with a single rename: either all
of its changes land or none do.  The lock covers threads of one process;
running several processes against the same data file is not supported.
"""

from __future__ import annotations

import copy
import json
import threading
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator

from handoff.domain.repository.unit_of_work import UnitOfWork

COLLECTIONS = ("orders", "accounts", "ratings", "deals")


class JsonStore(UnitOfWork):

    def __init__(self, file_path: Path) -> None:
        self._file_path = file_path
        self._lock = threading.RLock()
        # working copy of the document while a transaction is open
        self._document: dict[str, list[dict]] | None = None
        self._ensure_file()

    @property
    def path(self) -> Path:
        return self._file_path

    def load(self, collection: str) -> list[dict]:
        """Current records of *collection*, including uncommitted changes
        made earlier in the caller's own transaction."""
        with self._lock:
            if self._document is not None:
                return list(self._document[collection])
            return self._read()[collection]

    @contextmanager
    def transaction(self) -> Iterator[None]:
        with self._lock:
            if self._document is None:
                self._document = self._read()
                try:
                    yield
                    self._persist(self._document)
                finally:
                    self._document = None
            else:
                # a failing inner block is rolled back on its own, so an
                # enclosing block that handles the error commits none of it
                savepoint = copy.deepcopy(self._document)
                try:
                    yield
                except Exception:
                    for name, records in savepoint.items():
                        self._document[name][:] = records
                    raise

    @contextmanager
    def edit(self, collection: str) -> Iterator[list[dict]]:
        """Open *collection* for a read-modify-write.

        Outside a transaction this is a transaction of its own; inside one
        the change is written when the enclosing transaction commits.
        """
        with self.transaction():
            yield self._working()[collection]

    def _working(self) -> dict[str, list[dict]]:
        if self._document is None:
            raise RuntimeError("No transaction is open")
        return self._document

    def _read(self) -> dict[str, list[dict]]:
        document = json.loads(self._file_path.read_text(encoding="utf-8"))
        for name in COLLECTIONS:
            document.setdefault(name, [])
        return document

    def _persist(self, document: dict[str, list[dict]]) -> None:
        tmp = self._file_path.with_suffix(self._file_path.suffix + ".tmp")
        tmp.write_text(json.dumps(document, indent=2) + "\n", encoding="utf-8")
        tmp.replace(self._file_path)

    def _ensure_file(self) -> None:
        if not self._file_path.exists():
            self._file_path.parent.mkdir(parents=True, exist_ok=True)
            self._persist({name: [] for name in COLLECTIONS})
