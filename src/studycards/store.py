"""Card store: a JSON document collection of flashcards."""

import json
import logging
import random
import secrets
import threading
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Iterator, Protocol

from filelock import FileLock, Timeout

from .errors import StoreUnavailable
from .paths import CARDS_FILE, atomic_json_write

logger = logging.getLogger(__name__)

# Seconds to wait for another writer before giving up
LOCK_TIMEOUT = 10


class CardStore(Protocol):
    """Persistence boundary for flashcards."""

    def insert_card(self, front: str, back: str, owner_id: str) -> Any:
        """Insert a card and return its storage-native id."""
        ...

    def sample_one_card(self, owner_id: str) -> dict | None:
        """Return one random document owned by owner_id, or None."""
        ...

    def list_cards(self, owner_id: str) -> list[dict]:
        ...

    def count_cards(self, owner_id: str) -> int:
        ...

    def close(self) -> None:
        ...


def new_object_id() -> dict:
    """A fresh storage-native id in extended-JSON form."""
    return {"$oid": secrets.token_hex(12)}


class JsonCardStore:
    """Card collection kept in a single JSON file.

    Every operation reads and writes the whole file while holding a lock on
    a sidecar `.lock` file, so stores in other threads or processes sharing
    the path never lose each other's inserts. Writes go through
    atomic_json_write, so a reader never sees a half-written card.
    """

    def __init__(self, path: Path = CARDS_FILE, rng: random.Random | None = None):
        self.path = Path(path)
        self._rng = rng or random.Random()
        self._lock = threading.Lock()
        self._file_lock = FileLock(str(self.path.with_suffix(".lock")), timeout=LOCK_TIMEOUT)
        self._closed = False

    def __enter__(self) -> "JsonCardStore":
        return self

    def __exit__(self, *exc) -> None:
        self.close()

    def close(self) -> None:
        """Release the store. Further calls raise StoreUnavailable."""
        self._closed = True

    @contextmanager
    def _locked(self) -> Iterator[None]:
        with self._lock:
            try:
                self.path.parent.mkdir(parents=True, exist_ok=True)
                self._file_lock.acquire()
            except Timeout as e:
                raise StoreUnavailable(f"Card collection at {self.path} is locked by another writer") from e
            except OSError as e:
                raise StoreUnavailable(f"Cannot lock card collection at {self.path}: {e}") from e
            try:
                yield
            finally:
                self._file_lock.release()

    def _load(self) -> list[dict]:
        if self._closed:
            raise StoreUnavailable("Card store is closed")
        if not self.path.exists():
            return []
        try:
            with open(self.path, encoding="utf-8") as f:
                documents = json.load(f)
        except json.JSONDecodeError as e:
            raise StoreUnavailable(f"Card collection at {self.path} is corrupt") from e
        except OSError as e:
            raise StoreUnavailable(f"Cannot read card collection at {self.path}: {e}") from e
        if not isinstance(documents, list):
            raise StoreUnavailable(f"Card collection at {self.path} is not a list")
        return documents

    def _save(self, documents: list[dict]) -> None:
        try:
            atomic_json_write(self.path, documents)
        except OSError as e:
            raise StoreUnavailable(f"Cannot write card collection at {self.path}: {e}") from e

    def insert_card(self, front: str, back: str, owner_id: str) -> dict:
        """Insert a card and return its storage-native id."""
        document = {
            "_id": new_object_id(),
            "front": front,
            "back": back,
            "ownerId": str(owner_id),
        }
        with self._locked():
            documents = self._load()
            documents.append(document)
            self._save(documents)
        logger.debug("Inserted card %s for %s", document["_id"]["$oid"], owner_id)
        return document["_id"]

    def sample_one_card(self, owner_id: str) -> dict | None:
        """Pick one of the owner's cards at random."""
        owned = self.list_cards(owner_id)
        if not owned:
            return None
        return self._rng.choice(owned)

    def list_cards(self, owner_id: str) -> list[dict]:
        """All documents owned by owner_id, in insertion order."""
        with self._locked():
            documents = self._load()
        return [doc for doc in documents if doc.get("ownerId") == str(owner_id)]

    def count_cards(self, owner_id: str) -> int:
        return len(self.list_cards(owner_id))
