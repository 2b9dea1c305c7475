import threading
from collections.abc import Iterator
from contextlib import contextmanager


class DocumentLockRegistry:
    """At most one in-flight attempt per document id within this process.

    Acquisition never blocks: a second caller for the same id is told the
    document is busy and should not wait for the first attempt.
    """

    def __init__(self) -> None:
        self._guard = threading.Lock()
        self._held: set[str] = set()

    @contextmanager
    def hold(self, document_id: str) -> Iterator[bool]:
        """Yield True if this caller now owns ``document_id``, False if busy."""
        with self._guard:
            acquired = document_id not in self._held
            if acquired:
                self._held.add(document_id)
        try:
            yield acquired
        finally:
            if acquired:
                with self._guard:
                    self._held.discard(document_id)

    def is_held(self, document_id: str) -> bool:
        with self._guard:
            return document_id in self._held
