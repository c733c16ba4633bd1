"""Client-local durable storage for the cart.

The cart is always written as one complete document. Stores only ever see
the full serialized cart, never a patch.
"""

import os
import tempfile
from abc import ABC, abstractmethod
from pathlib import Path

from ordering.config import get_settings


class CartStore(ABC):
    """Key-value slot holding the serialized cart."""

    @abstractmethod
    def load(self) -> str | None:
        """Return the stored cart document, or None when nothing was saved yet."""
        ...

    @abstractmethod
    def save(self, payload: str) -> None:
        """Replace the stored cart document with `payload`."""
        ...


class InMemoryCartStore(CartStore):
    def __init__(self, payload: str | None = None) -> None:
        self.payload = payload
        self.writes = 0

    def load(self) -> str | None:
        return self.payload

    def save(self, payload: str) -> None:
        self.payload = payload
        self.writes += 1


class JsonFileCartStore(CartStore):
    """Cart document on local disk.

    Writes go to a temporary file in the target directory which is then
    renamed over the old document, so readers see either the previous cart or
    the new one.
    """

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)

    @classmethod
    def from_settings(cls) -> "JsonFileCartStore":
        """Store at ORDERING_CART_PATH (default `.cart.json` in the working directory)."""
        return cls(get_settings().cart_path)

    def load(self) -> str | None:
        try:
            return self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None

    def save(self, payload: str) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(dir=self.path.parent, prefix=f".{self.path.name}.", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                handle.write(payload)
                handle.flush()
                os.fsync(handle.fileno())
            os.replace(tmp_name, self.path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise
