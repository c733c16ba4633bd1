"""Client cart that merges heterogeneous lines and keeps them in durable local storage.

The cart is an explicit object handed to whoever needs it (the bundle
builder, the checkout session). It owns persistence timing: every mutation
rewrites the whole cart to its store, and construction rehydrates from it.
"""

from protean.exceptions import ValidationError
from pydantic import ValidationError as SchemaError

from ordering.cart.lines import CartLine, dump_lines, line_key, load_lines
from ordering.cart.store import CartStore
from ordering.utils.logging import get_logger

logger = get_logger(__name__)


class Cart:
    def __init__(self, store: CartStore):
        self._store = store
        self._lines: list[CartLine] = self._rehydrate()

    # -------------------------------------------------------------------
    # Accessors
    # -------------------------------------------------------------------
    @property
    def lines(self) -> list[CartLine]:
        return list(self._lines)

    @property
    def is_empty(self) -> bool:
        return not self._lines

    @property
    def item_count(self) -> int:
        return sum(line.quantity for line in self._lines)

    def find(self, line_id: str, variant_id: str | None = None) -> CartLine | None:
        return next(
            (line for line in self._lines if line.id == line_id and line.variant_id == variant_id),
            None,
        )

    # -------------------------------------------------------------------
    # Mutations
    # -------------------------------------------------------------------
    def add_line(self, line: CartLine) -> None:
        """Add a line, or increase the quantity of the identical line already in the cart."""
        key = line_key(line)
        index = next((i for i, existing in enumerate(self._lines) if line_key(existing) == key), None)

        if index is None:
            self._lines.append(line)
        else:
            existing = self._lines[index]
            self._lines[index] = existing.model_copy(update={"quantity": existing.quantity + line.quantity})

        self._persist()
        logger.debug("cart_line_added", line_id=line.id, kind=line.kind, quantity=line.quantity)

    def update_quantity(self, line_id: str, variant_id: str | None, quantity: int) -> None:
        if quantity < 1:
            raise ValidationError({"quantity": ["Quantity must be at least 1"]})

        self._lines = [
            line.model_copy(update={"quantity": quantity})
            if line.id == line_id and line.variant_id == variant_id
            else line
            for line in self._lines
        ]
        self._persist()

    def remove_line(self, line_id: str, variant_id: str | None = None) -> None:
        self._lines = [
            line for line in self._lines if not (line.id == line_id and line.variant_id == variant_id)
        ]
        self._persist()

    def clear(self) -> None:
        self._lines = []
        self._persist()

    # -------------------------------------------------------------------
    # Persistence
    # -------------------------------------------------------------------
    def dumps(self) -> str:
        return dump_lines(self._lines)

    def _persist(self) -> None:
        self._store.save(self.dumps())

    def _rehydrate(self) -> list[CartLine]:
        payload = self._store.load()
        if not payload:
            return []

        try:
            return load_lines(payload)
        except SchemaError as exc:
            logger.warning("cart_rehydration_failed", error_count=exc.error_count())
            return []
