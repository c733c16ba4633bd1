"""Ordering bounded context for discovery bundles and checkout.

Handles slot-based bundle composition, the client-local cart, and the
checkout flow that turns cart lines into immutable order snapshots.
"""

from protean.domain import Domain

from ordering.utils.logging import configure_logging, get_logger

configure_logging(log_dir="logs", log_file_prefix="ordering")

logger = get_logger(__name__)

ordering = Domain(name="ordering")
