"""Runtime settings for ordering, read from the environment.

Protean's own configuration (providers, event processing) is selected through
PROTEAN_ENV; the values here cover checkout behaviour only.
"""

import os
from dataclasses import dataclass
from decimal import Decimal
from functools import lru_cache
from pathlib import Path


@dataclass(frozen=True)
class Settings:
    currency: str = "MDL"
    tax_rate: Decimal = Decimal("0.15")
    default_volume_ml: int = 5
    resolver_max_workers: int = 4
    cart_path: Path = Path(".cart.json")


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Build settings from ORDERING_* environment variables, falling back to defaults."""
    defaults = Settings()
    return Settings(
        currency=os.getenv("ORDERING_CURRENCY", defaults.currency),
        tax_rate=Decimal(os.getenv("ORDERING_TAX_RATE", str(defaults.tax_rate))),
        default_volume_ml=int(os.getenv("ORDERING_DEFAULT_VOLUME_ML", defaults.default_volume_ml)),
        resolver_max_workers=max(1, int(os.getenv("ORDERING_RESOLVER_MAX_WORKERS", defaults.resolver_max_workers))),
        cart_path=Path(os.getenv("ORDERING_CART_PATH", str(defaults.cart_path))),
    )
