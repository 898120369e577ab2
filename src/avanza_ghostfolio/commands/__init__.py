"""CLI command implementations.

Each command module provides:
- Argument defaults and validation
- Command execution logic on top of the data source, prompter and config
"""

from avanza_ghostfolio.commands.assets import (
    create_manual_asset,
    ghostfolio_ticker,
)
from avanza_ghostfolio.commands.import_history import (
    default_date_range,
    import_history,
)
from avanza_ghostfolio.commands.lookups import (
    get_quote,
    get_weights,
    scraper_configuration,
)

__all__ = [
    "create_manual_asset",
    "ghostfolio_ticker",
    "default_date_range",
    "import_history",
    "get_quote",
    "get_weights",
    "scraper_configuration",
]
