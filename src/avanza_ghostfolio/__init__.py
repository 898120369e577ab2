"""Bridge between Avanza's web API and Ghostfolio."""

from avanza_ghostfolio.exceptions import AvanzaGhostfolioError

__version__ = "0.1.0"

__all__ = ["AvanzaGhostfolioError", "__version__"]
