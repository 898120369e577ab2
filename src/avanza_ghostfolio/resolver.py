"""Resolution of free-text instrument names to symbol descriptors."""

from __future__ import annotations

import logging

from avanza_ghostfolio.data.sources import MarketDataSource
from avanza_ghostfolio.exceptions import InputAbortedError, NotFoundError
from avanza_ghostfolio.prompts import Prompter
from avanza_ghostfolio.types import SymbolDescriptor

logger = logging.getLogger(__name__)


def resolve_symbol(
    query: str,
    source: MarketDataSource,
    prompter: Prompter,
) -> SymbolDescriptor:
    """Resolve a free-text name to a single symbol.

    A single search hit is returned without asking; several hits are offered to
    the operator.

    :param query: Free-text instrument name.
    :param source: Data source used for the search.
    :param prompter: Prompter used when the search is ambiguous.
    :returns: The selected symbol.
    :raises NotFoundError: If the search has no hits.
    :raises InputAbortedError: If the operator cancels the selection.
    """
    hits = source.search(query)
    if not hits:
        raise NotFoundError(f"No hits found for '{query}'")

    if len(hits) == 1:
        print(f"Only one hit, choosing: {hits[0].describe()}")
        return hits[0]

    logger.debug("%d hits for '%s'", len(hits), query)
    index = prompter.choose("Select your symbol", [hit.describe() for hit in hits])
    if index is None:
        raise InputAbortedError("Symbol selection cancelled")
    return hits[index]
