"""Ghostfolio asset management commands."""

from __future__ import annotations

import logging
from pathlib import Path

from avanza_ghostfolio.config import save_config
from avanza_ghostfolio.exceptions import InputAbortedError
from avanza_ghostfolio.ghostfolio import GhostfolioClient
from avanza_ghostfolio.prompts import Prompter
from avanza_ghostfolio.types import AppConfig, SymbolDescriptor

logger = logging.getLogger(__name__)


def ghostfolio_ticker(
    config: AppConfig,
    symbol: SymbolDescriptor,
    prompter: Prompter,
    config_path: str | Path | None = None,
) -> str:
    """Return the Ghostfolio ticker for an Avanza symbol.

    Unknown symbols are asked for once and remembered in the config file.

    :raises InputAbortedError: If the operator cancels the prompt.
    """
    ticker = config.avanza_to_ghostfolio_ticker.get(symbol.display)
    if ticker:
        return ticker

    ticker = prompter.text(f"Enter Ghostfolio symbol for {symbol.display}")
    if ticker is None:
        raise InputAbortedError("Ticker prompt cancelled")
    config.avanza_to_ghostfolio_ticker[symbol.display] = ticker
    save_config(config, config_path)
    return ticker


def create_manual_asset(
    client: GhostfolioClient,
    symbol: SymbolDescriptor,
    prompter: Prompter,
) -> str:
    """Create a MANUAL asset profile in Ghostfolio for a resolved symbol.

    :returns: The Ghostfolio ticker the asset was created under.
    """
    ticker = ghostfolio_ticker(
        client.full_config, symbol, prompter, client.config_path
    )
    tracked = {asset.symbol for asset in client.get_assets()}
    if ticker in tracked:
        logger.info("%s is already tracked by Ghostfolio", ticker)
        return ticker
    client.create_asset(ticker)
    return ticker
