"""Client for the Ghostfolio API.

Connection settings and the symbol to account mapping are stored in the
config file. When the Ghostfolio section is missing the operator is asked to
set it up, and the config is saved straight away.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import requests

from avanza_ghostfolio.config import save_config
from avanza_ghostfolio.data.sources import decode_payload
from avanza_ghostfolio.exceptions import (
    ConfigError,
    InputAbortedError,
    UpstreamError,
)
from avanza_ghostfolio.prompts import Prompter
from avanza_ghostfolio.types import (
    AccountResponse,
    AppConfig,
    GhostfolioAccount,
    GhostfolioAssets,
    GhostfolioConfig,
    MarketData,
)

logger = logging.getLogger(__name__)


def init_ghostfolio_config(
    config: AppConfig,
    prompter: Prompter,
    config_path: str | Path | None = None,
) -> GhostfolioConfig:
    """Return the Ghostfolio settings, asking the operator for them if missing.

    :param config: Loaded application config (updated in place).
    :param prompter: Prompter used for the setup questions.
    :param config_path: Where to save the updated config.
    :returns: The Ghostfolio settings.
    :raises ConfigError: If the operator declines the setup.
    :raises InputAbortedError: If the operator cancels a question.
    """
    if config.ghostfolio is not None:
        return config.ghostfolio

    if not prompter.confirm("Ghostfolio config missing, do you want to init?"):
        raise ConfigError("Ghostfolio config missing")

    token = prompter.text("Enter your token")
    if token is None:
        raise InputAbortedError("Token prompt cancelled")
    base_url = prompter.text("Enter your base url")
    if base_url is None:
        raise InputAbortedError("Base URL prompt cancelled")

    config.ghostfolio = GhostfolioConfig(token=token, base_url=base_url.rstrip("/"))
    save_config(config, config_path)
    return config.ghostfolio


class GhostfolioClient:
    """Thin wrapper around the Ghostfolio endpoints this tool needs.

    :param config: Application config holding the Ghostfolio section.
    :param prompter: Prompter for account selection.
    :param config_path: Path the config is saved to when the mapping changes.
    :param session: HTTP session to use (a new one is created if None).
    :param timeout: Request timeout in seconds.
    """

    def __init__(
        self,
        config: AppConfig,
        prompter: Prompter,
        config_path: str | Path | None = None,
        session: requests.Session | None = None,
        timeout: float = 30.0,
    ) -> None:
        self.full_config = config
        self.config_path = config_path
        self.prompter = prompter
        self.config = init_ghostfolio_config(config, prompter, config_path)
        self.session = session or requests.Session()
        self.session.headers["Authorization"] = f"Bearer {self.config.token}"
        self.timeout = timeout

    def get_assets(self) -> list[MarketData]:
        """List the asset profiles tracked by Ghostfolio."""
        payload = self._request("GET", "/api/v1/admin/market-data", {"take": "50"})
        assets = decode_payload(GhostfolioAssets, payload, "Ghostfolio assets")
        return assets.market_data

    def create_asset(self, symbol: str) -> None:
        """Create a manually tracked asset profile for a symbol."""
        self._request("POST", f"/api/v1/admin/profile-data/MANUAL/{symbol}")
        logger.info("Created MANUAL asset %s", symbol)

    def get_accounts(self) -> AccountResponse:
        """Fetch the accounts registered in Ghostfolio."""
        payload = self._request("GET", "/api/v1/account")
        return decode_payload(AccountResponse, payload, "Ghostfolio accounts")

    def select_account(self) -> GhostfolioAccount:
        """Let the operator pick one of the Ghostfolio accounts.

        :raises InputAbortedError: If the selection is cancelled.
        """
        accounts = self.get_accounts().accounts
        index = self.prompter.choose(
            "Select your account", [account.name for account in accounts]
        )
        if index is None:
            raise InputAbortedError("Account selection cancelled")
        return accounts[index]

    def get_account_mapping(self, symbol: str) -> str:
        """Return the account name mapped to a symbol.

        Unseen symbols are mapped by asking the operator once; the mapping is
        then saved to the config file.

        :param symbol: Symbol display name.
        :returns: Ghostfolio account name.
        """
        if symbol in self.config.account_mapping:
            return self.config.account_mapping[symbol]

        account = self.select_account()
        self.config.account_mapping[symbol] = account.name
        save_config(self.full_config, self.config_path)
        return account.name

    def _request(
        self,
        method: str,
        path: str,
        params: dict[str, str] | None = None,
    ) -> Any:
        url = f"{self.config.base_url}{path}"
        logger.debug("%s %s params=%s", method, url, params)
        try:
            response = self.session.request(
                method, url, params=params, timeout=self.timeout
            )
            response.raise_for_status()
            if not response.content:
                return None
            return response.json()
        except requests.RequestException as e:
            raise UpstreamError(f"Ghostfolio request {method} {url} failed: {e}") from e
        except ValueError as e:
            raise UpstreamError(f"Invalid JSON from {url}: {e}") from e

