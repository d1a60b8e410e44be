"""CLI entrypoint for bridging WETH with Across and swapping it on arrival."""

from __future__ import annotations

import argparse
import os
from pathlib import Path
from typing import Callable, List, Optional

from dotenv import load_dotenv

from bridgeswap.config import AppConfig, load_config
from bridgeswap.core import quotes
from bridgeswap.core.bridge import AcrossClient, Quote
from bridgeswap.core.message import CrossChainMessage, build_cross_chain_message
from bridgeswap.core.quotes import SwapCallData
from bridgeswap.core.reporter import Reporter
from bridgeswap.core.tokens import ensure_balance
from bridgeswap.core.utils import format_units, get_logger
from bridgeswap.core.wallet import UserWallet, Web3Factory, create_user_wallet, default_web3_factory

LOGGER = get_logger("bridgeswap.cli")

load_dotenv()


class BridgeSwapExecutor:
    """High-level orchestrator for the bridge-then-swap workflow."""

    def __init__(
        self,
        *,
        config: AppConfig,
        web3_factory: Web3Factory = default_web3_factory,
        bridge_client: Optional[AcrossClient] = None,
        swap_quote_fn: Callable[..., SwapCallData] = quotes.generate_swap_call_data,
        reporter: Optional[Reporter] = None,
    ) -> None:
        self.config = config
        self.web3_factory = web3_factory
        self.bridge_client = bridge_client
        self.swap_quote_fn = swap_quote_fn
        self.reporter = reporter or Reporter(
            origin_chain=config.origin_chain,
            destination_chain=config.destination_chain,
        )

    @property
    def input_amount(self) -> int:
        return self.config.defaults.input_amount_wei

    def _create_bridge_client(self) -> AcrossClient:
        return AcrossClient(
            config=self.config.across,
            destination_chain=self.config.destination_chain,
            timeout=self.config.defaults.api_timeout,
            web3_factory=self.web3_factory,
        )

    def check_balance(self, wallet: UserWallet) -> int:
        """Fail unless the wallet holds enough of the input token."""
        decimals = self.config.defaults.input_decimals
        balance = ensure_balance(
            wallet.web3,
            self.config.route.input_token,
            wallet.address,
            self.input_amount,
            decimals=decimals,
        )
        self.reporter.success(f"Balance check passed. Available: {format_units(balance, decimals)}")
        return balance

    def build_message(self, wallet: UserWallet) -> CrossChainMessage:
        return build_cross_chain_message(
            config=self.config,
            user_address=wallet.address,
            input_amount=self.input_amount,
            quote_fn=self.swap_quote_fn,
        )

    def run(self) -> Quote:
        """Run the whole flow; any failure is logged once and re-raised."""
        try:
            self.reporter.step("Initializing clients")
            wallet = create_user_wallet(
                self.config.private_key,
                self.config.origin_chain,
                web3_factory=self.web3_factory,
            )
            self.check_balance(wallet)

            client = self.bridge_client or self._create_bridge_client()
            self.reporter.success("Clients initialized successfully")

            message = self.build_message(wallet)

            self.reporter.step("Fetching quote")
            quote = client.get_quote(
                route=self.config.route,
                input_amount=self.input_amount,
                cross_chain_message=message,
            )
            self.reporter.json("Quote parameters", quote)

            self.reporter.step("Executing transactions")
            client.execute_quote(
                wallet=wallet,
                deposit=quote.deposit,
                on_progress=self.reporter.report_progress,
            )

            self.reporter.step("Bridge transaction completed")
            return quote
        except Exception as exc:
            self.reporter.error("Failed to execute swap", exc)
            raise


def _parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Bridge WETH from Arbitrum to Base with Across and swap it to USDC via Bebop")
    parser.add_argument("--config", type=Path, default=None, help="Path to an alternative JSON config file")
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> None:
    args = _parse_args(argv)

    try:
        config = load_config(args.config, environ=os.environ)
    except Exception as exc:
        LOGGER.error("❌ Error: %s", exc)
        raise

    BridgeSwapExecutor(config=config).run()


if __name__ == "__main__":  # pragma: no cover - CLI entry
    main()
