"""
Main entrypoint for synthledger.

What it does:
- Loads runtime settings from `config/config.yaml` and `SYNTHLEDGER_*`
  environment overrides.
- Starts the Prometheus metrics server (bind failures only warn).
- Deploys a collateral token and a SyntheticAsset wired to it.
- With OFFLINE_DEMO=1, runs the reference scenario: mint and approve 10 tokens,
  deposit, open a 5 unit long, move the price 1000 -> 1200, close, and log the
  resulting balance (11 tokens).

Invoked by `python -m synthledger.main`.
"""
import logging
import os

from prometheus_client import start_http_server

from synthledger.config.loader import load_settings
from synthledger.deploy import deploy
from synthledger.reports.export import write_parquet
from synthledger.token import new_address


def run_demo(deployment, report_dir=None) -> int:
    token, asset, owner = deployment.token, deployment.asset, deployment.deployer
    unit = 10 ** 18
    trader = new_address()
    token.mint(trader, 10 * unit)
    token.approve(trader, asset.address, 10 * unit)

    asset.deposit_collateral(trader, 10 * unit)
    asset.open_position(trader, 5 * unit, True)
    logging.info(f"Opened long 5 @ {asset.get_synthetic_asset_price()}")
    asset.update_synthetic_asset_price(owner, 1200)
    settlement = asset.close_position(trader)
    balance = asset.get_user_collateral_balance(trader)
    logging.info(f"Closed @ {settlement.exit_price}: pnl={settlement.pnl} balance={balance}")
    logging.info(f"Accounting: {asset.accounting()}")
    if report_dir:
        paths = write_parquet(asset, report_dir)
        logging.info(f"Reports written: {paths}")
    return balance


def main() -> None:
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(message)s")
    settings = load_settings(os.getenv("SYNTHLEDGER_CONFIG", "config/config.yaml"))
    logging.info(f"Initial price: {settings.initial_price}, loss policy: {settings.loss_policy.value}")

    prom_port = int(os.getenv("PROMETHEUS_PORT", str(settings.metrics.port)))
    try:
        start_http_server(prom_port)
        logging.info(f"Prometheus metrics server started on :{prom_port}")
    except OSError as e:
        logging.warning(f"Failed to start Prometheus server on :{prom_port}: {e}")

    deployment = deploy(settings)
    logging.info(f"Deployed token {deployment.token.symbol} and ledger {deployment.asset.address}")
    logging.info(f"Owner: {deployment.asset.owner()}")
    logging.info(f"Events: stream={deployment.asset.publisher.stream} redis={deployment.asset.publisher.redis_enabled}")

    if os.getenv("OFFLINE_DEMO", "0") == "1":
        run_demo(deployment, os.getenv("REPORT_DIR"))


if __name__ == "__main__":
    main()
