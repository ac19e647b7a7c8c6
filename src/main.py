"""Command-line entry point: analyze one asset and print the result JSON."""

import argparse
import asyncio
import sys

from loguru import logger

from config.settings import settings
from src.analysis.orchestrator import RiskAnalyzer
from src.analysis.types import AnalysisRequest
from src.utils.logger import setup_logger


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Compute risk scores for a crypto asset")
    parser.add_argument("--name", dest="coin_name", help="Free-text coin name, e.g. 'uniswap'")
    parser.add_argument("--coin-id", help="CoinGecko slug")
    parser.add_argument("--contract", dest="contract_address", help="Token contract / mint address")
    parser.add_argument("--chain", choices=["eth", "sol"], help="Chain of the contract address")
    parser.add_argument("--client-id", default="cli")
    return parser


async def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logger(json_logs=settings.json_logs, level=settings.log_level, log_dir=settings.log_dir)

    request = AnalysisRequest(
        coin_name=args.coin_name,
        coin_id=args.coin_id,
        contract_address=args.contract_address,
        chain=args.chain,
        client_id=args.client_id,
    )
    analyzer = RiskAnalyzer.from_settings(settings)
    try:
        result = await analyzer.analyze(request)
    finally:
        await analyzer.close()

    logger.debug(f"Finished in {result.processing_time_ms}ms")
    print(result.model_dump_json(indent=2))
    return 1 if result.error else 0


def run() -> None:
    sys.exit(asyncio.run(main()))


if __name__ == "__main__":
    run()
