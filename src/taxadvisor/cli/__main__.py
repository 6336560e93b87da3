"""Entry point: ``python -m taxadvisor.cli``."""

import argparse
import asyncio
import logging
import sys

from taxadvisor.core.tax import ESTIMATE_SAVINGS, EVALUATE_DONATION

from .client import AdvisorAPIClient
from .config import CLIConfig
from .repl import AdvisorCLI


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(description="Command-line client for Tax Advisor")
    parser.add_argument("--host", default="localhost", help="Server host")
    parser.add_argument("--port", type=int, default=8000, help="Server port")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")

    sub = parser.add_subparsers(dest="command")
    sub.add_parser("chat", help="Interactive chat (default)")

    estimate = sub.add_parser("estimate", help="Estimate savings for a donation")
    estimate.add_argument("--income", required=True)
    estimate.add_argument("--rate", required=True, help="Marginal rate in percent")
    estimate.add_argument("--donation", required=True)
    estimate.add_argument("--filing-status", default="single")

    evaluate = sub.add_parser("evaluate", help="Donation needed for a target saving")
    evaluate.add_argument("--target", required=True)
    evaluate.add_argument("--income", required=True)
    evaluate.add_argument("--deductions", default="0")
    evaluate.add_argument("--filing-status", default="single")

    return parser.parse_args(argv)


def form_data(args: argparse.Namespace) -> tuple[str, dict[str, str]]:
    """Translate subcommand arguments into the browser form payload."""
    if args.command == "estimate":
        return ESTIMATE_SAVINGS, {
            "annualIncome": args.income,
            "currentTaxRate": args.rate,
            "donationAmount": args.donation,
            "filingStatus": args.filing_status,
        }
    return EVALUATE_DONATION, {
        "targetTaxSavings": args.target,
        "annualIncome": args.income,
        "currentDeductions": args.deductions,
        "filingStatus": args.filing_status,
    }


async def main(args: argparse.Namespace) -> int:
    logging.basicConfig(
        level=logging.DEBUG if args.debug else logging.WARNING,
        format="%(levelname)s: %(message)s",
        stream=sys.stderr,
    )
    cli = AdvisorCLI(AdvisorAPIClient(CLIConfig(host=args.host, port=args.port)))
    if args.command in ("estimate", "evaluate"):
        kind, data = form_data(args)
        return await cli.calculate(kind, data)
    await cli.run()
    return 0


def cli_entry() -> None:
    """CLI entry point."""
    args = parse_args()
    try:
        sys.exit(asyncio.run(main(args)))
    except KeyboardInterrupt:
        sys.exit(0)


if __name__ == "__main__":
    cli_entry()
