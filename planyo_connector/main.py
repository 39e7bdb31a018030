"""Command-line entry point for the Planyo connector."""

import argparse
import asyncio
import json
import sys
from typing import Any, Optional, Sequence

from planyo_connector.clients import PlanyoAPIClient, PlanyoClientError
from planyo_connector.config import configure_logging, get_logger, settings

logger = get_logger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Fetch reservations from the Planyo REST API")
    subparsers = parser.add_subparsers(dest="command", required=True)

    get_parser = subparsers.add_parser("get", help="Fetch a single reservation")
    get_parser.add_argument("reservation_id", type=int, help="Planyo reservation id")

    list_parser = subparsers.add_parser("list", help="List reservations in a time range")
    list_parser.add_argument("start", help="Range start, 'YYYY-MM-DD HH:MM:SS'")
    list_parser.add_argument("end", help="Range end, 'YYYY-MM-DD HH:MM:SS'")

    return parser


async def main(argv: Optional[Sequence[str]] = None) -> int:
    """Run a single Planyo query and print the result as JSON.

    Returns:
        Process exit code
    """
    args = build_parser().parse_args(argv)

    missing = settings.planyo.missing_credentials()
    if missing:
        logger.error("Planyo configuration incomplete", missing=missing)
        print(json.dumps({"success": False, "error": f"Missing: {', '.join(missing)}"}))
        return 1

    try:
        async with PlanyoAPIClient.from_settings(settings) as client:
            result: Any
            if args.command == "get":
                reservation = await client.get_reservation(args.reservation_id)
                result = reservation.model_dump(mode="json")
            else:
                reservations = await client.list_reservations(args.start, args.end)
                result = [reservation.model_dump(mode="json") for reservation in reservations]
    except PlanyoClientError as e:
        logger.error(
            "Planyo request failed",
            command=args.command,
            error_type=type(e).__name__,
            error=str(e),
        )
        print(json.dumps({"success": False, "error": str(e)}))
        return 1

    print(json.dumps(result, indent=2, default=str))
    return 0


def run_sync() -> int:
    """Run the async main function synchronously.

    Returns:
        Exit code from main()
    """
    configure_logging()
    return asyncio.run(main())


if __name__ == "__main__":
    sys.exit(run_sync())
