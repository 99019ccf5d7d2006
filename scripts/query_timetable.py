"""Query a school's WebUntis substitution board from the terminal.

Fetches the public monitor board configured via .env (SCHOOL_NAME,
FORMAT_NAME, DEPARTMENT_IDS, optionally WEBUNTIS_URL), filters it by class and
prints a table or JSON.

Run with:    python scripts/query_timetable.py
Classes:     python scripts/query_timetable.py --class 11a,12
Date:        python scripts/query_timetable.py --date 2025-05-22
Tomorrow:    python scripts/query_timetable.py --offset 1
Prompted:    python scripts/query_timetable.py --interactive
JSON:        python scripts/query_timetable.py --json
Retry:       python scripts/query_timetable.py --retries 2

Exit codes:
  0 = success (table or JSON on stdout)
  1 = error (details logged on stderr)
"""

import argparse
import asyncio
import os
import sys
from datetime import date

from dotenv import load_dotenv
from tenacity import AsyncRetrying, retry_if_result, stop_after_attempt, wait_fixed

load_dotenv()

# Add project root to path for src imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from src.substitution.config import get_config  # noqa: E402
from src.substitution.dates import parse_date_input  # noqa: E402
from src.substitution.filtering import parse_group_input  # noqa: E402
from src.substitution.logging import setup_logging  # noqa: E402
from src.substitution.models import QueryOptions  # noqa: E402
from src.substitution.render import render_json, render_table  # noqa: E402
from src.substitution.service import RetrievalResult, retrieve_timetable  # noqa: E402

RETRY_WAIT_SECONDS = 5


def _log(msg: str) -> None:
    """Write diagnostic messages to stderr so stdout stays clean for JSON."""
    print(msg, file=sys.stderr)


def _parse_args() -> argparse.Namespace:
    """Parse CLI arguments using argparse."""
    parser = argparse.ArgumentParser(
        description="Show the WebUntis substitution board, optionally filtered by class.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--class",
        dest="classes",
        type=str,
        default="",
        help="Comma-separated classes/courses, e.g. '11a,12'. Default: all.",
    )
    parser.add_argument(
        "--date",
        type=str,
        default="",
        help="Date as YYYY-MM-DD. Default: today.",
    )
    parser.add_argument(
        "--offset",
        type=int,
        default=0,
        help="Days to add to the date (1 = next day, -1 = previous day).",
    )
    parser.add_argument(
        "--days",
        type=int,
        default=1,
        help="Number of days to request (default: 1).",
    )
    parser.add_argument(
        "--interactive",
        action="store_true",
        help="Prompt for classes and date instead of using --class/--date.",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Print the filtered payload as JSON instead of a table.",
    )
    parser.add_argument(
        "--retries",
        type=int,
        default=0,
        help=(
            "Re-run the query up to N more times on connection/HTTP failures "
            f"({RETRY_WAIT_SECONDS}s apart). Default: 0."
        ),
    )
    return parser.parse_args()


def _prompt_query() -> tuple[str, str]:
    """Ask for classes and date. Blank answers mean all classes / today."""
    _log("\n--- WebUntis substitution board ---")
    _log("Leave a field blank to use the default.")
    classes = input("Class(es) or course(s), e.g. 11a or 12,13 (blank for all): ")
    raw_date = input("Date as YYYY-MM-DD, e.g. 2025-05-22 (blank for today): ")
    return classes, raw_date


async def _retrieve(
    identity: dict, options: QueryOptions, *, retries: int, base_url: str, timeout
) -> RetrievalResult:
    """Run the retrieval, re-invoking it on transient failures only."""
    retrying = AsyncRetrying(
        stop=stop_after_attempt(max(retries, 0) + 1),
        wait=wait_fixed(RETRY_WAIT_SECONDS),
        retry=retry_if_result(lambda result: result.transient),
        # Hand back the last failed result instead of raising RetryError
        retry_error_callback=lambda state: state.outcome.result(),
    )
    return await retrying(
        retrieve_timetable, identity, options, base_url=base_url, timeout=timeout
    )


async def main(args: argparse.Namespace) -> int:
    config = get_config()
    setup_logging(json_output=config.log_json, log_level=config.log_level)

    if args.interactive:
        raw_classes, raw_date = _prompt_query()
    else:
        raw_classes, raw_date = args.classes, args.date

    target_date = parse_date_input(raw_date, today=date.today())

    filter_groups = parse_group_input(raw_classes)
    try:
        options = QueryOptions(
            target_date=target_date,
            date_offset=args.offset,
            number_of_days=args.days,
            filter_groups=filter_groups or None,
        )
    except ValueError as e:
        _log(f"ERROR: invalid options: {e}")
        return 1

    result = await _retrieve(
        config.identity(),
        options,
        retries=args.retries,
        base_url=config.webuntis_url,
        timeout=config.request_timeout,
    )
    if not result.ok:
        _log(f"ERROR: {result.error}")
        return 1

    if args.json:
        print(render_json(result.payload))
    else:
        print(render_table(result.payload, filter_groups))
    return 0


if __name__ == "__main__":
    args = _parse_args()
    try:
        sys.exit(asyncio.run(main(args)))
    except KeyboardInterrupt:
        sys.exit(1)
