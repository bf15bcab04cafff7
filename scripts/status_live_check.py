"""Manual live check for an Intelligent Octopus Go account.

Run from the repository root with:
  OCTOPUS_API_KEY=... OCTOPUS_ACCOUNT_NUMBER=... \
  PYTHONPATH=src python scripts/status_live_check.py

Optional environment variables:
  OCTOPUS_TIME_ZONE (defaults to Europe/London)

Keep publishing the status every minute with `--watch`; add `--refresh-slots`
to also refresh planned dispatches at every minute ending in 9.
The script masks the API key, token and account number in its output.
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import os
import sys
import traceback

from pyoctopusgo import Client, build_configuration
from pyoctopusgo.exceptions import PyOctopusGoError, ValidationError
from pyoctopusgo.models import DispatchSlot, StatusField, StatusSnapshot
from pyoctopusgo.util import format_utc_timestamp, mask_secret

_LOGGER = logging.getLogger(__name__)


def _parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Check Intelligent Octopus Go status.")
    parser.add_argument("--api-key", help="API key (or OCTOPUS_API_KEY).")
    parser.add_argument("--account-number", help="Account number (or OCTOPUS_ACCOUNT_NUMBER).")
    parser.add_argument("--time-zone", help="IANA time zone (or OCTOPUS_TIME_ZONE).")
    parser.add_argument("--watch", action="store_true", help="Publish status every minute.")
    parser.add_argument(
        "--refresh-slots",
        action="store_true",
        help="With --watch, also refresh dispatches at every minute ending in 9.",
    )
    parser.add_argument("--log-level", default="INFO", help="Logging level.")
    parser.add_argument("--debug", action="store_true", help="Shortcut for --log-level DEBUG.")
    parser.add_argument("--traceback", action="store_true", help="Print full tracebacks.")
    return parser.parse_args()


def _format_slot(slot: DispatchSlot) -> str:
    extra = []
    if slot.charge_kwh is not None:
        extra.append(f"{slot.charge_kwh:.2f} kWh")
    if slot.source:
        extra.append(slot.source)
    if slot.location:
        extra.append(slot.location)
    suffix = f" ({', '.join(extra)})" if extra else ""
    return f"{format_utc_timestamp(slot.start)} -> {format_utc_timestamp(slot.end)}{suffix}"


def _print_snapshot(snapshot: StatusSnapshot) -> None:
    for status_field in StatusField:
        state = "on" if snapshot.value(status_field) else "off"
        print(f"- {status_field.display_name}: {state}")


async def main() -> int:
    args = _parse_args()
    log_level = "DEBUG" if args.debug else args.log_level.upper()
    logging.basicConfig(level=log_level)

    try:
        config = build_configuration(
            api_key=args.api_key or os.getenv("OCTOPUS_API_KEY"),
            account_number=args.account_number or os.getenv("OCTOPUS_ACCOUNT_NUMBER"),
            time_zone=args.time_zone or os.getenv("OCTOPUS_TIME_ZONE"),
        )
    except ValidationError as exc:
        print(f"Invalid configuration: {exc}", file=sys.stderr)
        return 2
    _LOGGER.debug(
        "Config: api_key=%s account_number=%s time_zone=%s",
        mask_secret(config.api_key),
        mask_secret(config.account_number),
        config.time_zone,
    )

    try:
        async with Client(config) as client:
            if args.watch:
                await client.run(_print_snapshot, refresh_slots=args.refresh_slots)
                return 0
            token = await client.get_token()
            slots = await client.get_planned_slots()
            windows = client.standard_windows()
            snapshot = await client.get_status()
    except PyOctopusGoError as exc:
        print(f"Error: {exc.__class__.__name__}: {exc}", file=sys.stderr)
        if args.traceback:
            traceback.print_exc()
        return 1

    print(f"Token: {mask_secret(token)}")
    print(f"Standard windows ({config.time_zone}):")
    for window in windows:
        print(f"- {_format_slot(window)}")
    print(f"Planned dispatches: {len(slots)}")
    for slot in slots:
        print(f"- {_format_slot(slot)}")
    print("Status:")
    _print_snapshot(snapshot)
    return 0


if __name__ == "__main__":
    try:
        raise SystemExit(asyncio.run(main()))
    except KeyboardInterrupt:
        raise SystemExit(130) from None
