"""Command line example: look up current weather for one or more cities."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from collections.abc import Sequence

from pydantic import ValidationError

from .config import SDKConfig, SDKMode, SDKSettings
from .core import get_instance


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="weather-sdk",
        description="Fetch current weather from OpenWeatherMap through the caching SDK.",
    )
    parser.add_argument("cities", nargs="+", metavar="CITY", help="City names to look up")
    parser.add_argument(
        "--api-key",
        default=None,
        help="OpenWeatherMap API key (defaults to OPENWEATHER_API_KEY)",
    )
    parser.add_argument(
        "--mode",
        choices=[mode.value for mode in SDKMode],
        default=SDKMode.ON_DEMAND.value,
        help="on_demand fetches on cache misses; polling also refreshes in the background",
    )
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    args = _build_parser().parse_args(argv)
    settings = SDKSettings()

    log_level = getattr(logging, settings.log_level.upper(), logging.INFO)
    logging.basicConfig(level=log_level, format="%(levelname)s %(name)s: %(message)s")

    api_key = args.api_key or settings.api_key
    try:
        config = SDKConfig(credential=api_key or "", mode=args.mode)
    except ValidationError:
        print(
            "Error: OpenWeatherMap API key not provided. "
            "Pass --api-key or set OPENWEATHER_API_KEY.",
            file=sys.stderr,
        )
        return 2

    sdk = get_instance(config, settings=settings)
    exit_code = 0
    try:
        for city in args.cities:
            # The second lookup is served from the cache.
            for _ in range(2):
                result = sdk.lookup(city)
                if not result.ok:
                    break
            if result.ok:
                print(json.dumps(result.value.summary(), ensure_ascii=False))
            else:
                error = result.error
                print(f"{city}: {type(error).__name__}: {error}", file=sys.stderr)
                exit_code = 1
    finally:
        sdk.destroy()
    return exit_code


if __name__ == "__main__":
    sys.exit(main())
