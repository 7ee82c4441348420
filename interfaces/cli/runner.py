"""Command-line runner for the PCC blackbox scenarios.

    python -m interfaces.cli.runner --env-file config/.env portus checkNodeAdd

Arguments are scenario names or suite names. Scenarios run in order and share
one ScenarioContext; a failing scenario is reported and the run continues.
"""

import argparse
import asyncio
import logging
import sys
import time

from dotenv import load_dotenv

from config.settings import Settings
from core.notifications import PccNotificationPoller
from core.scenarios import SCENARIOS, SUITES, ScenarioContext, ScenarioFailed, ScenarioSkipped
from integrations.pcc import PccClient

logger = logging.getLogger(__name__)


def expand(names: list[str]) -> list[str]:
    """Resolve suite names to their scenarios, keeping order."""
    resolved = []
    for name in names:
        if name in SUITES:
            resolved.extend(SUITES[name])
        elif name in SCENARIOS:
            resolved.append(name)
        else:
            raise ValueError(f"Unknown scenario or suite: {name}")
    return resolved


async def run(names: list[str], ctx: ScenarioContext) -> dict[str, str]:
    results = {}
    for name in names:
        start = time.monotonic()
        logger.info(f"=== RUN {name}")
        try:
            await SCENARIOS[name](ctx)
        except ScenarioSkipped as e:
            results[name] = "SKIP"
            logger.info(f"--- SKIP {name}: {e}")
            continue
        except ScenarioFailed as e:
            results[name] = "FAIL"
            logger.error(f"--- FAIL {name} ({time.monotonic() - start:.1f}s): {e}")
            continue
        except Exception as e:
            results[name] = "FAIL"
            logger.exception(f"--- FAIL {name}: unexpected error: {e}")
            continue
        results[name] = "PASS"
        logger.info(f"--- PASS {name} ({time.monotonic() - start:.1f}s)")
    return results


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Run PCC blackbox scenarios")
    parser.add_argument("scenarios", nargs="*", help="scenario or suite names (default: all suites)")
    parser.add_argument("--env-file", help="dotenv file with PCC settings")
    parser.add_argument("--dry-run", action="store_true", help="skip every scenario that touches the server")
    parser.add_argument("--list", action="store_true", help="list scenarios and suites, then exit")
    parser.add_argument("-v", "--verbose", action="store_true")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.list:
        for suite, members in SUITES.items():
            print(f"{suite}: {' '.join(members)}")
        print(f"scenarios: {' '.join(SCENARIOS)}")
        return 0

    if args.env_file:
        load_dotenv(args.env_file, override=True)
    settings = Settings()
    if args.dry_run:
        settings.dry_run = True

    try:
        names = expand(args.scenarios or list(SUITES))
    except ValueError as e:
        logger.error(str(e))
        return 2

    client = PccClient(
        base_url=settings.pcc_url,
        username=settings.pcc_username,
        password=settings.pcc_password,
        verify_tls=settings.pcc_verify_tls,
        timeout=settings.pcc_request_timeout,
    )
    ctx = ScenarioContext(client=client, poller=PccNotificationPoller(client), settings=settings)
    results = asyncio.run(run(names, ctx))

    failed = [name for name, status in results.items() if status == "FAIL"]
    logger.info(f"{len(results) - len(failed)}/{len(results)} scenarios passed or skipped")
    return 1 if failed else 0


if __name__ == "__main__":
    sys.exit(main())
