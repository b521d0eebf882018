from typing import List, Optional
import argparse
import asyncio
import json
import logging
import sys

import aiohttp
import sentry_sdk

from social.graze.bsvalias.config import Settings, configure_logging
from social.graze.bsvalias.resolve.capability import (
    CapabilityResolver,
    create_srv_resolver,
)
from social.graze.bsvalias.transport import HttpTransport
from social.graze.bsvalias.validators import parse_handle

logger = logging.getLogger(__name__)


def subject_domain(subject: str) -> str:
    """Domain to resolve for a handle (alias@domain) or a bare domain."""
    if "@" in subject:
        return parse_handle(subject).domain
    return subject.strip().lower()


async def resolve_subjects(settings: Settings, subjects: List[str]) -> int:
    failures = 0

    async with aiohttp.ClientSession() as session:
        transport = HttpTransport(
            client_session=session,
            timeout=settings.request_timeout,
            user_agent=settings.user_agent,
        )
        resolver = CapabilityResolver(
            create_srv_resolver(settings, transport), transport
        )

        for subject in subjects:
            try:
                domain = subject_domain(subject)
                capabilities = await resolver.get_capabilities_for_domain(domain)
                print(json.dumps({subject: capabilities}, indent=2, sort_keys=True))
            except Exception as e:
                failures += 1
                sentry_sdk.capture_exception(e)
                logger.exception("Exception resolving subject %s", subject)

    return failures


async def realMain(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(
        prog="bsvalias-resolve",
        description="Resolve bsvalias capabilities for handles or domains",
    )
    parser.add_argument(
        "subject", nargs="+", help="The handle(s) or domain(s) to resolve."
    )
    parser.add_argument(
        "--resolver",
        choices=["doh", "dns"],
        default=None,
        help="The SRV resolver to use. Defaults to the SRV_RESOLVER setting.",
    )
    parser.add_argument(
        "--doh-hostname",
        default=None,
        help="The DNS-over-HTTPS hostname. Defaults to the DOH_HOSTNAME setting.",
    )

    args = vars(parser.parse_args(argv))

    overrides = {}
    if args.get("resolver") is not None:
        overrides["srv_resolver"] = args["resolver"]
    if args.get("doh_hostname") is not None:
        overrides["doh_hostname"] = args["doh_hostname"]

    settings = Settings(**overrides)

    configure_logging(settings)

    if settings.sentry_dsn:
        sentry_sdk.init(dsn=settings.sentry_dsn)

    subjects: List[str] = args.get("subject", [])

    failures = await resolve_subjects(settings, subjects)
    return 1 if failures > 0 else 0


def main() -> None:
    sys.exit(asyncio.run(realMain()))


if __name__ == "__main__":
    main()
