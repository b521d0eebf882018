"""SRV resolution over plain DNS.

Plain DNS answers carry no authenticated data flag, so services located here
are never reported as secure. The capability resolver will only accept them
when they point back at the queried domain itself.
"""

import logging
from typing import Any, List, Optional

from aiodns import DNSResolver
from aiodns import error as dns_error

from social.graze.bsvalias.errors import DnsServerResponseError
from social.graze.bsvalias.resolve.srv import (
    RandomSource,
    SrvRecord,
    SrvResolver,
    SrvResolverResponse,
    normalize_target,
    query_name,
)

logger = logging.getLogger(__name__)

NOT_FOUND_ERROR_CODES = frozenset(
    {
        dns_error.ARES_ENOTFOUND,
        dns_error.ARES_ENODATA,
    }
)


class DnsSrvResolver(SrvResolver):
    """SRV-cognizant client as described in RFC 2782, using the system resolver."""

    def __init__(
        self,
        random_source: Optional[RandomSource] = None,
        resolver: Optional[DNSResolver] = None,
    ) -> None:
        super().__init__(random_source)
        self._resolver = resolver

    async def locate_services(
        self, domain_name: str, service: str, protocol: str
    ) -> Optional[SrvResolverResponse]:
        name = query_name(domain_name, service, protocol)

        if self._resolver is None:
            self._resolver = DNSResolver()

        logger.debug(f"Querying SRV records for {name} via DNS")

        try:
            results = await self._resolver.query(name, "SRV")
        except dns_error.DNSError as e:
            code = e.args[0] if len(e.args) > 0 else None
            if code in NOT_FOUND_ERROR_CODES:
                logger.debug(f"No SRV records for {name}")
                return None
            raise DnsServerResponseError(
                f"SRV lookup for {name} failed: {e}"
            ) from e

        records: List[SrvRecord] = [
            self._to_srv_record(name, result) for result in results or []
        ]

        if len(records) == 0:
            return None

        return self._build_response(records, False)

    def _to_srv_record(self, name: str, result: Any) -> SrvRecord:
        return SrvRecord(
            name=name,
            ttl=getattr(result, "ttl", 0) or 0,
            priority=result.priority,
            weight=result.weight,
            port=result.port,
            target=normalize_target(result.host or ""),
        )
