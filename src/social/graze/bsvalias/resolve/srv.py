"""SRV resolver contract and RFC 2782 target ordering.

Resolvers return services ordered by preference: ascending priority, and
within a priority band a weighted random order as described in the "Usage
rules" section of RFC 2782.
"""

import logging
import random
from abc import ABC, abstractmethod
from itertools import accumulate, groupby
from typing import List, Optional, Protocol, Sequence

from pydantic import BaseModel

logger = logging.getLogger(__name__)

ROOT_TARGET = "."
"""SRV target meaning the service is decidedly not available at the domain."""


class RandomSource(Protocol):
    """Source of uniform integers in [0, stop).

    random.Random and random.SystemRandom both satisfy this.
    """

    def randrange(self, stop: int) -> int: ...


class DomainService(BaseModel):
    """One resolved endpoint. Its position in a result list encodes preference."""

    host: str
    port: int


class SrvResolverResponse(BaseModel):
    services: List[DomainService]
    is_domain_secure: bool


class SrvRecord(BaseModel):
    """A single deserialized SRV resource record."""

    name: str
    ttl: int = 0
    priority: int
    weight: int
    port: int
    target: str


def normalize_target(target: str) -> str:
    """Strip a single trailing root dot, keeping the root target itself as "."."""
    if target.endswith("."):
        target = target[:-1]
    return target if target != "" else ROOT_TARGET


def is_service_withdrawn(records: Sequence[SrvRecord]) -> bool:
    """True when there is precisely one record and it targets the root domain.

    A root target among two or more records is not a withdrawal; it is dropped
    during ordering like any other unusable record.
    """
    return len(records) == 1 and records[0].target == ROOT_TARGET


def order_by_weight(
    records: Sequence[SrvRecord], random_source: RandomSource
) -> List[DomainService]:
    """Order records sharing one priority by repeated weighted selection.

    Args:
        records: Records with the same priority
        random_source: Source of the random draws

    Returns:
        Every record as a DomainService, most preferred first
    """
    remaining = list(records)
    ordered: List[DomainService] = []

    while len(remaining) > 0:
        if len(remaining) == 1:
            selected = remaining.pop()
        else:
            running_sums = list(accumulate(record.weight for record in remaining))
            total_weight = running_sums[-1]

            # randrange(0) is empty, all weights zero selects the first record.
            draw = random_source.randrange(total_weight) if total_weight > 0 else 0

            index = next(i for i, s in enumerate(running_sums) if s >= draw)
            selected = remaining.pop(index)

        ordered.append(DomainService(host=selected.target, port=selected.port))

    return ordered


def order_srv_records(
    records: Sequence[SrvRecord], random_source: RandomSource
) -> List[DomainService]:
    """Order SRV records per RFC 2782, dropping root targets.

    Args:
        records: Deserialized SRV records
        random_source: Source of the random draws used for weighting

    Returns:
        Services ordered by ascending priority, weighted within each priority
    """
    usable = sorted(
        (record for record in records if record.target != ROOT_TARGET),
        key=lambda record: record.priority,
    )

    ordered: List[DomainService] = []
    for _, band in groupby(usable, key=lambda record: record.priority):
        ordered.extend(order_by_weight(list(band), random_source))

    logger.debug("Ordered %d of %d SRV records", len(ordered), len(records))
    return ordered


class SrvResolver(ABC):
    """Locates the services offered for a domain."""

    def __init__(self, random_source: Optional[RandomSource] = None) -> None:
        self._random_source: RandomSource = (
            random_source if random_source is not None else random.SystemRandom()
        )

    @abstractmethod
    async def locate_services(
        self, domain_name: str, service: str, protocol: str
    ) -> Optional[SrvResolverResponse]:
        """Locate the endpoints offering a service for a domain.

        Args:
            domain_name: Domain to query
            service: Symbolic service name, without the leading underscore
            protocol: Transport protocol name, without the leading underscore

        Returns:
            The ordered services, or None if the service does not exist or
            has been withdrawn
        """
        pass

    def _build_response(
        self, records: Sequence[SrvRecord], is_domain_secure: bool
    ) -> Optional[SrvResolverResponse]:
        if is_service_withdrawn(records):
            logger.debug("Service withdrawn, single SRV record targets the root")
            return None

        return SrvResolverResponse(
            services=order_srv_records(records, self._random_source),
            is_domain_secure=is_domain_secure,
        )


def query_name(domain_name: str, service: str, protocol: str) -> str:
    return f"_{service}._{protocol}.{domain_name}"
