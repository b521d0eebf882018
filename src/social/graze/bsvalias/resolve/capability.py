"""bsvalias capability discovery.

Locates the host serving a domain's /.well-known/bsvalias document and fetches
the capabilities it advertises. Capability documents are only fetched from
the queried domain itself (or its www. host), or from a host named by an SRV
record that the resolver reported as authenticated.
"""

import logging
from typing import Any, Dict

from social.graze.bsvalias.config import Settings
from social.graze.bsvalias.errors import (
    CapabilityNotSupportedError,
    ConfigurationError,
    DNSSECNotEnabledError,
    UnexpectedServerResponseError,
)
from social.graze.bsvalias.resolve.dns import DnsSrvResolver
from social.graze.bsvalias.resolve.doh import DohSrvResolver
from social.graze.bsvalias.resolve.srv import SrvResolver
from social.graze.bsvalias.transport import Transport

logger = logging.getLogger(__name__)

BSVALIAS_VERSION = "1.0"

BSVALIAS_SERVICE = "bsvalias"
BSVALIAS_PROTOCOL = "tcp"

DEFAULT_PORT = 443

Capabilities = Dict[str, Any]
"""Capability ID (usually a BRFC ID) to an opaque, capability specific value."""


def domains_are_equal(domain_name_1: str, domain_name_2: str) -> bool:
    return domain_name_1.removesuffix(".") == domain_name_2.removesuffix(".")


class CapabilityResolver:
    """Queries remote servers to fetch their capabilities."""

    def __init__(self, srv_resolver: SrvResolver, transport: Transport) -> None:
        self._srv_resolver = srv_resolver
        self._transport = transport

    async def get_capabilities_for_domain(self, domain_name: str) -> Capabilities:
        """Fetch the capabilities advertised for a domain.

        Args:
            domain_name: Domain part of a handle

        Returns:
            The capabilities object of the well-known document, unmodified

        Raises:
            DNSSECNotEnabledError: If the discovery target cannot be trusted
            UnexpectedServerResponseError: If the document is malformed
        """
        well_known_url = await self.get_well_known_base_url(domain_name)

        response = await self._transport.get(well_known_url)

        if not isinstance(response, dict):
            raise UnexpectedServerResponseError("Invalid capabilities document")

        if response.get("bsvalias") != BSVALIAS_VERSION:
            raise UnexpectedServerResponseError("Unsupported BSV alias version")

        capabilities = response.get("capabilities")
        if not isinstance(capabilities, dict):
            raise UnexpectedServerResponseError("No capabilities returned")

        logger.debug(
            "Fetched %d capabilities for %s", len(capabilities), domain_name
        )
        return capabilities

    async def is_capability_supported_for_domain(
        self, capability_id: str, domain_name: str
    ) -> bool:
        capabilities = await self.get_capabilities_for_domain(domain_name)
        return capability_id in capabilities

    async def get_capability_for_domain(
        self, capability_id: str, domain_name: str
    ) -> Any:
        """Return the value of one capability.

        Raises:
            CapabilityNotSupportedError: If the domain does not advertise it
        """
        capabilities = await self.get_capabilities_for_domain(domain_name)
        if capability_id not in capabilities:
            raise CapabilityNotSupportedError(
                f"No {capability_id} capability found for {domain_name}"
            )
        return capabilities[capability_id]

    async def get_well_known_base_url(self, domain_name: str) -> str:
        """Build the well-known document URL for a domain.

        Args:
            domain_name: Domain part of a handle

        Returns:
            https://{host}:{port}/.well-known/bsvalias for the trusted target

        Raises:
            DNSSECNotEnabledError: If the SRV target is a third party host and
                the SRV answer was not authenticated
        """
        target_domain_name = domain_name
        target_port = DEFAULT_PORT
        is_secure = False

        srv_resolver_response = await self._srv_resolver.locate_services(
            domain_name, BSVALIAS_SERVICE, BSVALIAS_PROTOCOL
        )

        if srv_resolver_response is not None and len(srv_resolver_response.services) > 0:
            service = srv_resolver_response.services[0]

            target_domain_name = service.host
            target_port = service.port

            is_secure = srv_resolver_response.is_domain_secure

        if domains_are_equal(target_domain_name, domain_name) or domains_are_equal(
            target_domain_name, f"www.{domain_name}"
        ):
            is_secure = True

        if not is_secure:
            logger.warning(
                "Refusing unauthenticated SRV target %s for %s",
                target_domain_name,
                domain_name,
            )
            raise DNSSECNotEnabledError(
                f"DNSSEC not enabled on domain {target_domain_name}"
            )

        logger.debug(
            "Using %s:%d for %s", target_domain_name, target_port, domain_name
        )

        return f"https://{target_domain_name}:{target_port}/.well-known/bsvalias"


def create_srv_resolver(settings: Settings, transport: Transport) -> SrvResolver:
    """Create the SRV resolver variant selected by settings.srv_resolver."""
    if settings.srv_resolver == "dns":
        return DnsSrvResolver()
    if settings.srv_resolver == "doh":
        return DohSrvResolver(
            transport, hostname=settings.doh_hostname, path=settings.doh_path
        )
    raise ConfigurationError(f"Unknown SRV resolver: {settings.srv_resolver}")
