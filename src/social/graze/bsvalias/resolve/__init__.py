"""
Service Location and Capability Resolution

Key Components:
- srv.py: SrvResolver contract and RFC 2782 ordering shared by all variants
- doh.py: SRV lookups through a DNS-over-HTTPS JSON endpoint
- dns.py: SRV lookups through plain DNS
- capability.py: Trust policy and well-known capability document fetch
- __main__.py: CLI interface for resolution

Only the DoH variant can report an authenticated answer. Capability documents
are never fetched from a third party host unless its SRV record was
authenticated.
"""

from social.graze.bsvalias.resolve.srv import (
    DomainService,
    RandomSource,
    SrvResolver,
    SrvResolverResponse,
)
from social.graze.bsvalias.resolve.doh import DohSrvResolver
from social.graze.bsvalias.resolve.dns import DnsSrvResolver
from social.graze.bsvalias.resolve.capability import (
    Capabilities,
    CapabilityResolver,
    create_srv_resolver,
)

__all__ = [
    "Capabilities",
    "CapabilityResolver",
    "DnsSrvResolver",
    "DohSrvResolver",
    "DomainService",
    "RandomSource",
    "SrvResolver",
    "SrvResolverResponse",
    "create_srv_resolver",
]
