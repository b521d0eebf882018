"""
bsvalias - capability discovery client

This package locates the server responsible for a bsvalias (paymail) domain and
fetches the capabilities that server advertises. Higher level feature clients
(payments, public key lookup, profiles) use the capability map to build their
requests.

Key Components:
- resolve: Service location (SRV over DNS-over-HTTPS or plain DNS) and
  capability resolution
- transport: aiohttp backed HTTP transport returning parsed JSON
- config: Environment driven settings and logging setup
- errors: Tagged client error taxonomy
- validators: Handle validation and parsing

Resolution Flow:
1. Split the handle alias@domain and keep the domain
2. Look up _bsvalias._tcp.{domain} SRV records, ordered per RFC 2782
3. Trust the first target if it is the domain itself, its www. host, or the
   SRV answer was authenticated (DNSSEC)
4. Fetch https://{target}:{port}/.well-known/bsvalias and return its
   capabilities
"""
