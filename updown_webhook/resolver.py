"""Resolve the updown.io notification hosts' IP addresses."""

import asyncio
import logging
import socket
from collections.abc import Iterable
from ipaddress import IPv4Address, IPv6Address, ip_address

from updown_webhook.errors import ResolverError

logger = logging.getLogger(__name__)

IPAddress = IPv4Address | IPv6Address


async def resolve_provider_ips(hostname: str) -> frozenset[IPAddress]:
    """Resolve ``hostname`` to every IPv4 and IPv6 address it publishes.

    Called once at startup; the result is never refreshed.

    Raises:
        ResolverError: If the lookup fails or returns no addresses.
    """
    loop = asyncio.get_running_loop()
    try:
        resolved = await loop.getaddrinfo(hostname, None, type=socket.SOCK_STREAM)
    except socket.gaierror as e:
        logger.error(
            f"Unable to enumerate {hostname} IPs: {e}",
            extra={"handler": "resolver", "error": str(e)},
        )
        raise ResolverError(f"Cannot resolve {hostname}") from e

    ips = frozenset(ip_address(sockaddr[0]) for *_, sockaddr in resolved)
    if not ips:
        raise ResolverError(f"DNS resolution returned no addresses for {hostname}")

    logger.info(
        f"Caching {hostname} IP whitelist ({len(ips)} address(es))",
        extra={"handler": "resolver", "ips": sorted(str(ip) for ip in ips)},
    )
    return ips


def parse_ips(values: Iterable[str]) -> frozenset[IPAddress]:
    """Build a provider IP set from configured addresses.

    Raises:
        ValueError: If a value is not an IP address.
    """
    return frozenset(ip_address(value.strip()) for value in values)
