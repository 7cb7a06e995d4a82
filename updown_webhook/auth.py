"""Request authentication for updown.io webhooks.

updown.io does not sign its webhooks. A request is accepted when its
User-Agent names updown.io and the first ``X-Forwarded-For`` address is one
of the hosts published at ips.updown.io. The first forwarded address is
trusted as-is; multi-hop chains are not disambiguated.
"""

from ipaddress import IPv6Address, ip_address

from fastapi import status
from starlette.datastructures import Headers

from updown_webhook.errors import AuthenticationError
from updown_webhook.resolver import IPAddress


UPDOWN_USER_AGENT = "updown.io"


class RequestAuthenticator:
    """Accepts or rejects inbound webhook requests."""

    def __init__(
        self,
        provider_ips: frozenset[IPAddress],
        user_agent: str = UPDOWN_USER_AGENT,
    ):
        self._provider_ips = provider_ips
        self._user_agent = user_agent

    @property
    def provider_ips(self) -> frozenset[IPAddress]:
        return self._provider_ips

    def valid_user_agent(self, values: list[str]) -> bool:
        return any(self._user_agent in value for value in values)

    def permitted_ip(self, value: str) -> bool:
        try:
            ip = ip_address(value.strip())
        except ValueError:
            return False
        if isinstance(ip, IPv6Address) and ip.ipv4_mapped:
            ip = ip.ipv4_mapped
        return ip in self._provider_ips

    def authenticate(self, method: str, headers: Headers) -> None:
        """Validate the request's origin and method.

        Raises:
            AuthenticationError: 400 for a bad User-Agent or forwarded IP,
                405 when the method is not POST.
        """
        user_agents = headers.getlist("user-agent")
        if not user_agents:
            raise AuthenticationError("expected 'User-Agent' header")
        if not self.valid_user_agent(user_agents):
            raise AuthenticationError(
                f"expected User-Agent header to contain {self._user_agent}"
            )

        forwarded = headers.getlist("x-forwarded-for")
        if not forwarded:
            raise AuthenticationError("expected 'X-Forwarded-For' header")

        # First entry is taken as the originating (updown.io) host
        origin = forwarded[0].split(",")[0].strip()
        if not origin:
            raise AuthenticationError(
                "expected 'X-Forwarded-For' header to contain at least one value"
            )
        if not self.permitted_ip(origin):
            raise AuthenticationError(
                f"unable to match IP {origin!r} to permitted IP list"
            )

        if method.upper() != "POST":
            raise AuthenticationError(
                f"unexpected method {method}",
                status_code=status.HTTP_405_METHOD_NOT_ALLOWED,
            )
