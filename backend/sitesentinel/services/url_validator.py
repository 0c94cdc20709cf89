"""
URL validation - normalisation, format checks and SSRF protection.
"""
import ipaddress
import re
import socket
from typing import Optional
from urllib.parse import urlparse

from sitesentinel.logger import logger


class UrlValidationError(ValueError):
    """Raised when a URL cannot be analyzed."""


_DOMAIN_RE = re.compile(r"^([a-z0-9]([a-z0-9-]{0,61}[a-z0-9])?\.)+[a-z]{2,}$", re.IGNORECASE)


def normalize_url(url: str) -> str:
    """Trim and add https:// when the scheme is missing."""
    url = (url or "").strip()
    if url and not url.lower().startswith(("http://", "https://")) and "://" not in url:
        url = "https://" + url
    return url


def validate_url(url: str) -> str:
    """
    Validate a user-supplied URL.

    Returns:
        The normalised URL

    Raises:
        UrlValidationError: scheme is not http(s) or the host is missing
    """
    if not isinstance(url, str) or not url.strip():
        raise UrlValidationError("URL is required and must be a string")

    normalized = normalize_url(url)
    parsed = urlparse(normalized)

    if parsed.scheme.lower() not in ("http", "https"):
        raise UrlValidationError(f"Invalid scheme: {parsed.scheme}")
    try:
        hostname = parsed.hostname
    except ValueError as e:
        raise UrlValidationError(f"Invalid URL format: {e}") from e
    if not hostname:
        raise UrlValidationError("Invalid URL format. Please provide a valid HTTP or HTTPS URL.")

    return normalized


def is_valid_domain(domain: str) -> bool:
    return bool(domain) and bool(_DOMAIN_RE.match(domain))


def get_hostname(url: str) -> Optional[str]:
    try:
        return urlparse(url).hostname
    except ValueError:
        return None


class SSRFProtection:
    """Validates URLs to prevent server-side request forgery."""

    # Private/internal IP ranges to block
    BLOCKED_RANGES = [
        ipaddress.ip_network("10.0.0.0/8"),
        ipaddress.ip_network("172.16.0.0/12"),
        ipaddress.ip_network("192.168.0.0/16"),
        ipaddress.ip_network("127.0.0.0/8"),
        ipaddress.ip_network("169.254.0.0/16"),
        ipaddress.ip_network("0.0.0.0/8"),
        ipaddress.ip_network("::1/128"),
        ipaddress.ip_network("fc00::/7"),
        ipaddress.ip_network("fe80::/10"),
    ]

    # Blocked hostnames
    BLOCKED_HOSTS = {
        "localhost",
        "metadata.google.internal",
        "169.254.169.254",  # AWS/GCP metadata
    }

    @classmethod
    def is_blocked_ip(cls, ip_str: str) -> bool:
        try:
            ip = ipaddress.ip_address(ip_str)
        except ValueError:
            return False
        # ::ffff:a.b.c.d reaches the IPv4 host
        if ip.version == 6 and ip.ipv4_mapped:
            ip = ip.ipv4_mapped
        if (
            ip.is_private
            or ip.is_loopback
            or ip.is_link_local
            or ip.is_unspecified
            or ip.is_reserved
            or ip.is_multicast
        ):
            return True
        return any(ip in blocked for blocked in cls.BLOCKED_RANGES)

    @classmethod
    def check(cls, url: str) -> None:
        """
        Reject URLs that point at internal infrastructure.

        Every address the hostname resolves to (IPv4 and IPv6) must be public.

        Raises:
            UrlValidationError: hostname or resolved address is internal
        """
        hostname = (get_hostname(url) or "").lower()
        if not hostname:
            raise UrlValidationError("Could not parse hostname")

        if hostname in cls.BLOCKED_HOSTS:
            raise UrlValidationError(f"Blocked hostname: {hostname}")

        if cls.is_blocked_ip(hostname):
            raise UrlValidationError(f"IP {hostname} is in a blocked range")

        try:
            addresses = {info[4][0] for info in socket.getaddrinfo(hostname, None)}
        except (socket.gaierror, UnicodeError):
            # Unresolvable hosts are reported by the DNS checks instead
            logger.warning(f"DNS resolution failed for {hostname}")
            return

        for ip_str in sorted(addresses):
            if cls.is_blocked_ip(ip_str):
                raise UrlValidationError(f"{hostname} resolves to {ip_str}, which is in a blocked range")
