"""
Resource Matching

Resolves an AS number or an IP network to the service URLs of the most
specific matching entry in a bootstrap registry.

Both matchers scan every key of every entry. A key that cannot be parsed
aborts the whole call with KeyParseError, even if another entry already
matched. No match is not an error: the result is an empty list.
"""

import ipaddress
import re
from dataclasses import dataclass

from .registry import BootstrapError, ServiceRegistry

MAX_AS_NUMBER = 2**32 - 1

_DECIMAL = re.compile(r"[0-9]+")

IPNetwork = ipaddress.IPv4Network | ipaddress.IPv6Network


class KeyParseError(BootstrapError):
    """A registry key is not a valid AS range or CIDR prefix."""

    def __init__(self, key: str, reason: str):
        self.key = key
        self.reason = reason
        super().__init__(f"invalid registry key {key!r}: {reason}")


@dataclass(frozen=True)
class Candidate:
    """
    A matching entry.

    position: index of the entry in the registry's services
    span: size of the matching key. For AS ranges this is end - begin,
          for CIDR keys the number of host bits. Smaller is more specific.
    """

    position: int
    span: int


def is_more_specific(candidate: Candidate, incumbent: Candidate | None) -> bool:
    """
    Return True if `candidate` should replace `incumbent` as the best match.

    The smaller span wins; on equal spans the earlier entry wins.
    """
    if incumbent is None:
        return True
    if candidate.span != incumbent.span:
        return candidate.span < incumbent.span
    return candidate.position < incumbent.position


def parse_as_range(key: str) -> tuple[int, int]:
    """
    Parse a "<begin>-<end>" AS range key.

    The key is split on the first "-". begin > end is not rejected here;
    such a range simply never matches.
    """
    begin, sep, end = key.partition("-")
    if not sep:
        raise KeyParseError(key, "expected '<begin>-<end>'")
    for part in (begin, end):
        if not _DECIMAL.fullmatch(part):
            raise KeyParseError(key, f"{part!r} is not a decimal AS number")
    return int(begin), int(end)


def parse_cidr(key: str) -> IPNetwork:
    """
    Parse an "<address>/<prefixlen>" key, masking any host bits.

    The prefix length must be a plain decimal without leading zeros;
    netmask, hostmask and scoped (zone id) forms are malformed.
    """
    address, sep, length = key.partition("/")
    if not sep:
        raise KeyParseError(key, "expected '<address>/<prefixlen>'")
    if not _DECIMAL.fullmatch(length) or (len(length) > 1 and length.startswith("0")):
        raise KeyParseError(key, f"{length!r} is not a decimal prefix length")
    if "%" in address:
        raise KeyParseError(key, "scoped addresses are not allowed")
    try:
        return ipaddress.ip_network(key, strict=False)
    except ValueError as e:
        raise KeyParseError(key, str(e)) from e


def _best_urls(registry: ServiceRegistry, best: Candidate | None) -> list[str]:
    if best is None:
        return []
    return list(registry.services[best.position].urls)


def match_as(registry: ServiceRegistry, as_number: int) -> list[str]:
    """
    Find the service URLs for an AS number.

    Args:
        registry: A decoded asn.json registry
        as_number: Unsigned 32-bit AS number

    Returns:
        URLs of the entry whose matching range is narrowest (earliest entry
        on ties), in registry order. Empty list if nothing matches.

    Raises:
        KeyParseError: If any key in the registry is not a valid AS range.
    """
    if isinstance(as_number, bool) or not isinstance(as_number, int):
        raise TypeError(f"AS number must be an int, got {type(as_number).__name__}")
    if not 0 <= as_number <= MAX_AS_NUMBER:
        raise ValueError(f"AS number out of range: {as_number}")

    best = None
    for position, entry in enumerate(registry.services):
        for key in entry.keys:
            begin, end = parse_as_range(key)
            if begin <= as_number <= end:
                candidate = Candidate(position=position, span=end - begin)
                if is_more_specific(candidate, best):
                    best = candidate

    return _best_urls(registry, best)


def match_ip_network(registry: ServiceRegistry, network: IPNetwork) -> list[str]:
    """
    Find the service URLs for an IP network (longest-prefix match).

    A key matches when it contains the whole query network. IPv4 keys
    only match IPv4 queries and IPv6 keys only IPv6 queries.

    Args:
        registry: A decoded ipv4.json or ipv6.json registry
        network: Parsed query network, e.g. ipaddress.ip_network("192.0.2.0/25")

    Returns:
        URLs of the entry owning the longest matching prefix (earliest entry
        on ties). Empty list if nothing matches.

    Raises:
        KeyParseError: If any key in the registry is not a valid CIDR prefix.
    """
    if not isinstance(network, (ipaddress.IPv4Network, ipaddress.IPv6Network)):
        raise TypeError(f"network must be an IPv4Network or IPv6Network, got {type(network).__name__}")

    best = None
    for position, entry in enumerate(registry.services):
        for key in entry.keys:
            key_network = parse_cidr(key)
            if key_network.version != network.version:
                continue
            if network.subnet_of(key_network):
                span = key_network.max_prefixlen - key_network.prefixlen
                candidate = Candidate(position=position, span=span)
                if is_more_specific(candidate, best):
                    best = candidate

    return _best_urls(registry, best)
