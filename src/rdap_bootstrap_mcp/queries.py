"""
Parsing of user-supplied lookup queries into matcher query types.
"""

import ipaddress

from .matcher import MAX_AS_NUMBER, IPNetwork


def parse_as_number(text: str) -> int:
    """
    Parse an AS number such as "65411", "AS65411" or "as65411".

    Raises:
        ValueError: If the text is not an unsigned 32-bit AS number.
    """
    value = text.strip()
    if value[:2].lower() == "as":
        value = value[2:]

    if not value.isascii() or not value.isdigit():
        raise ValueError(f"Invalid AS number: {text.strip()!r}")

    number = int(value)
    if number > MAX_AS_NUMBER:
        raise ValueError(f"AS number out of range (max {MAX_AS_NUMBER}): {number}")
    return number


def parse_ip_query(text: str) -> IPNetwork:
    """
    Parse an IP address or CIDR prefix into a network.

    A bare address becomes a host network (/32 or /128). Host bits in a
    prefix are masked, so "192.0.2.1/25" becomes 192.0.2.0/25.

    Raises:
        ValueError: If the text is neither an address nor a prefix.
    """
    value = text.strip()
    try:
        return ipaddress.ip_network(value, strict=False)
    except ValueError:
        raise ValueError(f"Invalid IP address or network: {value!r}") from None


def is_as_query(text: str) -> bool:
    """Guess whether a free-form query is an AS number rather than an IP."""
    value = text.strip()
    if value[:2].lower() == "as":
        return True
    return value.isascii() and value.isdigit()
