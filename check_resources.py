#!/usr/bin/env python3
"""
CLI tool to find the authoritative RDAP servers for AS numbers and IPs.

Reads local copies of the IANA bootstrap files (asn.json, ipv4.json,
ipv6.json); nothing is fetched.

Usage:
    python check_resources.py AS65411 192.0.2.1 2001:db8::/48
    python check_resources.py 64512 --asn-file ./asn.json
    python check_resources.py 198.51.100.0/24 --dir ./bootstrap --json

Environment:
    RDAP_BOOTSTRAP_DIR - Directory holding the bootstrap files
"""

import argparse
import sys
from dataclasses import dataclass
from pathlib import Path

from rdap_bootstrap_mcp.config import get_registry_dir
from rdap_bootstrap_mcp.matcher import match_as, match_ip_network
from rdap_bootstrap_mcp.queries import is_as_query, parse_as_number, parse_ip_query
from rdap_bootstrap_mcp.rdap_bootstrap import ASN_FILE, IPV4_FILE, IPV6_FILE, load_registry_file
from rdap_bootstrap_mcp.registry import BootstrapError, ServiceRegistry


@dataclass
class ResourceResult:
    query: str
    urls: list[str]
    error: str | None = None


def check_resource(
    query: str,
    registries: dict[str, ServiceRegistry | None],
) -> ResourceResult:
    """
    Look up one AS number or IP query.

    Args:
        query: "AS65411", "65411", "192.0.2.1", "2001:db8::/32", ...
        registries: {"asn": ..., "ipv4": ..., "ipv6": ...}; None for missing files

    Returns:
        ResourceResult with the normalized query and matched URLs
    """
    try:
        if is_as_query(query):
            as_number = parse_as_number(query)
            normalized = f"AS{as_number}"
            registry = registries.get("asn")
            if registry is None:
                return ResourceResult(query=normalized, urls=[], error=f"{ASN_FILE} not loaded")
            return ResourceResult(query=normalized, urls=match_as(registry, as_number))

        network = parse_ip_query(query)
        name = "ipv4" if network.version == 4 else "ipv6"
        registry = registries.get(name)
        if registry is None:
            return ResourceResult(query=str(network), urls=[], error=f"{name}.json not loaded")
        return ResourceResult(query=str(network), urls=match_ip_network(registry, network))

    except (BootstrapError, ValueError) as e:
        return ResourceResult(query=query, urls=[], error=str(e))


def load_registries(
    directory: Path,
    asn_file: Path | None = None,
    ipv4_file: Path | None = None,
    ipv6_file: Path | None = None,
) -> dict[str, ServiceRegistry | None]:
    """
    Load the three registries, preferring explicitly given files.

    Files named explicitly must exist; files looked up in the directory
    may be missing.
    """
    registries = {}
    for name, explicit, default in (
        ("asn", asn_file, ASN_FILE),
        ("ipv4", ipv4_file, IPV4_FILE),
        ("ipv6", ipv6_file, IPV6_FILE),
    ):
        if explicit is not None:
            registries[name] = load_registry_file(Path(explicit), required=True)
        else:
            registries[name] = load_registry_file(Path(directory) / default)
    return registries


def main():
    parser = argparse.ArgumentParser(
        description="Find the authoritative RDAP servers for AS numbers and IP networks",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    %(prog)s AS65411 192.0.2.1
    %(prog)s 2001:db8::/48 --ipv6-file ./ipv6.json
    %(prog)s 64512 198.51.100.7 --dir ./bootstrap --json

Bootstrap files:
    https://data.iana.org/rdap/asn.json
    https://data.iana.org/rdap/ipv4.json
    https://data.iana.org/rdap/ipv6.json
        """
    )
    parser.add_argument(
        "queries",
        nargs="+",
        help="AS numbers (AS65411 or 65411) and IP addresses or CIDR prefixes"
    )
    parser.add_argument(
        "--dir",
        type=Path,
        default=None,
        help="Directory with asn.json, ipv4.json and ipv6.json (or set RDAP_BOOTSTRAP_DIR)"
    )
    parser.add_argument("--asn-file", type=Path, default=None, help="Path to asn.json")
    parser.add_argument("--ipv4-file", type=Path, default=None, help="Path to ipv4.json")
    parser.add_argument("--ipv6-file", type=Path, default=None, help="Path to ipv6.json")
    parser.add_argument(
        "--json",
        action="store_true",
        help="Output results as JSON"
    )

    args = parser.parse_args()

    directory = args.dir or get_registry_dir()

    try:
        registries = load_registries(directory, args.asn_file, args.ipv4_file, args.ipv6_file)
    except BootstrapError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    # Remove duplicates while preserving order
    queries = list(dict.fromkeys(args.queries))

    results = [check_resource(q, registries) for q in queries]

    if args.json:
        import json
        output = [
            {
                "query": r.query,
                "urls": r.urls,
                "error": r.error
            }
            for r in results
        ]
        print(json.dumps(output, indent=2))
    else:
        for result in results:
            if result.error:
                symbol = "!"
                status = f"ERROR: {result.error}"
            elif result.urls:
                symbol = "+"
                status = ", ".join(result.urls)
            else:
                symbol = "-"
                status = "NOT FOUND"

            print(f"[{symbol}] {result.query}: {status}")

    sys.exit(1 if any(r.error for r in results) else 0)


if __name__ == "__main__":
    main()
