"""
RDAP Bootstrap MCP Server

An MCP server that tells clients which RDAP servers are authoritative for:
- Autonomous system numbers (via asn.json)
- IPv4 and IPv6 addresses and networks (via ipv4.json / ipv6.json)
"""

import json
import logging

from mcp.server.fastmcp import FastMCP

from . import __version__
from .config import get_registry_dir, get_registry_dir_source, is_debug_enabled
from .queries import is_as_query, parse_as_number, parse_ip_query
from .rdap_bootstrap import (
    describe_bootstrap,
    get_as_service_urls,
    get_ip_service_urls,
    reload_bootstrap,
)
from .registry import BootstrapError

logger = logging.getLogger(__name__)

# Suppress per-request MCP logging by default
# Set RDAP_BOOTSTRAP_DEBUG=1 to enable verbose logging
if not is_debug_enabled():
    logging.getLogger("mcp").setLevel(logging.WARNING)

# Server version
VERSION = __version__

# Initialize the MCP server
mcp = FastMCP("rdap-bootstrap")
mcp._mcp_server.version = VERSION


# =============================================================================
# Lookups
# =============================================================================

def preferred_url(urls: list[str]) -> str | None:
    """Pick the first https URL, else the first URL."""
    for url in urls:
        if url.lower().startswith("https://"):
            return url
    return urls[0] if urls else None


def _lookup_asn_internal(query: str) -> dict:
    """Resolve one AS number query to a response dict."""
    try:
        as_number = parse_as_number(query)
        urls = get_as_service_urls(as_number)
    except (BootstrapError, ValueError) as e:
        return {"query": query, "error": str(e)}

    return {
        "query": f"AS{as_number}",
        "asNumber": as_number,
        "found": bool(urls),
        "urls": urls,
        "preferredUrl": preferred_url(urls),
    }


def _lookup_ip_internal(query: str) -> dict:
    """Resolve one IP address/network query to a response dict."""
    try:
        network = parse_ip_query(query)
        urls = get_ip_service_urls(network)
    except (BootstrapError, ValueError) as e:
        return {"query": query, "error": str(e)}

    return {
        "query": query.strip(),
        "network": str(network),
        "found": bool(urls),
        "urls": urls,
        "preferredUrl": preferred_url(urls),
    }


def _lookup_internal(query: str) -> dict:
    """Resolve a query that may be either an AS number or an IP."""
    if is_as_query(query):
        return _lookup_asn_internal(query)
    return _lookup_ip_internal(query)


def _error_response(result: dict) -> str:
    return json.dumps({"error": result["error"]})


# =============================================================================
# MCP Tools
# =============================================================================

@mcp.tool()
def version() -> str:
    """
    Get the version of the RDAP Bootstrap MCP server.

    Returns:
        Version string including server name and version number.
    """
    return f"RDAP Bootstrap MCP Server version {VERSION}"


@mcp.tool()
def lookup_asn(asn: str) -> str:
    """
    Find the RDAP servers authoritative for an autonomous system number.

    Args:
        asn: AS number, with or without "AS" prefix (e.g. "65411", "AS65411")

    Returns:
        JSON with the normalized query, found flag, server URLs in registry
        order and a preferred (https first) URL. "found" is false and "urls"
        empty when no registry range covers the number.
    """
    if not asn or not asn.strip():
        return json.dumps({"error": "No AS number provided"})

    result = _lookup_asn_internal(asn)
    if "error" in result:
        return _error_response(result)
    return json.dumps(result)


@mcp.tool()
def lookup_ip(address: str) -> str:
    """
    Find the RDAP servers authoritative for an IP address or network.

    Args:
        address: IPv4/IPv6 address or CIDR prefix (e.g. "192.0.2.1", "2001:db8::/48")

    Returns:
        JSON with the query, parsed network, found flag, server URLs in
        registry order and a preferred (https first) URL.
    """
    if not address or not address.strip():
        return json.dumps({"error": "No IP address provided"})

    result = _lookup_ip_internal(address)
    if "error" in result:
        return _error_response(result)
    return json.dumps(result)


@mcp.tool()
def lookup_resources(queries: list[str]) -> str:
    """
    Find RDAP servers for a batch of AS numbers and IP addresses/networks.

    Args:
        queries: Mixed list of AS numbers ("AS65411", "65411") and
                 IP addresses or prefixes ("192.0.2.1", "2001:db8::/32")

    Returns:
        JSON with per-query results (in input order, duplicates removed),
        per-query errors, and a summary count.
    """
    if not queries:
        return json.dumps({"error": "No queries provided"})

    # Remove empties and duplicates while preserving order
    cleaned = list(dict.fromkeys(q.strip() for q in queries if q.strip()))
    if not cleaned:
        return json.dumps({"error": "No valid queries after filtering"})

    results_list = []
    errors_list = []
    for query in cleaned:
        result = _lookup_internal(query)
        if "error" in result:
            errors_list.append(result)
        else:
            results_list.append(result)

    response = {"results": results_list}
    if errors_list:
        response["errors"] = errors_list

    response["summary"] = {
        "found": sum(1 for r in results_list if r["found"]),
        "notFound": sum(1 for r in results_list if not r["found"]),
        "errors": len(errors_list),
    }

    return json.dumps(response)


@mcp.tool()
def registry_info() -> str:
    """
    Describe the loaded bootstrap registries.

    Returns:
        JSON with the registry directory, where it was configured, and the
        version, publication date, description and service count of each
        registry (null for files that are missing).
    """
    try:
        info = describe_bootstrap()
    except BootstrapError as e:
        return json.dumps({"error": str(e), "registryDir": str(get_registry_dir())})

    info["registryDirSource"] = get_registry_dir_source()
    return json.dumps(info)


@mcp.tool()
def reload_registries() -> str:
    """
    Re-read the bootstrap files from the registry directory.

    If any file is malformed the previously loaded registries stay active.

    Returns:
        JSON with the number of services in each reloaded registry, or an error.
    """
    try:
        current = reload_bootstrap()
    except BootstrapError as e:
        logger.warning("Reload failed: %s", e)
        return json.dumps({"error": f"Reload failed: {e}"})

    counts = {}
    for name, registry in (("asn", current.asn), ("ipv4", current.ipv4), ("ipv6", current.ipv6)):
        counts[name] = len(registry.services) if registry is not None else None

    return json.dumps({
        "reloaded": True,
        "registryDir": str(current.source_dir),
        "services": counts,
    })
