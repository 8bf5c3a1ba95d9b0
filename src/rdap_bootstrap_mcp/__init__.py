"""
RDAP Bootstrap MCP Server

An MCP server for finding the authoritative RDAP servers for AS numbers and IP networks.
"""

__version__ = "0.1.0"


def main():
    """Main entry point for the CLI."""
    import sys

    setup_logging()

    # Handle CLI arguments before importing heavy dependencies
    if "--help" in sys.argv or "-h" in sys.argv:
        print_help()
        sys.exit(0)

    if "--version" in sys.argv or "-V" in sys.argv:
        print(f"rdap-bootstrap-mcp {__version__}")
        sys.exit(0)

    if "--show-config" in sys.argv:
        show_config()
        sys.exit(0)

    if "--set-registry-dir" in sys.argv:
        sys.exit(0 if run_set_registry_dir(_option_value("--set-registry-dir")) else 1)

    if "--lookup-asn" in sys.argv:
        sys.exit(0 if run_lookup("asn", _option_value("--lookup-asn")) else 1)

    if "--lookup-ip" in sys.argv:
        sys.exit(0 if run_lookup("ip", _option_value("--lookup-ip")) else 1)

    # Default: run the MCP server
    from .server import mcp
    mcp.run()


def _option_value(flag: str) -> str | None:
    """Return the argument following a flag, if any."""
    import sys

    index = sys.argv.index(flag)
    if index + 1 < len(sys.argv):
        return sys.argv[index + 1]
    return None


def setup_logging():
    """Log to stderr; stdout carries the MCP stdio transport."""
    import logging
    import sys
    from .config import is_debug_enabled

    logging.basicConfig(
        level=logging.DEBUG if is_debug_enabled() else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


def print_help():
    """Print help message."""
    print(f"""rdap-bootstrap-mcp {__version__}

An MCP server for finding the authoritative RDAP servers for AS numbers and IP networks.

Usage:
    rdap-bootstrap-mcp                          Run the MCP server
    rdap-bootstrap-mcp --lookup-asn AS65411     Look up an AS number
    rdap-bootstrap-mcp --lookup-ip 192.0.2.1    Look up an IP address or CIDR prefix
    rdap-bootstrap-mcp --set-registry-dir PATH  Store the bootstrap file directory
    rdap-bootstrap-mcp --show-config            Show current configuration
    rdap-bootstrap-mcp --version                Show version
    rdap-bootstrap-mcp --help                   Show this help

Configuration:
    The server reads IANA RDAP bootstrap files from a local directory:
        asn.json   https://data.iana.org/rdap/asn.json
        ipv4.json  https://data.iana.org/rdap/ipv4.json
        ipv6.json  https://data.iana.org/rdap/ipv6.json

    Directory lookup order:
    1. Environment variable: RDAP_BOOTSTRAP_DIR=/path/to/files
    2. Config file (set with --set-registry-dir)
    3. Default: ~/.cache/rdap-bootstrap-mcp

    Set RDAP_BOOTSTRAP_DEBUG=1 for verbose logging on stderr.

Claude Code Setup:
    Add to ~/.claude/settings.json:
    {{
      "mcpServers": {{
        "rdap-bootstrap": {{
          "command": "uvx",
          "args": ["rdap-bootstrap-mcp"]
        }}
      }}
    }}
""")


def show_config():
    """Show current configuration."""
    from .config import get_config_file, get_registry_dir, get_registry_dir_source
    from .rdap_bootstrap import ASN_FILE, IPV4_FILE, IPV6_FILE

    print("Configuration")
    print("=" * 50)
    print()

    config_file = get_config_file()
    print(f"Config file: {config_file}")
    print(f"  Exists: {config_file.exists()}")
    print()

    registry_dir = get_registry_dir()
    print(f"Registry directory: {registry_dir}")
    print(f"  Source: {get_registry_dir_source()}")
    for name in (ASN_FILE, IPV4_FILE, IPV6_FILE):
        status = "✓" if (registry_dir / name).exists() else "✗ missing"
        print(f"  {name}: {status}")


def run_set_registry_dir(path: str | None) -> bool:
    """Store the registry directory in the config file."""
    from .config import get_config_file, set_registry_dir

    if not path:
        print("Error: --set-registry-dir requires a path")
        return False

    if set_registry_dir(path):
        print(f"✓ Registry directory saved to {get_config_file()}")
        return True
    else:
        print("✗ Failed to save registry directory")
        return False


def run_lookup(kind: str, value: str | None) -> bool:
    """Run a single lookup from the command line and print the result as JSON."""
    import json
    import sys
    from .registry import BootstrapError
    from .queries import parse_as_number, parse_ip_query
    from .rdap_bootstrap import get_as_service_urls, get_ip_service_urls

    if not value:
        print(f"Error: --lookup-{kind} requires a value", file=sys.stderr)
        return False

    try:
        if kind == "asn":
            as_number = parse_as_number(value)
            urls = get_as_service_urls(as_number)
            query = f"AS{as_number}"
        else:
            network = parse_ip_query(value)
            urls = get_ip_service_urls(network)
            query = str(network)
    except (BootstrapError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return False

    print(json.dumps({"query": query, "found": bool(urls), "urls": urls}, indent=2))
    return True
