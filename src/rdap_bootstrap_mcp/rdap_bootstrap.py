"""
RDAP Bootstrap Registry Set

Loads the IANA RDAP bootstrap files for AS numbers and IP networks from
the local registry directory and answers "which RDAP servers are
authoritative for this resource" against them.

The loaded set is immutable. Reloading builds a complete new set and
replaces the module-level reference in one assignment, so lookups running
concurrently see either the old set or the new one, never a mix.
"""

import ipaddress
import logging
import time
from dataclasses import dataclass
from pathlib import Path

from .config import get_registry_dir
from .matcher import IPNetwork, match_as, match_ip_network
from .registry import BootstrapError, ServiceRegistry

logger = logging.getLogger(__name__)

# File names used by data.iana.org/rdap/
ASN_FILE = "asn.json"
IPV4_FILE = "ipv4.json"
IPV6_FILE = "ipv6.json"


class RegistryNotLoadedError(BootstrapError):
    """The bootstrap file needed for a lookup is not available."""


class RegistryReadError(BootstrapError):
    """A bootstrap file could not be read."""


@dataclass(frozen=True)
class BootstrapSet:
    """The AS, IPv4 and IPv6 registries loaded from one directory."""

    source_dir: Path
    asn: ServiceRegistry | None = None
    ipv4: ServiceRegistry | None = None
    ipv6: ServiceRegistry | None = None
    loaded_at: float = 0.0

    def registry_for_network(self, network: IPNetwork) -> ServiceRegistry | None:
        """Pick the registry matching the network's address family."""
        if isinstance(network, ipaddress.IPv4Network):
            return self.ipv4
        return self.ipv6


_current: BootstrapSet | None = None


def load_registry_file(path: Path, required: bool = False) -> ServiceRegistry | None:
    """
    Decode one bootstrap file.

    Args:
        path: File to read
        required: If True, a missing file is an error instead of None

    Returns:
        The registry, or None if the file does not exist.

    Raises:
        RegistryReadError: If the file cannot be read (or is missing and required).
        DecodeError: If the file exists but is not a bootstrap registry.
    """
    try:
        raw = path.read_bytes()
    except FileNotFoundError as e:
        if required:
            raise RegistryReadError(f"{path} not found") from e
        logger.info("Bootstrap file not found: %s", path)
        return None
    except OSError as e:
        raise RegistryReadError(f"Cannot read {path}: {e.strerror or e}") from e

    registry = ServiceRegistry.from_json(raw)
    logger.debug(
        "Loaded %s: version=%s publication=%s services=%d",
        path, registry.version, registry.publication, len(registry.services),
    )
    return registry


def load_bootstrap_set(directory: Path | None = None) -> BootstrapSet:
    """
    Load asn.json, ipv4.json and ipv6.json from a directory.

    Args:
        directory: Directory to read from (default: configured registry dir)

    Raises:
        DecodeError: If any present file is malformed. Nothing is returned
                     for a partially decoded set.
        RegistryReadError: If any file exists but cannot be read.
    """
    if directory is None:
        directory = get_registry_dir()
    directory = Path(directory)

    return BootstrapSet(
        source_dir=directory,
        asn=load_registry_file(directory / ASN_FILE),
        ipv4=load_registry_file(directory / IPV4_FILE),
        ipv6=load_registry_file(directory / IPV6_FILE),
        loaded_at=time.time(),
    )


def reload_bootstrap(directory: Path | None = None) -> BootstrapSet:
    """
    Load a fresh registry set and make it current.

    On failure the previously loaded set stays in place and the error
    propagates.
    """
    global _current

    new_set = load_bootstrap_set(directory)
    _current = new_set
    logger.info("Bootstrap registries loaded from %s", new_set.source_dir)
    return new_set


def get_bootstrap() -> BootstrapSet:
    """Get the current registry set, loading it on first use."""
    current = _current
    if current is None:
        current = reload_bootstrap()
    return current


def get_as_service_urls(as_number: int) -> list[str]:
    """
    Get the RDAP server URLs for an AS number.

    Returns:
        URLs in registry order, or an empty list if no range covers it.

    Raises:
        RegistryNotLoadedError: If asn.json is not available.
        KeyParseError: If asn.json contains a malformed range.
    """
    registry = get_bootstrap().asn
    if registry is None:
        raise RegistryNotLoadedError(f"{ASN_FILE} is not loaded")

    urls = match_as(registry, as_number)
    logger.debug("AS%d -> %s", as_number, urls or "no match")
    return urls


def get_ip_service_urls(network: IPNetwork) -> list[str]:
    """
    Get the RDAP server URLs for an IP network.

    Raises:
        RegistryNotLoadedError: If the file for the network's family is not available.
        KeyParseError: If that file contains a malformed prefix.
    """
    registry = get_bootstrap().registry_for_network(network)
    if registry is None:
        name = IPV4_FILE if network.version == 4 else IPV6_FILE
        raise RegistryNotLoadedError(f"{name} is not loaded")

    urls = match_ip_network(registry, network)
    logger.debug("%s -> %s", network, urls or "no match")
    return urls


def describe_bootstrap() -> dict:
    """Summarize the loaded registries for display."""
    current = get_bootstrap()
    registries = {}
    for name, registry in (("asn", current.asn), ("ipv4", current.ipv4), ("ipv6", current.ipv6)):
        if registry is None:
            registries[name] = None
        else:
            registries[name] = {
                "version": registry.version,
                "publication": registry.publication,
                "description": registry.description,
                "services": len(registry.services),
            }

    return {
        "registryDir": str(current.source_dir),
        "loadedAt": current.loaded_at,
        "registries": registries,
    }
