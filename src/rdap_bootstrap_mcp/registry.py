"""
RDAP Bootstrap Registry Model

In-memory form of an IANA-style RDAP bootstrap file (asn.json, ipv4.json,
ipv6.json). The registry is decoded once and then only read.

Bootstrap format:
{
    "version": "1.0",
    "publication": "2024-01-01T00:00:00Z",
    "description": "RDAP bootstrap file for ...",
    "services": [
        [["64512-65534"], ["https://rdap.example.net/"]],
        [["2001:0200::/23"], ["https://rdap.example.org/", "http://rdap.example.org/"]],
        ...
    ]
}
"""

import json
from dataclasses import dataclass, field


class BootstrapError(ValueError):
    """Base class for bootstrap registry errors."""


class DecodeError(BootstrapError):
    """The document does not have the bootstrap registry shape."""


def _string_tuple(value, path: str) -> tuple[str, ...]:
    if not isinstance(value, (list, tuple)):
        raise DecodeError(f"{path}: expected a list of strings, got {type(value).__name__}")
    for i, item in enumerate(value):
        if not isinstance(item, str):
            raise DecodeError(f"{path}[{i}]: expected a string, got {type(item).__name__}")
    return tuple(value)


@dataclass(frozen=True)
class Entry:
    """One service row: the resource keys and the URLs serving them."""

    keys: tuple[str, ...] = ()
    urls: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "keys", tuple(self.keys))
        object.__setattr__(self, "urls", tuple(self.urls))

    @classmethod
    def from_list(cls, value, path: str = "entry") -> "Entry":
        """Decode a `[[keys...], [urls...]]` pair."""
        if not isinstance(value, (list, tuple)) or len(value) != 2:
            raise DecodeError(f"{path}: expected a [keys, urls] pair")
        return cls(
            keys=_string_tuple(value[0], f"{path}[0]"),
            urls=_string_tuple(value[1], f"{path}[1]"),
        )

    def to_list(self) -> list[list[str]]:
        return [list(self.keys), list(self.urls)]


@dataclass(frozen=True)
class ServiceRegistry:
    """
    A decoded bootstrap registry.

    `publication` is kept as the original timestamp string. The order of
    `services` only matters as the final tie-break when matching.
    """

    version: str = ""
    publication: str = ""
    description: str = ""
    services: tuple[Entry, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        services = tuple(
            s if isinstance(s, Entry) else Entry(keys=s[0], urls=s[1])
            for s in self.services
        )
        object.__setattr__(self, "services", services)

    @classmethod
    def from_dict(cls, data) -> "ServiceRegistry":
        """
        Decode a parsed JSON object.

        Missing metadata fields decode to "" and a missing or null
        "services" to an empty registry. Unknown fields are ignored.

        Raises:
            DecodeError: If any present field has the wrong shape.
        """
        if not isinstance(data, dict):
            raise DecodeError(f"expected a JSON object, got {type(data).__name__}")

        metadata = {}
        for name in ("version", "publication", "description"):
            value = data.get(name)
            if value is None:
                value = ""
            elif not isinstance(value, str):
                raise DecodeError(f"{name}: expected a string, got {type(value).__name__}")
            metadata[name] = value

        raw_services = data.get("services")
        if raw_services is None:
            raw_services = []
        elif not isinstance(raw_services, list):
            raise DecodeError(f"services: expected a list, got {type(raw_services).__name__}")

        services = tuple(
            Entry.from_list(entry, f"services[{i}]")
            for i, entry in enumerate(raw_services)
        )
        return cls(services=services, **metadata)

    @classmethod
    def from_json(cls, raw: str | bytes) -> "ServiceRegistry":
        """Decode a registry from JSON text or bytes."""
        try:
            data = json.loads(raw)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise DecodeError(f"invalid JSON: {e}") from e
        return cls.from_dict(data)

    def to_dict(self) -> dict:
        return {
            "version": self.version,
            "publication": self.publication,
            "description": self.description,
            "services": [entry.to_list() for entry in self.services],
        }

    def to_json(self, indent: int | None = None) -> str:
        return json.dumps(self.to_dict(), indent=indent)

    def match_as(self, as_number: int) -> list[str]:
        """See `matcher.match_as`."""
        from .matcher import match_as
        return match_as(self, as_number)

    def match_ip_network(self, network) -> list[str]:
        """See `matcher.match_ip_network`."""
        from .matcher import match_ip_network
        return match_ip_network(self, network)
