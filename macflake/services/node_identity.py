"""
Node Identity Resolution

Resolves the 10-bit node id a generator stamps into every ID it issues. The
id comes from one of the node id sources below:

    - OverrideNodeIdSource: an explicitly configured value, validated to 0-1023
    - MacAddressNodeIdSource: the first non-zero hardware address of the host,
      read as a 48-bit integer and reduced modulo 1024
    - RandomNodeIdSource: a uniformly random value, used as the last resort

Hardware address enumeration is unreliable on virtualized or sandboxed hosts,
so any failure of the derived source is logged and replaced by a random node
id. Uniqueness across nodes is then best-effort only.
"""

import random
from typing import Callable, Mapping, Optional, Protocol, Sequence

import psutil

from macflake.core.exceptions import ConfigurationError, NodeIdUnavailableError
from macflake.services.logger import get_logger
from macflake.utils.codec import MAX_NODE_ID

logger = get_logger()

ZERO_MAC = 0


class NodeIdSource(Protocol):
    """Anything that produces a node id when called."""

    def __call__(self) -> int: ...


def validate_node_id(node_id) -> int:
    """Return node_id unchanged if it is an integer in 0-1023.

    Raises:
        ConfigurationError: If node_id is not an integer or is out of range.
    """
    if isinstance(node_id, bool) or not isinstance(node_id, int):
        raise ConfigurationError(
            f"Node id override must be an integer, got {type(node_id).__name__}"
        )
    if not 0 <= node_id <= MAX_NODE_ID:
        raise ConfigurationError(
            f"Node id override out of range: {node_id} is not between 0 and"
            f" {MAX_NODE_ID}"
        )
    return node_id


def parse_mac_address(address: str) -> int:
    """Parse a 6-octet hardware address such as ``aa:bb:cc:dd:ee:ff``.

    Both ``:`` and ``-`` separators are accepted.

    Raises:
        ValueError: If the address is not six hexadecimal octets.
    """
    octets = address.replace("-", ":").split(":")
    if len(octets) != 6 or any(len(octet) != 2 for octet in octets):
        raise ValueError(f"Not a 6-octet hardware address: {address!r}")
    return int("".join(octets), 16)


class OverrideNodeIdSource:
    """Node id source returning an explicitly configured value."""

    def __init__(self, node_id: int):
        self.node_id = validate_node_id(node_id)

    def __call__(self) -> int:
        return self.node_id


class MacAddressNodeIdSource:
    """Node id source derived from the host's first usable hardware address.

    Args:
        enumerate_interfaces (Optional[Callable]): Returns a mapping of interface
            name to address records with ``family`` and ``address`` attributes.
            Defaults to ``psutil.net_if_addrs``.
    """

    def __init__(
        self,
        enumerate_interfaces: Optional[Callable[[], Mapping[str, Sequence]]] = None,
    ):
        self.enumerate_interfaces = enumerate_interfaces or psutil.net_if_addrs

    def first_mac_address(self) -> int:
        for name, addresses in self.enumerate_interfaces().items():
            for addr in addresses:
                if addr.family != psutil.AF_LINK or not addr.address:
                    continue
                try:
                    mac = parse_mac_address(addr.address)
                except ValueError:
                    logger.debug("Skipping interface %s: %s", name, addr.address)
                    continue
                if mac != ZERO_MAC:
                    logger.debug("Using hardware address of interface %s", name)
                    return mac

        raise NodeIdUnavailableError(
            "No valid MAC address has been found to compute the node id."
        )

    def __call__(self) -> int:
        return self.first_mac_address() % (MAX_NODE_ID + 1)


class RandomNodeIdSource:
    """Node id source returning a uniformly random value in 0-1023."""

    def __call__(self) -> int:
        return random.randint(0, MAX_NODE_ID)


def resolve_node_id(
    override: Optional[int] = None, source: Optional[NodeIdSource] = None
) -> int:
    """Resolve the node id for a new generator.

    An override always wins and is validated. Otherwise the given source
    (hardware address by default) is asked for a value; if it fails for any
    reason a random node id is used instead and a warning is logged.

    Args:
        override (Optional[int]): Explicit node id (0-1023).
        source (Optional[NodeIdSource]): Source used when no override is given.

    Returns:
        int: The resolved node id.

    Raises:
        ConfigurationError: If the override is out of range.
    """
    if override is not None:
        node_id = OverrideNodeIdSource(override)()
        logger.debug("Using node id override: %s", node_id)
        return node_id

    source = source or MacAddressNodeIdSource()
    try:
        node_id = validate_node_id(source())
    except Exception as e:
        node_id = RandomNodeIdSource()()
        logger.warning(
            "Could not derive node id (%s). Using random node id %s instead,"
            " collisions across nodes become possible.",
            e,
            node_id,
        )
        return node_id

    logger.debug("Derived node id %s from %s", node_id, type(source).__name__)
    return node_id
