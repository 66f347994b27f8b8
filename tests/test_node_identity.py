import logging

import pytest

from conftest import inet, link
from macflake.core.exceptions import ConfigurationError, NodeIdUnavailableError
from macflake.services.node_identity import (
    MacAddressNodeIdSource,
    OverrideNodeIdSource,
    RandomNodeIdSource,
    parse_mac_address,
    resolve_node_id,
)


def interfaces(**table):
    return lambda: table


def test_parse_mac_address_accepts_colon_and_dash_separators():
    assert parse_mac_address("00:00:00:00:01:ff") == 0x1FF
    assert parse_mac_address("AA-BB-CC-DD-EE-FF") == 0xAABBCCDDEEFF


@pytest.mark.parametrize("address", ["", "aa:bb:cc", "aabbccddeeff", "zz:bb:cc:dd:ee:ff"])
def test_parse_mac_address_rejects_malformed_addresses(address):
    with pytest.raises(ValueError):
        parse_mac_address(address)


def test_mac_source_reduces_address_modulo_1024():
    source = MacAddressNodeIdSource(interfaces(eth0=[link("02:42:ac:11:00:02")]))

    assert source() == 0x0242AC110002 % 1024


def test_mac_source_skips_zero_and_non_link_addresses():
    source = MacAddressNodeIdSource(
        interfaces(
            lo=[link("00:00:00:00:00:00"), inet("127.0.0.1")],
            tun0=[link("")],
            eth0=[inet("10.0.0.2"), link("de:ad:be:ef:03:ff")],
        )
    )

    assert source() == 0x3FF


def test_mac_source_raises_when_no_address_qualifies():
    source = MacAddressNodeIdSource(
        interfaces(lo=[link("00:00:00:00:00:00")], eth0=[inet("10.0.0.2")])
    )

    with pytest.raises(NodeIdUnavailableError):
        source()


def test_override_source_returns_value():
    assert OverrideNodeIdSource(42)() == 42


@pytest.mark.parametrize("value", [-1, 1024, 5000, True, 1.5, "7"])
def test_override_source_rejects_invalid_values(value):
    with pytest.raises(ConfigurationError):
        OverrideNodeIdSource(value)


def test_random_source_stays_in_range():
    source = RandomNodeIdSource()

    assert all(0 <= source() <= 1023 for _ in range(200))


def test_resolve_prefers_override_over_source():
    def source():
        raise AssertionError("source must not be consulted")

    assert resolve_node_id(override=7, source=source) == 7


def test_resolve_rejects_out_of_range_override():
    with pytest.raises(ConfigurationError, match="out of range"):
        resolve_node_id(override=1024)


def test_resolve_uses_mac_source():
    source = MacAddressNodeIdSource(interfaces(eth0=[link("00:00:00:00:00:2a")]))

    assert resolve_node_id(source=source) == 42


def test_resolve_falls_back_to_random_when_no_address(caplog):
    source = MacAddressNodeIdSource(interfaces())

    with caplog.at_level(logging.WARNING, logger="macflake"):
        node_id = resolve_node_id(source=source)

    assert 0 <= node_id <= 1023
    assert "collisions across nodes become possible" in caplog.text


def test_resolve_falls_back_when_enumeration_fails(caplog):
    def broken():
        raise OSError("permission denied")

    with caplog.at_level(logging.WARNING, logger="macflake"):
        node_id = resolve_node_id(source=MacAddressNodeIdSource(broken))

    assert 0 <= node_id <= 1023
    assert "permission denied" in caplog.text


def test_resolve_falls_back_when_source_returns_out_of_range():
    assert 0 <= resolve_node_id(source=lambda: 4096) <= 1023


def test_resolve_with_host_interfaces_stays_in_range():
    assert 0 <= resolve_node_id() <= 1023
