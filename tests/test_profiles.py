"""
Tests for modem profiles and the schema table.
"""

import pytest

from mihari.profiles import (
    CommandSet,
    ProfileRegistry,
    default_registry,
    quectel_profile,
)
from mihari.parsers import CellInfoParser
from mihari.types import RadioAccessTechnology
from mihari.exceptions import UnsupportedModel


@pytest.mark.parametrize("model", ["EG25", "eg25", "EC25", " EG25-G ", "EC25EFA"])
def test_lookup_known_models(model):
    """Test reported models resolve to the Quectel profile."""
    profile = default_registry().lookup(model)

    assert profile.name == "quectel-eg25"


def test_lookup_unknown_model():
    """Test an unknown model raises UnsupportedModel naming it."""
    with pytest.raises(UnsupportedModel) as exc_info:
        default_registry().lookup("BG96")

    assert exc_info.value.model == "BG96"
    assert "BG96" in str(exc_info.value)


def test_empty_registry():
    """Test a registry without profiles supports nothing."""
    with pytest.raises(UnsupportedModel):
        ProfileRegistry().lookup("EG25")


def test_register_adds_profile(schemas):
    """Test registering a profile makes its models resolvable."""
    registry = ProfileRegistry()
    profile = quectel_profile(schemas)

    registry.register(profile)

    assert registry.lookup("EG25") is profile
    assert registry.profiles == [profile]


def test_quectel_commands():
    """Test the Quectel command table."""
    commands = quectel_profile().commands

    assert commands == CommandSet()
    assert commands.identity == "ATI"
    assert commands.imei == "AT+CGSN"
    assert commands.imsi == "AT+CIMI"
    assert commands.iccid == "AT+QCCID"
    assert commands.cell_info == 'AT+QENG="servingcell"'


def test_schema_table_detail_parsers(schemas):
    """Test LTE and WCDMA have detail decoders and other RATs do not."""
    assert isinstance(schemas.detail_parser(RadioAccessTechnology.LTE), CellInfoParser)
    assert isinstance(schemas.detail_parser(RadioAccessTechnology.WCDMA), CellInfoParser)
    assert schemas.detail_parser(RadioAccessTechnology.GSM) is None
    assert schemas.detail_parser(RadioAccessTechnology.CDMAHDR) is None


def test_schema_table_is_read_only(schemas):
    """Test the schema table cannot be modified after construction."""
    with pytest.raises(AttributeError):
        schemas.imei = None

    with pytest.raises(TypeError):
        schemas.details[RadioAccessTechnology.GSM] = None


def test_profile_shares_schema_table(schemas):
    """Test profiles reference the table they were built with."""
    assert quectel_profile(schemas).schemas is schemas
