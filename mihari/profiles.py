"""
Modem profiles.

A profile pairs the AT commands of a modem family with the schema table
that decodes their responses. Adding a modem family means adding a profile,
not new control flow.
"""

import logging
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Callable, Iterable, Mapping, Optional

from .parsers import (
    CellInfoParser,
    DigitRunParser,
    ICCIDParser,
    IdentityParser,
    PatternParser,
    ServingCellModeParser,
    lte_parser,
    wcdma_parser,
)
from .parsers.servingcell import now_millis
from .types import RadioAccessTechnology
from .exceptions import UnsupportedModel

logger = logging.getLogger(__name__)

# Sent before the model is known, so shared by every profile
IDENTITY_COMMAND = "ATI"


@dataclass(frozen=True)
class CommandSet:
    """AT commands issued for each query."""
    identity: str = IDENTITY_COMMAND
    imei: str = "AT+CGSN"
    imsi: str = "AT+CIMI"
    iccid: str = "AT+QCCID"
    cell_info: str = 'AT+QENG="servingcell"'


@dataclass(frozen=True)
class SchemaTable:
    """
    Every response parser a profile needs.

    Built once and shared by reference; ``details`` maps a RAT to the parser
    of its serving cell line. RATs missing from ``details`` are recognized
    but have no detail decoder.
    """
    identity: IdentityParser
    imei: PatternParser
    imsi: PatternParser
    iccid: PatternParser
    serving_cell: ServingCellModeParser
    details: Mapping[RadioAccessTechnology, CellInfoParser]

    def detail_parser(self, rat: RadioAccessTechnology) -> Optional[CellInfoParser]:
        """Return the detail parser for rat, or None when unsupported."""
        return self.details.get(rat)


def build_quectel_schemas(clock: Callable[[], int] = now_millis) -> SchemaTable:
    """Build the schema table for Quectel AT+QENG firmware."""
    return SchemaTable(
        identity=IdentityParser(),
        imei=DigitRunParser("IMEI"),
        imsi=DigitRunParser("IMSI"),
        iccid=ICCIDParser(),
        serving_cell=ServingCellModeParser(),
        details=MappingProxyType({
            RadioAccessTechnology.LTE: lte_parser(clock),
            RadioAccessTechnology.WCDMA: wcdma_parser(clock),
        }),
    )


@dataclass(frozen=True)
class ModemProfile:
    """Commands and schemas for one modem family."""
    name: str
    models: tuple[str, ...]  # Lower-case model identifiers
    schemas: SchemaTable
    commands: CommandSet = field(default_factory=CommandSet)

    def supports(self, model: str) -> bool:
        """Check whether a normalized model matches one of this profile's models."""
        return any(model == known or known in model for known in self.models)


def normalize_model(model: str) -> str:
    """Normalize a reported model for profile lookup."""
    return model.strip().lower()


class ProfileRegistry:
    """Lookup table from reported model to modem profile."""

    def __init__(self, profiles: Iterable[ModemProfile] = ()) -> None:
        self._profiles: list[ModemProfile] = list(profiles)

    def register(self, profile: ModemProfile) -> None:
        """Add a profile; earlier registrations win on overlap."""
        self._profiles.append(profile)
        logger.debug(f"Registered modem profile {profile.name}: {profile.models}")

    def lookup(self, model: str) -> ModemProfile:
        """
        Find the profile for a reported model.

        Raises:
            UnsupportedModel: If no profile knows the model
        """
        normalized = normalize_model(model)
        for profile in self._profiles:
            if profile.supports(normalized):
                logger.debug(f"Model {model!r} uses profile {profile.name}")
                return profile
        raise UnsupportedModel(model)

    @property
    def profiles(self) -> list[ModemProfile]:
        return list(self._profiles)


def quectel_profile(schemas: Optional[SchemaTable] = None) -> ModemProfile:
    """Quectel EG25-G / EC25 profile."""
    return ModemProfile(
        name="quectel-eg25",
        models=("eg25", "ec25"),
        schemas=schemas or build_quectel_schemas(),
    )


def default_registry() -> ProfileRegistry:
    """Registry with every built-in profile."""
    return ProfileRegistry([quectel_profile()])
