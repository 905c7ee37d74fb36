"""
app/domain/countries.py

Country name to ISO-3 resolution.

The alias table is built once at import time and exposed read-only.
Keys cover common Spanish and English spellings, with and without accents.
"""

from __future__ import annotations

import re
import unicodedata
from types import MappingProxyType
from typing import Mapping

_COUNTRY_ALIASES: dict[str, str] = {
    # Latin America
    "Colombia": "COL",
    "Chile": "CHL",
    "Mexico": "MEX",
    "México": "MEX",
    "Argentina": "ARG",
    "Peru": "PER",
    "Perú": "PER",
    "Brasil": "BRA",
    "Brazil": "BRA",
    "Venezuela": "VEN",
    # Europe
    "España": "ESP",
    "Spain": "ESP",
    "France": "FRA",
    "Francia": "FRA",
    "Alemania": "DEU",
    "Germany": "DEU",
    "Italia": "ITA",
    "Italy": "ITA",
    "Reino Unido": "GBR",
    "ReinoUnido": "GBR",
    "United Kingdom": "GBR",
    "UK": "GBR",
    "Rusia": "RUS",
    "Russia": "RUS",
    "Turquía": "TUR",
    "Turquia": "TUR",
    "Turkey": "TUR",
    # North America
    "Canada": "CAN",
    "Canadá": "CAN",
    "Estados Unidos": "USA",
    "EstadosUnidos": "USA",
    "United States": "USA",
    "UnitedStates": "USA",
    # Asia and Middle East
    "Singapur": "SGP",
    "Singapore": "SGP",
    "Japan": "JPN",
    "Japón": "JPN",
    "Japon": "JPN",
    "China": "CHN",
    "India": "IND",
    "Vietnam": "VNM",
    "Corea del Sur": "KOR",
    "Corea, Rep.": "KOR",
    "South Korea": "KOR",
    "Emiratos Árabes Unidos": "ARE",
    "Emiratos Arabes Unidos": "ARE",
    "United Arab Emirates": "ARE",
}

_ISO3_PATTERN = re.compile(r"^[A-Za-z]{3}$")


def strip_accents(value: str) -> str:
    """
    Remove combining diacritical marks ("México" -> "Mexico").
    """

    decomposed = unicodedata.normalize("NFD", value)
    return "".join(ch for ch in decomposed if not unicodedata.combining(ch))


def fold_name(value: str) -> str:
    """
    Lookup key insensitive to accents, case and whitespace.
    """

    return "".join(strip_accents(value).casefold().split())


COUNTRY_ALIASES: Mapping[str, str] = MappingProxyType(dict(_COUNTRY_ALIASES))

_FOLDED_ALIASES: Mapping[str, str] = MappingProxyType(
    {fold_name(name): code for name, code in _COUNTRY_ALIASES.items()}
)

_DISPLAY_NAMES: Mapping[str, str] = MappingProxyType(
    {code: name for name, code in reversed(list(_COUNTRY_ALIASES.items()))}
)


def resolve_iso3(name: str | None) -> str | None:
    """
    Resolve a country name, alias or ISO-3 code to an upper-case ISO-3 code.

    Any three-letter alphabetic token is taken as an ISO-3 code as-is.
    Returns None when the name cannot be resolved.
    """

    if name is None:
        return None
    raw = str(name).strip()
    if not raw:
        return None
    if _ISO3_PATTERN.match(raw):
        return raw.upper()

    code = COUNTRY_ALIASES.get(raw)
    if code is not None:
        return code
    return _FOLDED_ALIASES.get(fold_name(raw))


def display_name(iso3: str) -> str:
    """
    Return the first alias registered for ``iso3``, or the code itself.
    """

    return _DISPLAY_NAMES.get(iso3, iso3)
