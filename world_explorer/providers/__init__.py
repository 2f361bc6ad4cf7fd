from .factbook import FactbookProvider
from .natural_earth import NaturalEarthProvider
from .restcountries import RestCountriesProvider
from .worldbank import WorldBankProvider

__all__ = [
    "FactbookProvider",
    "NaturalEarthProvider",
    "RestCountriesProvider",
    "WorldBankProvider",
]
