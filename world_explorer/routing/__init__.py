from .country_registry import CountryRegistry, normalize_name
from .feature_resolver import FeatureResolver, resolve_country

__all__ = ["CountryRegistry", "FeatureResolver", "normalize_name", "resolve_country"]
