"""
Field normalizer implementations.

Provides normalizers for dates, customer names, countries, product names,
numeric sign correction and passthrough trimming.
"""

from .base_normalizer import BaseNormalizer, NormalizationError
from .country_normalizer import CountryNormalizer
from .date_normalizer import DateNormalizer
from .name_normalizer import NameNormalizer
from .normalizer_engine import NORMALIZATION_PLAN, NormalizedRecord, NormalizerEngine
from .numeric_normalizer import NumericNormalizer
from .passthrough_normalizer import PassthroughNormalizer
from .product_normalizer import ProductNormalizer

__all__ = [
    "BaseNormalizer",
    "NormalizationError",
    "DateNormalizer",
    "NameNormalizer",
    "CountryNormalizer",
    "ProductNormalizer",
    "NumericNormalizer",
    "PassthroughNormalizer",
    "NORMALIZATION_PLAN",
    "NormalizedRecord",
    "NormalizerEngine",
]
