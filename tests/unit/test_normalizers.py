"""
Unit tests for field normalizers and the normalizer engine.

Includes property-based testing with hypothesis for normalizers.
"""

from datetime import date, datetime

import pytest
from hypothesis import given
from hypothesis import strategies as st

from retail_cleanse.core.config import CleaningConfig
from retail_cleanse.core.models import RawRecord, Rejection
from retail_cleanse.core.normalizers import (
    CountryNormalizer,
    DateNormalizer,
    NameNormalizer,
    NormalizationError,
    NormalizedRecord,
    NormalizerEngine,
    NumericNormalizer,
    PassthroughNormalizer,
    ProductNormalizer,
)

FORMATS = CleaningConfig().date_formats


class TestDateNormalizer:
    """Tests for DateNormalizer"""

    @pytest.mark.parametrize(
        "value",
        ["2023-03-05", " 2023-03-05 ", "05/03/2023", "05-Mar-2023", "05-Mar-23", "2023-03-05T10:15:00"],
    )
    def test_known_encodings(self, value):
        """Test every configured encoding resolves to the same date"""
        assert DateNormalizer("order_date", {"formats": FORMATS}).normalize(value, {}) == date(2023, 3, 5)

    def test_date_objects_accepted(self):
        """Test already-typed dates pass through"""
        normalizer = DateNormalizer("order_date", {"formats": FORMATS})
        assert normalizer.normalize(date(2023, 3, 5), {}) == date(2023, 3, 5)
        assert normalizer.normalize(datetime(2023, 3, 5, 9, 30), {}) == date(2023, 3, 5)

    @pytest.mark.parametrize("value", [None, "", "   ", "not a date", "31/02/2023", "2023-13-01"])
    def test_missing_or_invalid_raises(self, value):
        """Test unparseable dates reject the record"""
        with pytest.raises(NormalizationError) as exc_info:
            DateNormalizer("order_date", {"formats": FORMATS}).normalize(value, {})

        assert exc_info.value.reason_code == "missing_or_invalid_date"
        assert exc_info.value.field_name == "order_date"

    def test_format_priority(self):
        """Test the first listed format wins for ambiguous tokens"""
        day_first = DateNormalizer("order_date", {"formats": ["%d/%m/%Y"]})
        month_first = DateNormalizer("order_date", {"formats": ["%m/%d/%Y", "%d/%m/%Y"]})
        assert day_first.normalize("04/03/2023", {}) == date(2023, 3, 4)
        assert month_first.normalize("04/03/2023", {}) == date(2023, 4, 3)

    def test_requires_formats(self):
        """Test missing formats parameter raises ValueError"""
        with pytest.raises(ValueError):
            DateNormalizer("order_date")

    def test_describe_change(self):
        """Test canonical strings are not audited, reformatted ones are"""
        normalizer = DateNormalizer("order_date", {"formats": FORMATS})
        assert normalizer.describe_change("2023-03-05", date(2023, 3, 5)) is None
        assert normalizer.describe_change("05/03/2023", date(2023, 3, 5)) == "date_normalization"

    @given(st.dates(min_value=date(1950, 1, 1), max_value=date(2099, 12, 31)))
    def test_property_iso_round_trip(self, value):
        """Property test: any ISO date string parses back to itself"""
        normalizer = DateNormalizer("order_date", {"formats": FORMATS})
        assert normalizer.normalize(value.isoformat(), {}) == value


class TestNameNormalizer:
    """Tests for NameNormalizer"""

    @pytest.mark.parametrize(
        "value,expected",
        [
            ("  jane   O'DOE ", "Jane odoe"),
            ('"bob"', "Bob"),
            ("ALICE", "Alice"),
            ("`'", None),
            ("   ", None),
            (None, None),
        ],
    )
    def test_cleanup(self, value, expected):
        """Test artifacts are stripped, whitespace collapsed and case fixed"""
        normalizer = NameNormalizer("customer_name", {"artifact_characters": "'\"`"})
        assert normalizer.normalize(value, {}) == expected

    @given(st.text(alphabet=st.sampled_from("abcXYZ '\"`\t"), max_size=40))
    def test_property_never_raises_and_is_idempotent(self, value):
        """Property test: cleanup never rejects and applying it twice changes nothing"""
        normalizer = NameNormalizer("customer_name", {"artifact_characters": "'\"`"})
        once = normalizer.normalize(value, {})
        if once is not None:
            assert normalizer.normalize(once, {}) == once
            assert "'" not in once


class TestCountryNormalizer:
    """Tests for CountryNormalizer"""

    def _normalizer(self):
        return CountryNormalizer("country", {"lookup": CleaningConfig().country_lookup()})

    @pytest.mark.parametrize("value", ["USA", "usa", " U.S. ", "united states", "United States"])
    def test_variants_map_to_canonical(self, value):
        """Test aliases resolve regardless of case and padding"""
        assert self._normalizer().normalize(value, {}) == "United States"

    def test_unknown_value_passes_through(self):
        """Test values missing from the table are trimmed, not rejected"""
        normalizer = self._normalizer()
        assert normalizer.normalize(" Narnia ", {}) == "Narnia"
        assert not normalizer.is_mapped(" Narnia ")

    def test_blank_is_none_and_mapped(self):
        """Test blank countries become None without being reported"""
        normalizer = self._normalizer()
        assert normalizer.normalize("", {}) is None
        assert normalizer.is_mapped("")


class TestProductNormalizer:
    """Tests for ProductNormalizer"""

    def _normalizer(self):
        return ProductNormalizer("product_name", {"placeholders": CleaningConfig().product_placeholders})

    @pytest.mark.parametrize("value", ["Unknown Item", "UNKNOWN", "()", " (unknown) ", "", None])
    def test_placeholders_rejected(self, value):
        """Test placeholder and missing names reject the record"""
        with pytest.raises(NormalizationError) as exc_info:
            self._normalizer().normalize(value, {})
        assert exc_info.value.reason_code == "invalid_product"

    def test_real_name_trimmed(self):
        """Test real product names are kept"""
        assert self._normalizer().normalize("  Denim Jacket ", {}) == "Denim Jacket"


class TestNumericNormalizer:
    """Tests for NumericNormalizer"""

    @pytest.mark.parametrize(
        "value,expected",
        [
            ("-5", 5.0),
            ("3", 3.0),
            (" 2.5 ", 2.5),
            ("$1,299.00", 1299.0),
            ("-€4.50", None),
            (-7, 7.0),
            ("0", 0.0),
            ("", None),
            ("abc", None),
            ("nan", None),
            (True, None),
        ],
    )
    def test_parse_and_sign_correction(self, value, expected):
        """Test parsing and absolute value"""
        assert NumericNormalizer("quantity").normalize(value, {}) == expected

    def test_describe_change(self):
        """Test sign corrections and unparseable values are audited"""
        normalizer = NumericNormalizer("quantity")
        assert normalizer.describe_change("-5", 5.0) == "sign_correction"
        assert normalizer.describe_change("5", 5.0) is None
        assert normalizer.describe_change("abc", None) == "unparseable_numeric"
        assert normalizer.describe_change("", None) is None

    @given(st.floats(allow_nan=False, allow_infinity=False, min_value=-1e9, max_value=1e9))
    def test_property_never_negative(self, value):
        """Property test: output is never negative"""
        result = NumericNormalizer("unit_price").normalize(str(value), {})
        assert result is not None
        assert result >= 0


class TestPassthroughNormalizer:
    """Tests for PassthroughNormalizer"""

    def test_trims_and_blanks_to_none(self):
        """Test whitespace handling"""
        normalizer = PassthroughNormalizer("category")
        assert normalizer.normalize("  Apparel ", {}) == "Apparel"
        assert normalizer.normalize("  ", {}) is None
        assert normalizer.describe_change("  Apparel ", "Apparel") == "field_trimming"
        assert normalizer.describe_change(None, None) is None


class TestNormalizerEngine:
    """Tests for NormalizerEngine"""

    def _raw(self, make_row, **overrides):
        return RawRecord(origin_index=4, **make_row(**overrides))

    def test_clean_record_has_no_changes(self, make_row):
        """Test an already-clean record produces no audit entries"""
        result = NormalizerEngine().normalize_record("1001", self._raw(make_row))

        assert isinstance(result, NormalizedRecord)
        assert result.changes == []
        assert result.values["order_date"] == date(2023, 3, 5)
        assert result.values["quantity"] == 2.0
        assert "email" not in result.values

    def test_changes_are_audited(self, make_row):
        """Test every modification yields an audit entry"""
        raw = self._raw(make_row, order_id=" 01001", order_date="05/03/2023", country="usa", quantity="-2")
        result = NormalizerEngine().normalize_record("1001", raw)

        by_field = {c.field_name: c for c in result.changes}
        assert by_field["order_id"].transformation_type == "id_canonicalization"
        assert by_field["order_date"].new_value == "2023-03-05"
        assert by_field["country"].transformation_type == "country_mapping"
        assert by_field["quantity"].transformation_type == "sign_correction"
        assert all(c.origin_index == 4 and c.order_id == "1001" for c in result.changes)

    def test_date_reported_before_product(self, make_row):
        """Test the first failing normalizer decides the reason"""
        raw = self._raw(make_row, order_date="garbage", product_name="unknown")
        result = NormalizerEngine().normalize_record("1001", raw)

        assert isinstance(result, Rejection)
        assert result.stage == "normalization"
        assert result.reason_code == "missing_or_invalid_date"

    def test_invalid_product_rejected(self, make_row):
        """Test placeholder products are rejected"""
        result = NormalizerEngine().normalize_record("1001", self._raw(make_row, product_name="()"))
        assert isinstance(result, Rejection)
        assert result.reason_code == "invalid_product"

    def test_unmapped_country_flagged(self, make_row):
        """Test unknown countries are flagged, not rejected"""
        result = NormalizerEngine().normalize_record("1001", self._raw(make_row, country="Narnia"))
        assert result.unmapped_country == "Narnia"

    def test_rule_summary(self):
        """Test the engine builds one normalizer per output field"""
        summary = NormalizerEngine().get_rule_summary()
        assert summary["total_rules"] == 12
        assert summary["rules_by_type"]["numeric"] == 2
        assert summary["rules_by_type"]["passthrough"] == 6
