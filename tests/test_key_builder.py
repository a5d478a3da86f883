"""
Tests for record key extraction.
"""

from datetime import date

import pytest

from rawsync.application.reconcile.key_builder import (
    derive_key,
    normalize_target_key,
    split_on_first,
)
from rawsync.domain.job_spec import DerivedFieldSpec, KeyPart, KeySpec


class TestSplitOnFirst:
    def test_splits_number_and_name(self):
        assert split_on_first("100: Widget Line", ":") == ("100", "Widget Line")

    def test_remainder_keeps_later_delimiters(self):
        assert split_on_first("7: Phase 2: Pumps ", ":") == ("7", "Phase 2: Pumps")

    def test_no_delimiter(self):
        assert split_on_first(" 100 ", ":") == ("100", "")


class TestSingleFieldKey:
    spec = KeySpec.single("EC Number")

    def test_trims_value(self):
        extracted = derive_key({"EC Number": "  EC-1042 "}, self.spec)
        assert extracted is not None
        assert extracted.key == "EC-1042"
        assert extracted.derived == {}

    @pytest.mark.parametrize("value", ["", "   ", None])
    def test_blank_is_invalid(self, value):
        assert derive_key({"EC Number": value}, self.spec) is None

    def test_missing_field_is_invalid(self):
        assert derive_key({"Other": "x"}, self.spec) is None

    def test_numbers_lose_float_suffix(self):
        assert derive_key({"EC Number": 1042.0}, self.spec).key == "1042"
        assert derive_key({"EC Number": 1042}, self.spec).key == "1042"

    def test_dates_use_iso_format(self):
        assert derive_key({"EC Number": date(2025, 6, 16)}, self.spec).key == "2025-06-16"


class TestCompositeKey:
    spec = KeySpec.composite("CR# and Activity#", "CR #", "Activity #")

    def test_joins_with_separator(self):
        extracted = derive_key({"CR #": " 77 ", "Activity #": 3}, self.spec)
        assert extracted.key == "77-3"

    @pytest.mark.parametrize(
        "record",
        [
            {"CR #": "77", "Activity #": ""},
            {"CR #": "  ", "Activity #": "3"},
            {"CR #": None, "Activity #": None},
        ],
    )
    def test_either_part_blank_is_invalid(self, record):
        assert derive_key(record, self.spec) is None

    def test_custom_separator(self):
        spec = KeySpec.composite("K", "A", "B", separator="|")
        assert derive_key({"A": "x", "B": "y"}, spec).key == "x|y"


class TestSplitDerivedKey:
    spec = KeySpec.composite(
        "Project Number - Activity ID",
        KeyPart(source_field="Project Name", delimiter=":"),
        "Activity ID",
    )
    derived = DerivedFieldSpec(source_field="Project Name", delimiter=":", target_field="Project Name")

    def test_prefix_is_subkey_and_remainder_is_derived(self):
        record = {"Project Name": "100: Widget Line", "Activity ID": "A10"}
        extracted = derive_key(record, self.spec, self.derived)
        assert extracted.key == "100-A10"
        assert extracted.derived == {"Project Name": "Widget Line"}

    def test_empty_prefix_is_invalid(self):
        record = {"Project Name": ": Widget Line", "Activity ID": "A10"}
        assert derive_key(record, self.spec, self.derived) is None

    def test_without_delimiter_whole_value_is_prefix(self):
        record = {"Project Name": "100", "Activity ID": "A10"}
        extracted = derive_key(record, self.spec, self.derived)
        assert extracted.key == "100-A10"
        assert extracted.derived == {"Project Name": ""}


class TestNormalizeTargetKey:
    def test_matches_raw_text_rules(self):
        assert normalize_target_key(" A-1 ") == "A-1"
        assert normalize_target_key(12.0) == "12"
        assert normalize_target_key(None) == ""
        assert normalize_target_key(True) == "true"
