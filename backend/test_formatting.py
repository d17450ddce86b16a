"""
Tests for listing text rendering.
"""

import pytest

from core.formatting import (
    NO_DATA,
    NO_MATCHES,
    format_address,
    format_area,
    format_beds_baths,
    format_currency,
    format_default_summary,
    format_description,
    format_field_line,
    format_fields,
    format_full_profile,
    format_listing_list,
    wants_all_data,
)


class TestFormatAddress:
    """Street line, city, state, zip with empty parts dropped."""

    def test_missing_state_defaults_to_ca(self, store):
        assert format_address(store.row(0)) == "123 Main St, Gardena, CA, 90247"

    def test_direction_prefix(self, store):
        assert format_address(store.row(1)) == "8450 N Maclay Ave, San Fernando, CA, 91340"

    def test_no_doubled_separators(self):
        row = {"StreetNumber": "", "StreetName": "Pico", "City": "", "PostalCode": ""}
        assert format_address(row) == "Pico, CA"

    def test_numeric_street_number_preferred(self):
        row = {"StreetNumberNumeric": "77", "StreetNumber": "77A", "StreetName": "Elm", "City": "Gardena"}
        assert format_address(row).startswith("77 Elm")


class TestValueFormatting:
    """Money and area rendering."""

    @pytest.mark.parametrize("raw,expected", [
        ("500000", "$500,000"),
        ("$1,250,000", "$1,250,000"),
        ("649999.5", "$649,999.50"),
        ("Call for price", "Call for price"),
        ("", ""),
    ])
    def test_currency(self, raw, expected):
        assert format_currency(raw) == expected

    @pytest.mark.parametrize("raw,expected", [
        ("1450", "1,450 sq ft"),
        ("approx", "approx"),
        ("  ", ""),
    ])
    def test_area(self, raw, expected):
        assert format_area(raw) == expected


class TestCompositeViews:
    """Fields that span several columns."""

    def test_beds_baths(self, store):
        assert format_beds_baths(store.row(0)) == "3 beds, 2 baths"

    def test_beds_baths_missing_beds(self, store):
        assert format_beds_baths(store.row(2)) == "beds N/A, 1 baths"

    def test_baths_estimated_from_components(self):
        row = {"BedroomsTotal": "2", "BathroomsFull": "1", "BathroomsHalf": "1"}
        assert format_beds_baths(row) == "2 beds, 1.5 baths"

    def test_description_public_and_private(self, store):
        text = format_description(store.row(1))
        assert text == "Public remarks: Corner lot with pool.\n\nPrivate remarks: Lockbox on side gate."

    def test_description_none(self, store):
        assert format_description(store.row(2)) == "No remarks available for this listing."


class TestFullProfile:
    """Every non-blank column, one per line."""

    def test_lists_non_blank_columns_in_order(self, store):
        text = format_full_profile(store.row(0), store.columns)
        lines = text.split("\n")
        assert lines[0] == "StreetNumber: 123"
        assert "StateOrProvince: " not in text
        assert "ListPrice: 500000" in lines

    def test_blank_row(self):
        assert format_full_profile({"A": "", "B": " "}, ("A", "B")) == NO_DATA


class TestFieldViews:
    """Per-field lines used for listing details."""

    def test_absent_value_shows_na(self, store):
        assert format_field_line(store.row(2), "beds", store.columns) == "BedroomsTotal: N/A"

    def test_unknown_field_shows_na(self, store):
        assert format_field_line(store.row(0), "helipad", store.columns) == "helipad: N/A"

    def test_address_label(self, store):
        assert format_field_line(store.row(0), "address", store.columns) == "Address: 123 Main St, Gardena, CA, 90247"

    def test_money_field(self, store):
        assert format_field_line(store.row(0), "price", store.columns) == "ListPrice: $500,000"

    def test_composite_field(self, store):
        assert format_field_line(store.row(0), "agent", store.columns) == "Listing agent: Dana Lee"

    def test_several_fields(self, store):
        text = format_fields(store.row(1), ["beds", "baths"], store.columns)
        assert text == "BedroomsTotal: 4\nBathroomsTotalInteger: 3"

    @pytest.mark.parametrize("fields,expected", [
        (["all data"], True),
        (["All_Info"], True),
        (["beds", "full profile"], True),
        (["beds"], False),
        (None, False),
    ])
    def test_wants_all_data(self, fields, expected):
        assert wants_all_data(fields) is expected


class TestDefaultSummary:
    """Summary shown when a listing is asked about with no fields."""

    def test_summary_skips_blank_values(self, store):
        text = format_default_summary(store.row(0), store.columns)
        lines = text.split("\n")
        assert lines[0] == "123 Main St, Gardena, CA, 90247"
        assert "Price: $500,000" in lines
        assert "Living area: 1,450 sq ft" in lines
        assert "Remarks: Charming single story home." in lines
        assert not any(line.startswith("Days on market") for line in lines)


class TestListingList:
    """Numbered list rendering."""

    def test_empty(self, store):
        assert format_listing_list([], None, store.columns) == NO_MATCHES

    def test_numbered_lines(self, store):
        rows = [(format_address(store.row(i)), store.row(i)) for i in (0, 1)]
        text = format_listing_list(rows, None, store.columns)
        assert text == (
            "Here are up to 2 matching listings:\n"
            "#1 123 Main St, Gardena, CA, 90247\n"
            "#2 8450 N Maclay Ave, San Fernando, CA, 91340"
        )

    def test_requested_fields_are_appended(self, store):
        rows = [(format_address(store.row(0)), store.row(0))]
        text = format_listing_list(rows, ["price", "beds"], store.columns)
        assert text.endswith("#1 123 Main St, Gardena, CA, 90247 - ListPrice: $500,000 | BedroomsTotal: 3")

    def test_all_data_adds_profile_block(self, store):
        rows = [(format_address(store.row(0)), store.row(0))]
        text = format_listing_list(rows, ["all data"], store.columns)
        assert "#1 123 Main St, Gardena, CA, 90247\nStreetNumber: 123" in text


class TestPerRowSynonymFallback:
    """A blank preferred column falls back to the next synonym on that row."""

    COLUMNS = ("StreetNumber", "StreetName", "City", "ListPrice", "CurrentPrice")
    ROW = {"StreetNumber": "9", "StreetName": "Elm", "City": "Gardena", "ListPrice": "", "CurrentPrice": "725000"}

    def test_price_uses_current_price(self):
        assert format_field_line(self.ROW, "price", self.COLUMNS) == "ListPrice: $725,000"

    def test_exact_column_name_does_not_fall_back(self):
        assert format_field_line(self.ROW, "ListPrice", self.COLUMNS) == "ListPrice: N/A"
