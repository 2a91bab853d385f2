"""Tests for catalog/services/row_parser.py"""

from datetime import datetime

from catalog.services.row_parser import (
    flatten_item, parse_items, parse_row, parse_rows, parse_table, split_numbered,
)


class TestParseRow:
    def test_basic_fields(self):
        record = parse_row(["name", "sku", "brand"], ["Lavabo Seti", "SKU123", "ACME"], source_row=2)
        assert record.name == "Lavabo Seti"
        assert record.sku == "SKU123"
        assert record.brand == "ACME"
        assert record.source_row == 2

    def test_missing_name_rejects_row(self):
        assert parse_row(["name", "sku"], ["", "SKU1"]) is None
        assert parse_row(["name"], ["   "]) is None
        assert parse_row(["sku"], ["SKU1"]) is None

    def test_numeric_coercion_is_invariant(self):
        record = parse_row(
            ["name", "weight", "desi", "warrantymonths", "width"],
            ["X", "5.5", "1,250.75", "24", "abc"],
        )
        assert record.weight == 5.5
        assert record.desi == 1250.75
        assert record.warranty_months == 24
        assert record.width == 0.0

    def test_negative_numbers_are_clamped(self):
        record = parse_row(["name", "weight"], ["X", "-3"])
        assert record.weight == 0.0

    def test_id_column(self):
        assert parse_row(["id", "name"], ["42", "X"]).id == 42
        assert parse_row(["id", "name"], ["abc", "X"]).id == 0
        assert parse_row(["id", "name"], ["-5", "X"]).id == 0

    def test_archived_tokens(self):
        for value in ("Evet", "true", "1", "Arşivlenmiş"):
            assert parse_row(["name", "archived"], ["X", value]).is_archived is True
        assert parse_row(["name", "archived"], ["X", "Hayır"]).is_archived is False

    def test_active_column_inverts(self):
        assert parse_row(["name", "active"], ["X", "Aktif"]).is_archived is False
        assert parse_row(["name", "active"], ["X", "Pasif"]).is_archived is True

    def test_dates(self):
        record = parse_row(["name", "createddate", "updateddate"], ["X", "2024-03-01 10:15:00", "not a date"])
        assert record.created_date == datetime(2024, 3, 1, 10, 15, 0)
        assert record.updated_date is None

    def test_turkish_date_format(self):
        record = parse_row(["name", "createddate"], ["X", "15.06.2023"])
        assert record.created_date == datetime(2023, 6, 15)

    def test_numbered_families_keep_positions(self):
        record = parse_row(
            ["name", "logobarcode1", "logobarcode3", "productimage2", "video1"],
            ["X", "A", "C", "https://img/2.jpg", "https://v/1.mp4"],
        )
        assert record.logo_barcodes == ["A", "", "C"]
        assert record.image_urls == ["", "https://img/2.jpg"]
        assert record.video_urls == ["https://v/1.mp4"]
        assert record.image_url == "https://img/2.jpg"

    def test_description_precedence(self):
        record = parse_row(
            ["name", "description", "descriptionplain", "descriptionhtml"],
            ["X", "generic", "plain", "<p>html</p>"],
        )
        assert record.description == "<p>html</p>"
        record = parse_row(["name", "description", "descriptionplain"], ["X", "generic", "plain"])
        assert record.description == "plain"

    def test_short_row_and_unknown_headers(self):
        record = parse_row(["name", "sku", "unknowncolumn", "brand"], ["X", "S1", "zzz"])
        assert record.sku == "S1"
        assert record.brand == ""

    def test_values_are_trimmed(self):
        record = parse_row(["name", "sku"], ["  Klozet  ", " K-1 "])
        assert record.name == "Klozet"
        assert record.sku == "K-1"


class TestSplitNumbered:
    def test_valid(self):
        assert split_numbered("productimage3") == ("image_urls", 2)
        assert split_numbered("logobarcode10") == ("logo_barcodes", 9)

    def test_out_of_range_or_plain(self):
        assert split_numbered("video6") is None
        assert split_numbered("name") is None


class TestParseRows:
    def test_counts_skipped_rows(self):
        records, skipped = parse_rows(
            ["Ürün Adı", "SKU", "Marka"],
            [["Lavabo Seti", "SKU123", "ACME"], ["", "SKU999", "ACME"]],
            first_row_number=2,
        )
        assert len(records) == 1
        assert skipped == 1
        assert records[0].source_row == 2

    def test_blank_rows_ignored_but_keep_numbering(self):
        records, skipped = parse_rows(
            ["Ürün Adı"],
            [["A"], ["  "], [float("nan")], ["B"]],
            first_row_number=2,
        )
        assert skipped == 0
        assert [r.source_row for r in records] == [2, 5]


class TestParseTable:
    def test_archive_column_detection(self):
        parsed = parse_table(["Ürün Adı", "Arşivlenmiş"], [["X", "Evet"]])
        assert parsed.has_archive_column is True
        parsed = parse_table(["Ürün Adı"], [["X"]])
        assert parsed.has_archive_column is False

    def test_unmapped_headers_reported(self):
        parsed = parse_table(["Ürün Adı", "Tedarikçi"], [["X", "Y"]])
        assert parsed.unmapped_headers == ["Tedarikçi"]


class TestFlattenItem:
    def test_json_lists_become_numbered_columns(self):
        headers, values = flatten_item({
            "name": "X",
            "imageUrls": ["https://a", "https://b"],
            "logoBarcodes": "L1,,L3",
        })
        assert headers == ["name", "productimage1", "productimage2",
                           "logobarcode1", "logobarcode2", "logobarcode3"]
        assert values == ["X", "https://a", "https://b", "L1", "", "L3"]

    def test_xml_container_element(self):
        headers, values = flatten_item({
            "Name": "X",
            "ImageUrls": {"Url": ["https://a", "https://b"]},
            "@id": "ignored",
        })
        assert headers == ["Name", "productimage1", "productimage2"]
        assert values == ["X", "https://a", "https://b"]

    def test_text_with_attributes(self):
        headers, values = flatten_item({"Name": {"@lang": "tr", "#text": "Batarya"}})
        assert headers == ["Name"]
        assert values == ["Batarya"]

    def test_booleans_become_tokens(self):
        _, values = flatten_item({"name": "X", "isArchived": True})
        assert values == ["X", "true"]


class TestParseItems:
    def test_items_parsed_and_skipped(self):
        parsed = parse_items([
            {"name": "A", "sku": "S1", "isArchived": False},
            {"sku": "S2"},
            "garbage",
        ])
        assert [r.name for r in parsed.records] == ["A"]
        assert parsed.skipped_count == 2
        assert parsed.has_archive_column is True
        assert parsed.errors == ["Row 3: not an object, skipped"]
