"""Tests for catalog/utils/helpers.py"""

from datetime import datetime

from catalog.utils.helpers import (
    chunked, decode_logo_barcodes, encode_logo_barcodes, fold_turkish, format_decimal,
    get_logo_barcode, is_truthy, parse_datetime, set_logo_barcode, to_camel, to_float,
    to_int, to_pascal, turkish_lower,
)


class TestLogoBarcodes:
    def test_round_trip_keeps_positions(self):
        encoded = encode_logo_barcodes(["A", "", "C"])
        assert encoded == "A,,C"
        assert get_logo_barcode(encoded, 2) == "C"
        assert get_logo_barcode(encoded, 1) == ""
        assert get_logo_barcode(encoded, 7) == ""

    def test_trailing_blanks_trimmed(self):
        assert encode_logo_barcodes(["A", "", ""]) == "A"
        assert encode_logo_barcodes([]) == ""

    def test_commas_inside_values_removed(self):
        assert encode_logo_barcodes(["1,2", "B"]) == "12,B"

    def test_set_pads_missing_slots(self):
        assert set_logo_barcode("", 3, "D") == ",,,D"
        assert set_logo_barcode("A,,C", 1, "B") == "A,B,C"

    def test_decode_variants(self):
        assert decode_logo_barcodes(None) == []
        assert decode_logo_barcodes('["A", "", "C"]') == ["A", "", "C"]
        assert decode_logo_barcodes("A\nB") == ["A", "B"]
        assert decode_logo_barcodes(["A", None]) == ["A", ""]


class TestNumbers:
    def test_to_int(self):
        assert to_int("12") == 12
        assert to_int("12.9") == 12
        assert to_int("abc", 5) == 5
        assert to_int(None) == 0

    def test_to_float_invariant(self):
        assert to_float("5.5") == 5.5
        assert to_float("1,234.5") == 1234.5
        assert to_float("5,5") == 55.0
        assert to_float("nan") == 0.0
        assert to_float("") == 0.0

    def test_format_decimal(self):
        assert format_decimal(5.0) == "5"
        assert format_decimal(0.125) == "0.125"
        assert format_decimal(3) == "3"


class TestText:
    def test_turkish_lower(self):
        assert turkish_lower("İSTANBUL") == "istanbul"
        assert turkish_lower("IŞIK") == "işik"

    def test_fold_turkish(self):
        assert fold_turkish("Çağrı Şöför Ünü") == "cagri sofor unu"

    def test_is_truthy(self):
        assert is_truthy("Evet")
        assert is_truthy(" AKTİF ")
        assert not is_truthy("hayır")
        assert not is_truthy(None)

    def test_case_helpers(self):
        assert to_camel("spare_barcode_1") == "spareBarcode1"
        assert to_pascal("n11_catalog_id") == "N11CatalogId"


class TestDates:
    def test_formats(self):
        assert parse_datetime("2024-05-01") == datetime(2024, 5, 1)
        assert parse_datetime("2024-05-01T08:00:00") == datetime(2024, 5, 1, 8)
        assert parse_datetime("01.05.2024 08:30") == datetime(2024, 5, 1, 8, 30)
        assert parse_datetime("yarın") is None
        assert parse_datetime("") is None


class TestChunked:
    def test_last_chunk_shorter(self):
        assert list(chunked(range(5), 2)) == [[0, 1], [2, 3], [4]]
