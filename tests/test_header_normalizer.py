"""Tests for catalog/services/header_normalizer.py"""

import pytest

from catalog.services import header_normalizer
from catalog.services.header_normalizer import (
    HEADER_MAPPINGS, CANONICAL_FIELDS, fold_header, normalize, normalize_headers, unmapped_headers,
)


class TestFoldHeader:
    def test_turkish_letters_become_ascii(self):
        assert fold_header("Ürün Adı") == "urunadi"
        assert fold_header("AĞIRLIK (KG)") == "agirlikkg"
        assert fold_header("Şablon_Çıkış-Ucu") == "sabloncikisucu"

    def test_none_is_empty(self):
        assert fold_header(None) == ""


class TestNormalize:
    @pytest.mark.parametrize("raw, expected", [
        ("Ürün Adı", "name"),
        ("name", "name"),
        ("Stok Kodu", "sku"),
        ("Trendyol Barkod", "trendyolbarcode"),
        ("trendyol_barcode", "trendyolbarcode"),
        ("Hepsiburada Satıcı Stok Kodu", "hepsiburadasellerstockcode"),
        ("Arşivlenmiş", "archived"),
        ("Aktif", "active"),
        ("Garanti (Ay)", "warrantymonths"),
        ("Açıklama HTML", "descriptionhtml"),
    ])
    def test_known_aliases(self, raw, expected):
        assert normalize(raw) == expected

    def test_numbered_families(self):
        assert normalize("Logo Barkodu 3") == "logobarcode3"
        assert normalize("Ürün Görseli 10") == "productimage10"
        assert normalize("Pazaryeri Görseli 1") == "marketplaceimage1"
        assert normalize("Video 5") == "video5"

    def test_numbered_family_out_of_range_is_unmapped(self):
        assert normalize("Video 6") == "video6"
        assert "video6" not in CANONICAL_FIELDS

    def test_misspelled_aliases_still_resolve(self):
        assert normalize("Lawabo Su Taşma Deliği") == "lavabosutasmadeligi"
        assert normalize("PTT Ürün Stokodu") == "ptturunstokkodu"

    def test_unknown_header_returns_folded_form(self):
        assert normalize("Renk Kodu (Özel)") == "renkkoduozel"

    def test_never_raises_on_odd_input(self):
        assert normalize(None) == ""
        assert normalize(12) == "12"

    def test_idempotent_for_every_canonical(self):
        for canonical in CANONICAL_FIELDS:
            assert normalize(normalize(canonical)) == canonical


class TestMappingTable:
    def test_table_is_read_only(self):
        with pytest.raises(TypeError):
            HEADER_MAPPINGS["foo"] = "bar"

    def test_every_alias_points_to_canonical(self):
        for alias, canonical in HEADER_MAPPINGS.items():
            assert HEADER_MAPPINGS[canonical] == canonical

    def test_list_prefixes_target_numbered_families(self):
        for prefix in header_normalizer.LIST_HEADER_PREFIXES.values():
            assert prefix in header_normalizer.NUMBERED_FAMILIES


class TestHeaderLists:
    def test_normalize_headers_keeps_positions(self):
        assert normalize_headers(["Ürün Adı", "", "Marka"]) == ["name", "", "brand"]

    def test_unmapped_headers_skip_blanks(self):
        assert unmapped_headers(["Ürün Adı", "", "Tedarikçi"]) == ["Tedarikçi"]
