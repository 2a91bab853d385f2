"""Tests for catalog/services/export_service.py and export_column_service.py"""

import io
import json

import pandas as pd
import pytest

from catalog.models import ProductRecord
from catalog.services import excel_service, export_service, xml_service
from catalog.services.export_column_service import (
    clean_html_for_export, get_available_columns, get_column_value, get_columns_by_category,
    get_default_columns, html_to_plain_text, resolve_columns,
)


class TestColumnCatalog:
    def test_orders_are_unique(self):
        orders = [c.order for c in get_available_columns()]
        assert len(orders) == len(set(orders))

    def test_numbered_families_present(self):
        names = {c.property_name for c in get_available_columns()}
        assert {"logo_barcode_1", "logo_barcode_10", "product_image_10",
                "marketplace_image_10", "video_5"} <= names
        assert "video_6" not in names

    def test_grouped_by_category(self):
        grouped = get_columns_by_category()
        assert list(grouped)[0] == "Tarihler"
        assert len(grouped["Videolar"]) == 5
        assert len(grouped["Logo Barkodları"]) == 10

    def test_defaults_include_required(self):
        names = [c.property_name for c in get_default_columns()]
        assert "id" in names and "name" in names
        assert "description_html" not in names

    def test_resolve_keeps_required_and_drops_unknown(self):
        names = [c.property_name for c in resolve_columns(["sku", "nonsense"])]
        assert names == ["id", "name", "sku"]

    def test_resolve_empty_means_defaults(self):
        assert resolve_columns([]) == get_default_columns()


class TestColumnValues:
    def test_numbered_values(self, existing_record):
        assert get_column_value(existing_record, "logo_barcode_1") == "L1"
        assert get_column_value(existing_record, "logo_barcode_2") == ""
        assert get_column_value(existing_record, "logo_barcode_3") == "L3"
        assert get_column_value(existing_record, "logo_barcode_9") == ""
        assert get_column_value(existing_record, "product_image_2") == "https://cdn.example.com/b.jpg"

    def test_plain_description(self):
        html = '<p class="MsoNormal">Birinci</p><p>İkinci &amp; son</p><ul><li>a</li><li>b</li></ul>'
        assert html_to_plain_text(html) == "Birinci\n\nİkinci & son\n• a\n• b"

    def test_clean_html_strips_styles_and_whitespace(self):
        html = '<p style="color:red">  A  </p>\n\n<p></p>'
        assert clean_html_for_export(html) == "<p> A </p>"


class TestExportFull:
    def test_json(self, existing_record):
        content, mimetype, filename = export_service.export_full([existing_record], "json")
        data = json.loads(content)
        assert mimetype == "application/json"
        assert filename.startswith("urunler_") and filename.endswith(".json")
        assert data[0]["name"] == "Lavabo Seti"
        assert data[0]["logoBarcodes"] == ["L1", "", "L3"]
        assert data[0]["createdDate"] == "2024-01-10 09:30:00"

    def test_xml_round_trip(self, existing_record):
        content, _, _ = export_service.export_full([existing_record], "xml")
        record = xml_service.read_xml_records(content.encode("utf-8")).records[0]
        assert record.name == existing_record.name
        assert record.sku == existing_record.sku
        assert record.weight == existing_record.weight
        assert record.image_urls == existing_record.image_urls
        assert record.logo_barcodes == existing_record.logo_barcodes
        assert record.is_archived is True

    def test_csv_round_trip(self, existing_record):
        content, mimetype, _ = export_service.export_full([existing_record], "csv")
        assert mimetype == "text/csv"
        record = excel_service.read_csv_records(content.encode("utf-8")).records[0]
        assert record.id == 7
        assert record.name == "Lavabo Seti"
        assert record.trendyol_barcode == "TY-001"
        assert record.logo_barcodes == ["L1", "", "L3"]
        assert record.created_date == existing_record.created_date
        assert record.is_archived is True

    def test_excel_keeps_numbers_numeric(self, existing_record):
        content, _, filename = export_service.export_full([existing_record], "excel")
        assert filename.endswith(".xlsx")
        df = pd.read_excel(io.BytesIO(content), engine="openpyxl")
        assert df.loc[0, "Ağırlık (kg)"] == 5.0
        assert df.loc[0, "Arşivlenmiş"] == "Evet"

    def test_unknown_format(self, existing_record):
        with pytest.raises(ValueError, match="pdf"):
            export_service.export_full([existing_record], "pdf")


class TestExportCustom:
    def test_csv_selected_columns(self, existing_record):
        content, _, filename = export_service.export_custom([existing_record], ["sku", "weight"], "csv")
        assert filename.startswith("urunler_ozel_")
        assert content.splitlines() == ["ID,Ürün Adı,SKU,Ağırlık (kg)", "7,Lavabo Seti,SKU123,5"]

    def test_json_camel_case_keys(self, existing_record):
        content, _, _ = export_service.export_custom([existing_record], ["is_archived", "video_1"], "json")
        assert json.loads(content) == [{
            "isArchived": True,
            "id": 7,
            "name": "Lavabo Seti",
            "video1": "https://cdn.example.com/v.mp4",
        }]

    def test_xml_cdata(self, existing_record):
        content, mimetype, _ = export_service.export_custom([existing_record], ["brand"], "xml")
        assert mimetype == "application/xml"
        assert "<Brand><![CDATA[ACME]]></Brand>" in content
        assert "<Id><![CDATA[7]]></Id>" in content

    def test_format_cell(self):
        assert export_service.format_cell(True) == "Evet"
        assert export_service.format_cell(False) == "Hayır"
        assert export_service.format_cell(12.50) == "12.5"
        assert export_service.format_cell(None) == ""


class TestImportTemplate:
    def test_template_headers_are_importable(self):
        from catalog.services.header_normalizer import is_known, normalize
        headers = export_service.import_template_columns()
        assert "Açıklama (Düz Metin)" not in headers
        assert all(is_known(normalize(h)) for h in headers)
