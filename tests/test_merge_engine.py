"""Tests for catalog/services/merge_engine.py"""

from dataclasses import replace

from catalog.models import ProductRecord
from catalog.services.import_service import ImportOptions
from catalog.services.merge_engine import merge


def _without_timestamp(record):
    return replace(record, updated_date=None)


class TestMerge:
    def test_empty_draft_changes_nothing_but_timestamp(self, existing_record):
        merged = merge(existing_record, ProductRecord(), ImportOptions())
        assert _without_timestamp(merged) == _without_timestamp(existing_record)
        assert merged.updated_date > existing_record.updated_date

    def test_existing_is_not_mutated(self, existing_record):
        before = existing_record.copy()
        merge(existing_record, ProductRecord(name="Yeni Ad", weight=9.0), ImportOptions())
        assert existing_record == before

    def test_non_empty_strings_override(self, existing_record):
        merged = merge(existing_record, ProductRecord(name="Yeni Ad", color="  "), ImportOptions())
        assert merged.name == "Yeni Ad"
        assert merged.color == "Beyaz"

    def test_zero_weight_keeps_existing(self, existing_record):
        merged = merge(existing_record, ProductRecord(name="Lavabo Seti", weight=0), ImportOptions())
        assert merged.weight == 5.0

    def test_positive_numbers_override(self, existing_record):
        merged = merge(existing_record, ProductRecord(weight=7.25, warranty_months=36), ImportOptions())
        assert merged.weight == 7.25
        assert merged.warranty_months == 36
        assert merged.desi == 12.5

    def test_lists_replaced_wholesale_when_supplied(self, existing_record):
        merged = merge(existing_record, ProductRecord(image_urls=["https://cdn.example.com/z.jpg"]), ImportOptions())
        assert merged.image_urls == ["https://cdn.example.com/z.jpg"]
        assert merged.image_url == "https://cdn.example.com/z.jpg"
        assert merged.video_urls == existing_record.video_urls

    def test_blank_list_keeps_existing(self, existing_record):
        merged = merge(existing_record, ProductRecord(logo_barcodes=["", ""]), ImportOptions())
        assert merged.logo_barcodes == ["L1", "", "L3"]

    def test_archive_flag_preserved_by_default(self, existing_record):
        merged = merge(existing_record, ProductRecord(is_archived=False), ImportOptions())
        assert merged.is_archived is True

    def test_archive_flag_overwritten_when_not_preserved(self, existing_record):
        options = ImportOptions(preserve_archive_status=False)
        merged = merge(existing_record, ProductRecord(is_archived=False), options)
        assert merged.is_archived is False

    def test_category_resolves_reference(self, existing_record):
        calls = []

        def resolver(name):
            calls.append(name)
            return 11

        merged = merge(existing_record, ProductRecord(category=" Mutfak "), ImportOptions(), resolver)
        assert merged.category == "Mutfak"
        assert merged.category_id == 11
        assert calls == ["Mutfak"]

    def test_category_id_from_draft_skips_resolver(self, existing_record):
        merged = merge(existing_record, ProductRecord(category="Mutfak", category_id=4), ImportOptions(),
                       lambda name: 99)
        assert merged.category_id == 4

    def test_failed_category_lookup_clears_reference(self, existing_record):
        merged = merge(existing_record, ProductRecord(category="Mutfak"), ImportOptions(), lambda name: None)
        assert merged.category == "Mutfak"
        assert merged.category_id is None

    def test_same_category_unresolved_keeps_reference(self, existing_record):
        merged = merge(existing_record, ProductRecord(category="BANYO"), ImportOptions(), lambda name: None)
        assert merged.category == "BANYO"
        assert merged.category_id == 3

    def test_identity_and_creation_date_retained(self, existing_record):
        merged = merge(existing_record, ProductRecord(id=999, name="X"), ImportOptions())
        assert merged.id == 7
        assert merged.created_date == existing_record.created_date
