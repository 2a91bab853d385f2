"""Tests for catalog/services/validation_service.py"""

import pytest

from catalog.models import ProductRecord
from catalog.services.validation_service import ValidationError, ensure_valid, validate_product


class TestValidateProduct:
    def test_valid_record(self):
        record = ProductRecord(name="Lavabo", image_urls=["https://cdn.example.com/a.jpg"])
        assert validate_product(record, is_new=True) == {}

    def test_name_required(self):
        errors = validate_product(ProductRecord(name="  "))
        assert errors["name"] == ["Ürün adı zorunludur"]

    def test_name_word_limit(self):
        errors = validate_product(ProductRecord(name="kelime " * 201))
        assert any("200 kelime" in m for m in errors["name"])

    def test_weight_range(self):
        assert "weight" in validate_product(ProductRecord(name="A", weight=10000))
        assert "weight" in validate_product(ProductRecord(name="A", weight=-1))

    def test_negative_desi_only_checked_on_create(self):
        record = ProductRecord(name="A", desi=-2)
        assert "desi" in validate_product(record, is_new=True)
        assert "desi" not in validate_product(record)

    def test_image_limits_and_urls(self):
        record = ProductRecord(name="A", image_urls=[f"https://x/{i}.jpg" for i in range(11)])
        assert "imageUrls" in validate_product(record)
        record = ProductRecord(name="A", video_urls=["ftp://x/v.mp4"])
        assert validate_product(record)["videoUrls"] == ["Geçersiz URL: ftp://x/v.mp4"]

    def test_blank_image_slots_ignored(self):
        record = ProductRecord(name="A", image_urls=["", "https://x/2.jpg"])
        assert validate_product(record) == {}


class TestEnsureValid:
    def test_raises_with_field_errors(self):
        with pytest.raises(ValidationError) as exc_info:
            ensure_valid(ProductRecord(name="", sku="x" * 101))
        assert set(exc_info.value.errors) == {"name", "sku"}
        assert isinstance(exc_info.value, ValueError)
