"""Tests for sale entities."""

import pytest
from pydantic import ValidationError

from feria.core.entities.sale import (
    LEGACY_SCHEMA_VERSION,
    PaymentMethod,
    Sale,
    SaleItem,
    ServingUnit,
)


class TestSaleItem:
    def test_valid_item(self):
        item = SaleItem(style="IPA", unit=ServingUnit.PINTA, quantity=2)
        assert item.unit is ServingUnit.PINTA

    def test_zero_quantity_rejected(self):
        with pytest.raises(ValidationError):
            SaleItem(style="IPA", unit=ServingUnit.PINTA, quantity=0)

    def test_blank_style_rejected(self):
        with pytest.raises(ValidationError):
            SaleItem(style="", unit=ServingUnit.LITRO, quantity=1)

    def test_mixed_unit_rejected(self):
        with pytest.raises(ValidationError, match="legacy"):
            SaleItem(style="IPA", unit=ServingUnit.MIXED, quantity=1)


class TestSale:
    def _sale(self, **overrides) -> Sale:
        data = {
            "items": (SaleItem(style="IPA", unit=ServingUnit.PINTA, quantity=2),),
            "total_amount": 6000,
            "payment_method": PaymentMethod.CASH,
            "operator_id": "op-1",
        }
        data.update(overrides)
        return Sale(**data)

    def test_defaults(self):
        sale = self._sale()
        assert sale.schema_version == 2
        assert sale.id is None
        assert len(sale.client_ref) == 32
        assert sale.timestamp.tzinfo is not None

    def test_empty_items_rejected(self):
        with pytest.raises(ValidationError, match="at least one item"):
            self._sale(items=())

    def test_negative_total_rejected(self):
        with pytest.raises(ValidationError):
            self._sale(total_amount=-1)

    def test_structured_sale_cannot_carry_flattened_fields(self):
        with pytest.raises(ValidationError, match="legacy"):
            self._sale(unit=ServingUnit.PINTA, quantity=1)

    def test_sale_is_frozen(self):
        sale = self._sale()
        with pytest.raises(ValidationError):
            sale.total_amount = 1  # type: ignore[misc]

    def test_without_id(self):
        sale = self._sale(id="temp-abc")
        stripped = sale.without_id()
        assert stripped.id is None
        assert stripped.client_ref == sale.client_ref

    def test_to_document_drops_id_and_none(self):
        doc = self._sale(id="abc").to_document()
        assert "id" not in doc
        assert "unit" not in doc
        assert "style" not in doc
        assert doc["items"] == [{"style": "IPA", "unit": "Pinta", "quantity": 2.0}]
        assert doc["payment_method"] == "$ Billete"
        assert doc["schema_version"] == 2

    def test_document_round_trip(self):
        sale = self._sale()
        restored = Sale.from_document(sale.to_document(), doc_id="s1")
        assert restored.id == "s1"
        assert restored.model_dump(exclude={"id"}) == sale.model_dump(exclude={"id"})


class TestLegacySale:
    def test_flattened_document_is_schema_v1(self):
        sale = Sale.from_document(
            {
                "unit": "Litro",
                "quantity": 2,
                "style": "Stout",
                "total_amount": 12000,
                "payment_method": "$ Digital",
                "operator_id": "op-9",
                "timestamp": "2023-09-18T20:00:00+00:00",
            },
            doc_id="legacy-1",
        )
        assert sale.schema_version == LEGACY_SCHEMA_VERSION
        assert sale.is_legacy
        assert sale.unit is ServingUnit.LITRO
        assert sale.client_ref == "legacy-1"

    def test_mixed_unit_allowed_on_legacy(self):
        sale = Sale.from_document(
            {
                "unit": "Mixto",
                "quantity": 4,
                "total_amount": 15000,
                "payment_method": "$ Billete",
                "operator_id": "op-9",
            }
        )
        assert sale.unit is ServingUnit.MIXED
        assert sale.style is None

    def test_legacy_without_quantity_rejected(self):
        with pytest.raises(ValidationError):
            Sale.from_document(
                {
                    "unit": "Pinta",
                    "total_amount": 100,
                    "payment_method": "$ Digital",
                    "operator_id": "op",
                }
            )

    def test_unknown_fields_ignored(self):
        sale = Sale.from_document(
            {
                "items": [{"style": "IPA", "unit": "Pinta", "quantity": 1}],
                "total_amount": 3000,
                "payment_method": "$ Digital",
                "operator_id": "op",
                "device": "tablet-3",
            }
        )
        assert "device" not in sale.to_document()
