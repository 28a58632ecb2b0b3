"""
Tests for receipt generation functionality.

Tests the receipt generation system including:
- PDF receipt generation (standard and thermal formats)
- HTML receipt generation for browser printing
- Receipt service functionality
- Receipt URL endpoints
"""

from dataclasses import replace
from decimal import Decimal
from unittest.mock import MagicMock, patch

from django.test import override_settings
from django.urls import reverse

import pytest

from apps.core.models import Store
from apps.core.store_config import StoreConfig
from apps.sales.receipt_service import ReceiptGenerator, ReceiptService
from apps.sales.services import SettlementService
from apps.sales.settlement import AdjustmentSpec, CartLine


@pytest.fixture
def sale_with_items(store, make_product, customer):
    """A settled sale with a percentage discount and tax."""
    coffee = make_product(name="Kopi Susu", brand="Indocafe", price="50000", stock=10)
    bread = make_product(name="Roti Bakar", price="50000", stock=10)
    return SettlementService.settle(
        store,
        [CartLine.from_product(coffee, 1), CartLine.from_product(bread, 1)],
        discount=AdjustmentSpec.percentage("10"),
        tax=AdjustmentSpec.percentage("11"),
        customer=customer,
        cashier=store.owner,
    )


@pytest.fixture
def receipt_config(store):
    return replace(
        StoreConfig.from_store(store),
        store_name="Warung Keren",
        store_address="Jl. Merdeka 1",
        store_phone="021-555-0100",
        receipt_footer="Terima kasih!",
    )


@pytest.mark.django_db
class TestReceiptGenerator:
    """Test the ReceiptGenerator class."""

    def test_generator_loads_store_config(self, sale_with_items):
        generator = ReceiptGenerator(sale_with_items)

        assert generator.sale == sale_with_items
        assert generator.config.currency == "IDR"
        assert generator.styles is not None

    def test_generate_pdf_receipt_standard(self, sale_with_items, receipt_config):
        generator = ReceiptGenerator(sale_with_items, receipt_config)

        pdf_bytes = generator.generate_pdf_receipt("standard")

        assert isinstance(pdf_bytes, bytes)
        assert pdf_bytes.startswith(b"%PDF")

    def test_generate_pdf_receipt_thermal(self, sale_with_items, receipt_config):
        generator = ReceiptGenerator(sale_with_items, receipt_config)

        pdf_bytes = generator.generate_pdf_receipt("thermal")

        assert pdf_bytes.startswith(b"%PDF")

    def test_generate_html_receipt_standard(self, sale_with_items, receipt_config):
        generator = ReceiptGenerator(sale_with_items, receipt_config)

        html_content = generator.generate_html_receipt("standard")

        assert sale_with_items.sale_number in html_content
        assert "Warung Keren" in html_content
        assert "Jl. Merdeka 1" in html_content
        assert "Andi" in html_content
        assert "Kopi Susu" in html_content
        assert "Diskon (10%)" in html_content
        assert "Pajak (11%)" in html_content
        assert "Rp 99.900" in html_content
        assert "Saldo" not in html_content
        assert "Tunai" in html_content
        assert "Terima kasih!" in html_content

    def test_generate_html_receipt_thermal(self, sale_with_items, receipt_config):
        generator = ReceiptGenerator(sale_with_items, receipt_config)

        html_content = generator.generate_html_receipt("thermal")

        assert sale_with_items.sale_number in html_content
        assert "Rp 99.900" in html_content

    def test_html_escapes_store_text(self, sale_with_items, receipt_config):
        config = replace(receipt_config, store_name="<b>Toko</b>")

        html_content = ReceiptGenerator(sale_with_items, config).generate_html_receipt("standard")

        assert "<b>Toko</b>" not in html_content
        assert "&lt;b&gt;Toko&lt;/b&gt;" in html_content

    def test_fixed_discount_label_has_no_percentage(self, store, make_product):
        item = make_product(price="20000", stock=3)
        sale = SettlementService.settle(
            store, [CartLine.from_product(item, 1)], discount=AdjustmentSpec.fixed("5000")
        )

        generator = ReceiptGenerator(sale)

        assert generator.discount_label == "Diskon"

    def test_qr_payload_defaults_to_sale_number(self, sale_with_items):
        assert ReceiptGenerator(sale_with_items).qr_payload == sale_with_items.sale_number

    @override_settings(POS_RECEIPT_QR_BASE_URL="https://pos.example.com/r/")
    def test_qr_payload_with_base_url(self, sale_with_items):
        payload = ReceiptGenerator(sale_with_items).qr_payload

        assert payload == f"https://pos.example.com/r/{sale_with_items.id}"

    @patch("apps.sales.receipt_service.qrcode")
    def test_generate_qr_code(self, mock_qrcode, sale_with_items):
        """Test QR code generation."""
        mock_qr_instance = MagicMock()
        mock_qrcode.QRCode.return_value = mock_qr_instance

        generator = ReceiptGenerator(sale_with_items)
        generator._generate_qr_code()

        mock_qrcode.QRCode.assert_called_once()
        mock_qr_instance.add_data.assert_called_once_with(sale_with_items.sale_number)
        mock_qr_instance.make.assert_called_once()

    def test_qr_failure_still_renders_pdf(self, sale_with_items):
        with patch("apps.sales.receipt_service.qrcode.QRCode", side_effect=ValueError("bad")):
            pdf_bytes = ReceiptGenerator(sale_with_items).generate_pdf_receipt("standard")

        assert pdf_bytes.startswith(b"%PDF")


@pytest.mark.django_db
class TestReceiptService:
    """Test the ReceiptService class."""

    def test_generate_receipt_pdf(self, sale_with_items):
        pdf_bytes = ReceiptService.generate_receipt(
            sale=sale_with_items, format_type="standard", output_format="pdf"
        )

        assert pdf_bytes.startswith(b"%PDF")

    def test_generate_receipt_html(self, sale_with_items):
        html_bytes = ReceiptService.generate_receipt(
            sale=sale_with_items, format_type="thermal", output_format="html"
        )

        assert isinstance(html_bytes, bytes)
        assert sale_with_items.sale_number.encode() in html_bytes

    def test_unknown_output_format(self, sale_with_items):
        with pytest.raises(ValueError):
            ReceiptService.generate_receipt(sale=sale_with_items, output_format="docx")

    def test_unknown_receipt_format(self, sale_with_items):
        with pytest.raises(ValueError):
            ReceiptService.generate_receipt(sale=sale_with_items, format_type="poster")


@pytest.mark.django_db
class TestReceiptEndpoints:
    """Test the receipt URL endpoints."""

    def test_receipt_html_view(self, authenticated_api_client, sale_with_items):
        url = reverse(
            "sales:receipt_html", kwargs={"sale_id": sale_with_items.id, "format_type": "standard"}
        )

        response = authenticated_api_client.get(url)

        assert response.status_code == 200
        assert response["Content-Type"].startswith("text/html")
        assert sale_with_items.sale_number in response.content.decode("utf-8")

    def test_receipt_pdf_view_defaults_to_store_paper_size(
        self, authenticated_api_client, sale_with_items
    ):
        url = reverse("sales:receipt_pdf_default", kwargs={"sale_id": sale_with_items.id})

        response = authenticated_api_client.get(url)

        assert response.status_code == 200
        assert response["Content-Type"] == "application/pdf"
        assert "_thermal.pdf" in response["Content-Disposition"]
        assert response.content.startswith(b"%PDF")

    def test_receipt_unknown_format_is_404(self, authenticated_api_client, sale_with_items):
        url = reverse(
            "sales:receipt_pdf", kwargs={"sale_id": sale_with_items.id, "format_type": "poster"}
        )

        response = authenticated_api_client.get(url)

        assert response.status_code == 404

    def test_receipt_requires_authentication(self, api_client, sale_with_items):
        url = reverse("sales:receipt_html_default", kwargs={"sale_id": sale_with_items.id})

        response = api_client.get(url)

        assert response.status_code == 401

    def test_receipt_of_other_store_is_404(self, api_client, sale_with_items, django_user_model):
        other_user = django_user_model.objects.create_user(username="tetangga", password="x")
        Store.objects.create(owner=other_user, name="Toko Tetangga")
        api_client.force_authenticate(user=other_user)
        url = reverse("sales:receipt_html_default", kwargs={"sale_id": sale_with_items.id})

        response = api_client.get(url)

        assert response.status_code == 404

    def test_sale_total_is_persisted_for_receipt(self, sale_with_items):
        assert sale_with_items.total == Decimal("99900.00")
