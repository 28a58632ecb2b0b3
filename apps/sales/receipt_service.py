"""
Receipt generation service for the POS.

- PDF receipts (ReportLab) for download and printing
- Thermal printer format (80mm width) and standard A4 format
- HTML receipts for browser printing
- QR code carrying the transaction number
"""

import io
import logging
from typing import Optional
from xml.sax.saxutils import escape

from django.conf import settings
from django.template.loader import render_to_string
from django.utils import timezone

import qrcode
from qrcode.exceptions import DataOverflowError
from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.lib.units import inch, mm
from reportlab.platypus import Image, Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle
from reportlab.platypus.flowables import HRFlowable

from apps.core.formatting_utils import format_currency, format_number
from apps.core.store_config import StoreConfig

from .models import Sale
from .settlement import AdjustmentKind

logger = logging.getLogger(__name__)

FORMAT_THERMAL = "thermal"
FORMAT_STANDARD = "standard"
RECEIPT_FORMATS = (FORMAT_STANDARD, FORMAT_THERMAL)


class ReceiptGenerator:
    """
    Receipt generator for POS sales.

    Renders only from the persisted Sale and an explicit StoreConfig.

    Supports multiple formats:
    - PDF receipts for download/storage
    - HTML receipts for browser printing
    - Thermal printer format (80mm width)
    - Standard receipt format (A4)
    """

    # Receipt dimensions
    THERMAL_WIDTH = 80 * mm  # 80mm thermal paper

    # Margins
    THERMAL_MARGIN = 5 * mm
    STANDARD_MARGIN = 20 * mm

    def __init__(self, sale: Sale, config: Optional[StoreConfig] = None):
        """Initialize receipt generator with sale data and store configuration."""
        self.sale = sale
        self.config = config or StoreConfig.from_store(sale.store)
        self.styles = getSampleStyleSheet()

        self._create_custom_styles()

    def _create_custom_styles(self):
        """Create paragraph styles for both receipt sizes."""
        self.header_style = ParagraphStyle(
            "ReceiptHeader",
            parent=self.styles["Heading1"],
            fontSize=16,
            spaceAfter=12,
            alignment=1,  # Center alignment
            fontName="Helvetica-Bold",
        )

        self.shop_name_style = ParagraphStyle(
            "ShopName",
            parent=self.styles["Heading1"],
            fontSize=18,
            spaceAfter=6,
            alignment=1,
            fontName="Helvetica-Bold",
        )

        self.thermal_header_style = ParagraphStyle(
            "ThermalHeader",
            parent=self.header_style,
            fontSize=12,
            spaceAfter=8,
        )

        self.thermal_shop_style = ParagraphStyle(
            "ThermalShop",
            parent=self.shop_name_style,
            fontSize=14,
            spaceAfter=4,
        )

        self.body_style = ParagraphStyle(
            "ReceiptBody",
            parent=self.styles["Normal"],
            fontSize=10,
            spaceAfter=6,
        )

        self.thermal_body_style = ParagraphStyle(
            "ThermalBody",
            parent=self.body_style,
            fontSize=8,
            spaceAfter=4,
        )

        self.total_style = ParagraphStyle(
            "ReceiptTotal",
            parent=self.styles["Normal"],
            fontSize=12,
            spaceAfter=6,
            alignment=2,  # Right alignment
            fontName="Helvetica-Bold",
        )

        self.thermal_total_style = ParagraphStyle(
            "ThermalTotal",
            parent=self.total_style,
            fontSize=10,
            spaceAfter=4,
        )

    # Display helpers

    def money(self, amount) -> str:
        return format_currency(amount, self.config.currency)

    @staticmethod
    def _adjustment_label(label, kind, value):
        if kind == AdjustmentKind.PERCENTAGE:
            places = 0 if value == value.to_integral_value() else 2
            return f"{label} ({format_number(value, decimal_places=places)}%)"
        return label

    @property
    def discount_label(self) -> str:
        return self._adjustment_label("Diskon", self.sale.discount_type, self.sale.discount_value)

    @property
    def tax_label(self) -> str:
        return self._adjustment_label("Pajak", self.sale.tax_type, self.sale.tax_value)

    @property
    def payment_method_display(self) -> str:
        return self.sale.get_payment_method_display()

    @property
    def qr_payload(self) -> str:
        """Data encoded in the receipt QR code."""
        base_url = getattr(settings, "POS_RECEIPT_QR_BASE_URL", "")
        if base_url:
            return f"{base_url.rstrip('/')}/{self.sale.id}"
        return self.sale.sale_number

    # PDF

    def generate_pdf_receipt(self, format_type: str = FORMAT_STANDARD) -> bytes:
        """
        Generate PDF receipt.

        Args:
            format_type: 'standard' for A4, 'thermal' for 80mm thermal paper

        Returns:
            PDF bytes
        """
        buffer = io.BytesIO()
        thermal = format_type == FORMAT_THERMAL

        if thermal:
            # Height grows with the number of lines
            height = 5 * inch + self.sale.items.count() * 8 * mm
            doc = SimpleDocTemplate(
                buffer,
                pagesize=(self.THERMAL_WIDTH, height),
                rightMargin=self.THERMAL_MARGIN,
                leftMargin=self.THERMAL_MARGIN,
                topMargin=self.THERMAL_MARGIN,
                bottomMargin=self.THERMAL_MARGIN,
            )
        else:
            doc = SimpleDocTemplate(
                buffer,
                pagesize=A4,
                rightMargin=self.STANDARD_MARGIN,
                leftMargin=self.STANDARD_MARGIN,
                topMargin=self.STANDARD_MARGIN,
                bottomMargin=self.STANDARD_MARGIN,
            )

        story = []
        story.extend(self._build_shop_header(thermal))
        story.append(
            Paragraph(
                "STRUK PEMBAYARAN", self.thermal_header_style if thermal else self.header_style
            )
        )
        story.extend(self._build_sale_info(thermal))
        story.extend(self._build_items_table(thermal))
        story.extend(self._build_totals_section(thermal))
        story.extend(self._build_receipt_footer(thermal))

        doc.build(story)
        pdf_bytes = buffer.getvalue()
        buffer.close()

        return pdf_bytes

    def _separator(self, thermal: bool, thickness: int = 1):
        gap = 8 if thermal else 12
        return [
            Spacer(1, gap),
            HRFlowable(width="100%", thickness=thickness, color=colors.black),
            Spacer(1, gap),
        ]

    def _build_shop_header(self, thermal: bool = False):
        """Build shop branding header."""
        elements = []

        style = self.thermal_shop_style if thermal else self.shop_name_style
        elements.append(Paragraph(escape(self.config.store_name), style))

        body_style = self.thermal_body_style if thermal else self.body_style
        shop_info = [self.config.store_address, self.config.store_phone, self.config.store_email]
        for info in filter(None, shop_info):
            elements.append(Paragraph(f"<para align='center'>{escape(info)}</para>", body_style))

        elements.extend(self._separator(thermal))
        return elements

    def _build_sale_info(self, thermal: bool = False):
        """Build sale information section."""
        body_style = self.thermal_body_style if thermal else self.body_style
        transaction_date = timezone.localtime(self.sale.transaction_date)

        sale_info = [
            f"No. Transaksi: {self.sale.sale_number}",
            f"Tanggal: {transaction_date.strftime('%d/%m/%Y %H:%M')}",
            f"Pelanggan: {self.sale.customer_name}",
        ]
        if self.sale.cashier:
            sale_info.append(f"Kasir: {self.sale.cashier.get_username()}")

        elements = [Paragraph(escape(info), body_style) for info in sale_info]
        elements.extend(self._separator(thermal))
        return elements

    def _build_items_table(self, thermal: bool = False):
        """Build items table."""
        if thermal:
            data = [["Item", "Qty", "Harga", "Total"]]
            col_widths = [28 * mm, 8 * mm, 17 * mm, 17 * mm]
            font_size = 7
        else:
            data = [["Item", "Merek", "Qty", "Harga", "Total"]]
            col_widths = [60 * mm, 35 * mm, 15 * mm, 30 * mm, 30 * mm]
            font_size = 9

        for item in self.sale.items.all():
            if thermal:
                name = item.product_name[:18] + ("..." if len(item.product_name) > 18 else "")
                row = [name, str(item.quantity), self.money(item.unit_price), self.money(item.line_total)]
            else:
                row = [
                    item.product_name,
                    item.brand or "-",
                    str(item.quantity),
                    self.money(item.unit_price),
                    self.money(item.line_total),
                ]
            data.append(row)

        table = Table(data, colWidths=col_widths)
        table.setStyle(
            TableStyle(
                [
                    ("FONTNAME", (0, 0), (-1, 0), "Helvetica-Bold"),
                    ("FONTSIZE", (0, 0), (-1, 0), font_size + 1),
                    ("FONTNAME", (0, 1), (-1, -1), "Helvetica"),
                    ("FONTSIZE", (0, 1), (-1, -1), font_size),
                    ("ALIGN", (1, 0), (-1, -1), "RIGHT"),
                    ("LINEBELOW", (0, 0), (-1, 0), 1, colors.black),
                    ("BOTTOMPADDING", (0, 0), (-1, 0), 6),
                    ("VALIGN", (0, 0), (-1, -1), "MIDDLE"),
                ]
            )
        )

        return [table, Spacer(1, 8 if thermal else 12)]

    def _build_totals_section(self, thermal: bool = False):
        """Build totals section."""
        elements = []
        body_style = self.thermal_body_style if thermal else self.body_style
        total_style = self.thermal_total_style if thermal else self.total_style

        totals_data = [f"Subtotal: {self.money(self.sale.subtotal)}"]
        if self.sale.discount_amount > 0:
            totals_data.append(f"{self.discount_label}: -{self.money(self.sale.discount_amount)}")
        if self.sale.tax_amount > 0:
            totals_data.append(f"{self.tax_label}: {self.money(self.sale.tax_amount)}")

        for total in totals_data:
            elements.append(Paragraph(f"<para align='right'>{escape(total)}</para>", body_style))

        elements.append(HRFlowable(width="100%", thickness=2, color=colors.black))
        elements.append(
            Paragraph(
                f"<para align='right'><b>TOTAL: {self.money(self.sale.total)}</b></para>",
                total_style,
            )
        )
        elements.append(
            Paragraph(f"Metode Pembayaran: {escape(self.payment_method_display)}", body_style)
        )
        return elements

    def _build_receipt_footer(self, thermal: bool = False):
        """Build receipt footer with the store message and QR code."""
        body_style = self.thermal_body_style if thermal else self.body_style

        elements = self._separator(thermal)
        if self.config.receipt_footer:
            elements.append(
                Paragraph(
                    f"<para align='center'>{escape(self.config.receipt_footer)}</para>",
                    body_style,
                )
            )

        qr_code = self._generate_qr_code(size=0.8 * inch if thermal else 1 * inch)
        if qr_code:
            elements.append(Spacer(1, 8 if thermal else 12))
            elements.append(qr_code)

        return elements

    def _generate_qr_code(self, size=1 * inch) -> Optional[Image]:
        """Generate the QR code image for the receipt."""
        try:
            qr = qrcode.QRCode(
                version=1,
                error_correction=qrcode.constants.ERROR_CORRECT_L,
                box_size=3,
                border=2,
            )
            qr.add_data(self.qr_payload)
            qr.make(fit=True)

            qr_img = qr.make_image(fill_color="black", back_color="white")

            buffer = io.BytesIO()
            qr_img.save(buffer, format="PNG")
            buffer.seek(0)
        except (DataOverflowError, OSError, ValueError) as e:
            # A receipt without QR code is still a valid receipt
            logger.warning("QR code generation failed for sale %s: %s", self.sale.sale_number, e)
            return None

        img = Image(buffer, width=size, height=size)
        img.hAlign = "CENTER"
        return img

    # HTML

    def generate_html_receipt(self, format_type: str = FORMAT_STANDARD) -> str:
        """
        Generate HTML receipt for browser printing.

        Args:
            format_type: 'standard' or 'thermal'

        Returns:
            HTML string
        """
        template_name = f"sales/receipt_{format_type}.html"

        context = {
            "sale": self.sale,
            "config": self.config,
            "items": self.sale.items.all(),
            "current_time": timezone.now(),
            "discount_label": self.discount_label,
            "tax_label": self.tax_label,
            "payment_method_display": self.payment_method_display,
        }

        return render_to_string(template_name, context)


class ReceiptService:
    """
    Service class for receipt operations.

    Provides high-level interface for receipt generation.
    """

    @staticmethod
    def generate_receipt(
        sale: Sale,
        format_type: str = FORMAT_STANDARD,
        output_format: str = "pdf",
        config: Optional[StoreConfig] = None,
    ) -> bytes:
        """
        Generate receipt for a sale.

        Args:
            sale: Sale instance
            format_type: 'standard' or 'thermal'
            output_format: 'pdf' or 'html'
            config: Store configuration; loaded from the sale's store when omitted

        Returns:
            Receipt bytes (PDF) or UTF-8 encoded HTML
        """
        if format_type not in RECEIPT_FORMATS:
            raise ValueError(f"Unsupported receipt format: {format_type}")

        generator = ReceiptGenerator(sale, config)

        if output_format == "pdf":
            return generator.generate_pdf_receipt(format_type)
        elif output_format == "html":
            return generator.generate_html_receipt(format_type).encode("utf-8")
        else:
            raise ValueError(f"Unsupported output format: {output_format}")
