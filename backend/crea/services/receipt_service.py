"""
Receipt Service - PDF payment receipts for memberships and donations.

Receipts are written to <UPLOAD_DIR>/receipts/ and regenerated on demand when
the file has gone missing.
"""

from datetime import datetime
from pathlib import Path
from typing import List, Tuple
import io

from reportlab.lib import colors
from reportlab.lib.enums import TA_CENTER
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import getSampleStyleSheet, ParagraphStyle
from reportlab.lib.units import cm, inch
from reportlab.platypus import SimpleDocTemplate, Paragraph, Spacer, Table, TableStyle

from crea.core.logging_config import logger
from crea.models.donation import Donation
from crea.models.membership import Membership, MembershipPlan
from crea.services.storage_service import storage_service, LocalStorageService

RECEIPTS_SUBDIR = "receipts"
ASSOCIATION_NAME = "Central Railway Engineers Association"


def _fmt_date(value: datetime) -> str:
    return value.strftime("%d %b %Y") if value else "-"


def _fmt_amount(value) -> str:
    return f"Rs. {int(value or 0):,}"


class ReceiptService:
    """Build and store PDF receipts"""

    def __init__(self, storage: LocalStorageService = storage_service):
        self.storage = storage

    @staticmethod
    def membership_receipt_name(membership_id: str) -> str:
        return f"membership-receipt-{membership_id}.pdf"

    @staticmethod
    def donation_receipt_name(donation_id: str) -> str:
        return f"donation-receipt-{donation_id}.pdf"

    def _build_pdf(self, title: str, rows: List[Tuple[str, str]], footer: str) -> bytes:
        buffer = io.BytesIO()
        doc = SimpleDocTemplate(
            buffer,
            pagesize=A4,
            rightMargin=2*cm,
            leftMargin=2*cm,
            topMargin=2*cm,
            bottomMargin=2*cm,
            title=title,
        )

        styles = getSampleStyleSheet()
        header_style = ParagraphStyle(
            'ReceiptHeader',
            parent=styles['Heading1'],
            fontSize=20,
            textColor=colors.HexColor('#1e3a8a'),
            alignment=TA_CENTER,
            spaceAfter=6
        )
        title_style = ParagraphStyle(
            'ReceiptTitle',
            parent=styles['Heading2'],
            fontSize=14,
            textColor=colors.HexColor('#4a5568'),
            alignment=TA_CENTER,
            spaceAfter=20
        )
        small_style = ParagraphStyle(
            'ReceiptSmall',
            parent=styles['Normal'],
            fontSize=9,
            textColor=colors.HexColor('#718096'),
            alignment=TA_CENTER,
        )

        table = Table([["Field", "Details"], *rows], colWidths=[2.2*inch, 4*inch])
        table.setStyle(TableStyle([
            ('BACKGROUND', (0, 0), (-1, 0), colors.HexColor('#e2e8f0')),
            ('FONTNAME', (0, 0), (-1, 0), 'Helvetica-Bold'),
            ('FONTNAME', (0, 1), (-1, -1), 'Helvetica'),
            ('FONTSIZE', (0, 0), (-1, -1), 10),
            ('GRID', (0, 0), (-1, -1), 0.5, colors.HexColor('#cbd5e0')),
            ('VALIGN', (0, 0), (-1, -1), 'MIDDLE'),
            ('TOPPADDING', (0, 0), (-1, -1), 6),
            ('BOTTOMPADDING', (0, 0), (-1, -1), 6),
        ]))

        content = [
            Paragraph("CREA", header_style),
            Paragraph(ASSOCIATION_NAME, small_style),
            Spacer(1, 12),
            Paragraph(title, title_style),
            table,
            Spacer(1, 30),
            Paragraph(footer, small_style),
            Paragraph(f"Generated on {_fmt_date(datetime.utcnow())}", small_style),
        ]
        doc.build(content)
        return buffer.getvalue()

    def build_membership_receipt(self, membership: Membership) -> bytes:
        plan = membership.type.value if membership.type else MembershipPlan.ORDINARY.value
        rows = [
            ("Receipt No.", membership.membership_id),
            ("Name", membership.name),
            ("Email", membership.email),
            ("Designation", membership.designation),
            ("Division / Department", f"{membership.division} / {membership.department}"),
            ("Membership Type", plan.title()),
            ("Amount Paid", _fmt_amount(membership.payment_amount)),
            ("Payment Reference", membership.payment_reference or "-"),
            ("Payment Date", _fmt_date(membership.payment_date)),
            ("Valid From", _fmt_date(membership.valid_from)),
            ("Valid Until", "Lifetime" if membership.type == MembershipPlan.LIFETIME else _fmt_date(membership.valid_until)),
        ]
        return self._build_pdf(
            "Membership Payment Receipt",
            rows,
            "This is a computer generated receipt and does not require a signature.",
        )

    def build_donation_receipt(self, donation: Donation) -> bytes:
        rows = [
            ("Receipt No.", str(donation.id)),
            ("Donor", "Anonymous" if donation.is_anonymous else donation.full_name),
            ("Email", donation.email),
            ("Purpose", donation.purpose.value.title() if donation.purpose else "General"),
            ("Amount", _fmt_amount(donation.amount)),
            ("Payment Reference", donation.payment_reference or donation.razorpay_payment_id or "-"),
            ("Payment Date", _fmt_date(donation.payment_date)),
        ]
        return self._build_pdf(
            "Donation Receipt",
            rows,
            "Thank you for supporting the association.",
        )

    async def write_membership_receipt(self, membership: Membership) -> Tuple[Path, bytes]:
        content = self.build_membership_receipt(membership)
        stored = await self.storage.save_bytes(
            content,
            RECEIPTS_SUBDIR,
            self.membership_receipt_name(membership.membership_id),
            mime_type="application/pdf",
        )
        logger.info(f"[Receipt] Membership receipt written for {membership.membership_id}")
        return stored.path, content

    async def write_donation_receipt(self, donation: Donation) -> Tuple[Path, bytes]:
        content = self.build_donation_receipt(donation)
        stored = await self.storage.save_bytes(
            content,
            RECEIPTS_SUBDIR,
            self.donation_receipt_name(str(donation.id)),
            mime_type="application/pdf",
        )
        logger.info(f"[Receipt] Donation receipt written for {donation.id}")
        return stored.path, content

    async def membership_receipt_path(self, membership: Membership) -> Path:
        """Path of the stored receipt, regenerating it when missing"""
        path = self.storage.root / RECEIPTS_SUBDIR / self.membership_receipt_name(membership.membership_id)
        if not path.exists():
            path, _ = await self.write_membership_receipt(membership)
        return path

    async def donation_receipt_path(self, donation: Donation) -> Path:
        path = self.storage.root / RECEIPTS_SUBDIR / self.donation_receipt_name(str(donation.id))
        if not path.exists():
            path, _ = await self.write_donation_receipt(donation)
        return path


receipt_service = ReceiptService()
