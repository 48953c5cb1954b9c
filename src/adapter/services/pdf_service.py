"""ReportLab PDF Generation Service Implementation

Implements PDF generation using ReportLab library.
"""

from io import BytesIO
from xml.sax.saxutils import escape

from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import getSampleStyleSheet, ParagraphStyle
from reportlab.lib.units import mm
from reportlab.platypus import (
    SimpleDocTemplate,
    Table,
    TableStyle,
    Paragraph,
    Spacer,
)

from src.app.services.pdf_service import PdfService
from src.domain.contract import Contract
from src.domain.reservation import calculate_total_price, rental_days
from src.domain.user import User
from src.domain.vehicle import Vehicle


class ReportLabPdfService(PdfService):
    """
    ReportLab implementation of PdfService

    Renders a one-page rental agreement: parties, vehicle, rental period,
    price summary, terms and signature lines.
    """

    def generate_rental_contract(
        self,
        contract: Contract,
        vehicle: Vehicle,
        customer: User,
        company_name: str = "Rental Marketplace",
        company_address: str = "1 Fleet Street, Motor City, MC 10001",
    ) -> bytes:
        buffer = BytesIO()
        doc = SimpleDocTemplate(
            buffer,
            pagesize=A4,
            rightMargin=20 * mm,
            leftMargin=20 * mm,
            topMargin=20 * mm,
            bottomMargin=20 * mm,
        )

        styles = getSampleStyleSheet()
        elements = []

        title_style = ParagraphStyle(
            "TitleStyle",
            parent=styles["Heading1"],
            fontSize=24,
            spaceAfter=10,
            textColor=colors.HexColor("#2C3E50"),
        )
        subtitle_style = ParagraphStyle(
            "SubtitleStyle",
            parent=styles["Heading2"],
            fontSize=14,
            textColor=colors.HexColor("#2980B9"),
            spaceAfter=20,
        )
        header_style = ParagraphStyle(
            "HeaderStyle",
            parent=styles["Normal"],
            fontSize=10,
            textColor=colors.HexColor("#7F8C8D"),
        )
        normal_style = ParagraphStyle(
            "NormalStyle",
            parent=styles["Normal"],
            fontSize=10,
        )
        bold_style = ParagraphStyle(
            "BoldStyle",
            parent=styles["Normal"],
            fontSize=10,
            fontName="Helvetica-Bold",
        )

        elements.append(Paragraph(escape(company_name), title_style))
        elements.append(Paragraph(escape(company_address), header_style))
        elements.append(Spacer(1, 10 * mm))
        elements.append(Paragraph("RENTAL AGREEMENT", subtitle_style))

        contract_info = [
            ["Contract Number:", f"RC-{contract.id:06d}"],
            ["Reservation:", str(contract.reservation_id)],
            ["Status:", contract.status.value.upper()],
            ["Issued:", contract.created_at.strftime("%Y-%m-%d %H:%M:%S UTC")],
        ]
        elements.append(self._info_table(contract_info))
        elements.append(Spacer(1, 8 * mm))

        elements.append(Paragraph("Renter:", bold_style))
        elements.append(Paragraph(escape(customer.name), normal_style))
        elements.append(Paragraph(escape(customer.email), normal_style))
        address = customer.profile.get("address") if customer.profile else None
        if address:
            elements.append(Paragraph(escape(address), normal_style))
        elements.append(Spacer(1, 8 * mm))

        days = rental_days(contract.start_date, contract.end_date)
        total = calculate_total_price(vehicle.price_per_day, contract.start_date, contract.end_date)

        rental_data = [
            ["Vehicle", "Plate", "From", "To", "Days", "Daily Rate"],
            [
                f"{vehicle.brand} {vehicle.model} ({vehicle.year})",
                vehicle.plate_number,
                contract.start_date.strftime("%Y-%m-%d %H:%M"),
                contract.end_date.strftime("%Y-%m-%d %H:%M"),
                str(days),
                f"{vehicle.price_per_day:,.2f}",
            ],
        ]
        rental_table = Table(
            rental_data,
            colWidths=[45 * mm, 25 * mm, 30 * mm, 30 * mm, 15 * mm, 25 * mm],
        )
        rental_table.setStyle(
            TableStyle(
                [
                    ("BACKGROUND", (0, 0), (-1, 0), colors.HexColor("#2C3E50")),
                    ("TEXTCOLOR", (0, 0), (-1, 0), colors.white),
                    ("FONTNAME", (0, 0), (-1, 0), "Helvetica-Bold"),
                    ("FONTSIZE", (0, 0), (-1, 0), 10),
                    ("ALIGN", (0, 0), (-1, 0), "CENTER"),
                    ("FONTSIZE", (0, 1), (-1, -1), 9),
                    ("ALIGN", (4, 1), (-1, -1), "RIGHT"),
                    ("GRID", (0, 0), (-1, -1), 0.5, colors.HexColor("#BDC3C7")),
                    ("BOTTOMPADDING", (0, 0), (-1, -1), 6),
                    ("TOPPADDING", (0, 0), (-1, -1), 6),
                ]
            )
        )
        elements.append(rental_table)
        elements.append(Spacer(1, 5 * mm))

        total_table = Table(
            [["", "", "", "Total:", f"{total:,.2f}"]],
            colWidths=[45 * mm, 25 * mm, 30 * mm, 30 * mm, 40 * mm],
        )
        total_table.setStyle(
            TableStyle(
                [
                    ("FONTNAME", (3, 0), (-1, -1), "Helvetica-Bold"),
                    ("FONTSIZE", (0, 0), (-1, -1), 11),
                    ("ALIGN", (3, 0), (-1, -1), "RIGHT"),
                    ("LINEABOVE", (3, 0), (-1, 0), 1.5, colors.HexColor("#2C3E50")),
                    ("TOPPADDING", (0, 0), (-1, -1), 8),
                ]
            )
        )
        elements.append(total_table)
        elements.append(Spacer(1, 10 * mm))

        if contract.terms:
            elements.append(Paragraph("Terms:", bold_style))
            elements.append(Paragraph(escape(contract.terms), normal_style))
            elements.append(Spacer(1, 15 * mm))

        signatures = Table(
            [["______________________", "______________________"],
             ["Agency", "Renter"]],
            colWidths=[85 * mm, 85 * mm],
        )
        signatures.setStyle(
            TableStyle(
                [
                    ("ALIGN", (0, 0), (-1, -1), "CENTER"),
                    ("FONTSIZE", (0, 0), (-1, -1), 9),
                    ("TEXTCOLOR", (0, 1), (-1, 1), colors.HexColor("#7F8C8D")),
                ]
            )
        )
        elements.append(signatures)

        doc.build(elements)
        pdf_bytes = buffer.getvalue()
        buffer.close()

        return pdf_bytes

    @staticmethod
    def _info_table(rows):
        table = Table(rows, colWidths=[40 * mm, 100 * mm])
        table.setStyle(
            TableStyle(
                [
                    ("FONTNAME", (0, 0), (0, -1), "Helvetica-Bold"),
                    ("FONTSIZE", (0, 0), (-1, -1), 10),
                    ("TEXTCOLOR", (0, 0), (0, -1), colors.HexColor("#7F8C8D")),
                    ("VALIGN", (0, 0), (-1, -1), "TOP"),
                    ("BOTTOMPADDING", (0, 0), (-1, -1), 4),
                ]
            )
        )
        return table
