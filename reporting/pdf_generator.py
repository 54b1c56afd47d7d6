"""
Appraisal Report PDF

Renders an appraisal report, its subject property and its adjusted
comparables as a printable PDF. Uses ReportLab for deterministic PDF
generation (same input = same layout).

Output Structure:
1. Cover block (report reference, status, dates)
2. Subject Property
3. Comparable Sales Adjustment Grid
4. Reconciliation (indicated value range and concluded value)
5. Certification note
"""

from dataclasses import dataclass
from io import BytesIO
from pathlib import Path
from typing import List, Optional, Sequence
from xml.sax.saxutils import escape

from reportlab.lib import colors
from reportlab.lib.enums import TA_LEFT
from reportlab.lib.pagesizes import LETTER
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.lib.units import mm
from reportlab.pdfgen import canvas
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

from core.models import AppraisalReport, Comparable, Property
from utils.formatting import format_currency


# Adjustment categories in grid order, with row labels
GRID_CATEGORIES = (
    ("buildingSize", "Building size"),
    ("bedrooms", "Bedrooms"),
    ("bathrooms", "Bathrooms"),
    ("age", "Age"),
    ("lotSize", "Lot size"),
    ("parking", "Parking"),
)

# Comparables per grid table before wrapping onto a new table
GRID_COLUMNS = 3


# =============================================================================
# Color Palette
# =============================================================================

class Palette:
    """Print-friendly palette: charcoal text on white, navy accent."""
    CHARCOAL = colors.Color(0.2, 0.2, 0.22)
    SLATE = colors.Color(0.35, 0.38, 0.42)
    GRAY = colors.Color(0.5, 0.5, 0.5)
    LIGHT_GRAY = colors.Color(0.85, 0.85, 0.85)
    PALE_GRAY = colors.Color(0.95, 0.95, 0.95)
    WHITE = colors.white
    ACCENT = colors.Color(0.15, 0.25, 0.4)


# =============================================================================
# Style Configuration
# =============================================================================

def get_report_styles():
    """Paragraph styles for the appraisal report."""
    styles = getSampleStyleSheet()

    styles.add(ParagraphStyle(
        name='ReportTitle',
        parent=styles['Normal'],
        fontSize=20,
        leading=26,
        textColor=Palette.CHARCOAL,
        alignment=TA_LEFT,
        fontName='Helvetica-Bold',
        spaceAfter=4*mm,
    ))

    styles.add(ParagraphStyle(
        name='ReportMeta',
        parent=styles['Normal'],
        fontSize=9.5,
        leading=13,
        textColor=Palette.SLATE,
        fontName='Helvetica',
    ))

    styles.add(ParagraphStyle(
        name='SectionTitle',
        parent=styles['Normal'],
        fontSize=13,
        leading=17,
        textColor=Palette.ACCENT,
        fontName='Helvetica-Bold',
        spaceBefore=16,
        spaceAfter=8,
    ))

    styles.add(ParagraphStyle(
        name='Body',
        parent=styles['Normal'],
        fontSize=9.5,
        leading=13.5,
        textColor=Palette.CHARCOAL,
        fontName='Helvetica',
    ))

    styles.add(ParagraphStyle(
        name='SmallPrint',
        parent=styles['Normal'],
        fontSize=7.5,
        leading=10,
        textColor=Palette.GRAY,
        fontName='Helvetica',
    ))

    return styles


def _display(value, suffix: str = "") -> str:
    if value is None or value == "":
        return "-"
    return f"{value}{suffix}"


def _money(value) -> str:
    return format_currency(value) if value is not None else "-"


@dataclass
class ValueIndication:
    """Range of adjusted comparable prices and the report's conclusion."""
    low: Optional[int]
    high: Optional[int]
    concluded: Optional[int]

    @classmethod
    def from_comparables(
        cls,
        report: AppraisalReport,
        comparables: Sequence[Comparable],
    ) -> "ValueIndication":
        prices = [c.adjusted_price for c in comparables if c.adjusted_price is not None]
        return cls(
            low=min(prices) if prices else None,
            high=max(prices) if prices else None,
            concluded=report.value,
        )


# =============================================================================
# Report Generator Class
# =============================================================================

class AppraisalReportPDF:
    """
    Generates appraisal report PDFs.

    Usage:
        generator = AppraisalReportPDF()
        pdf_bytes = generator.generate_to_buffer(report, subject, comparables)
    """

    PAGE_WIDTH, PAGE_HEIGHT = LETTER
    MARGIN_LEFT = 18*mm
    MARGIN_RIGHT = 18*mm
    MARGIN_TOP = 18*mm
    MARGIN_BOTTOM = 20*mm

    def __init__(self, brand: str = "TerraFusionPro"):
        self.brand = brand
        self.styles = get_report_styles()

    def generate_to_buffer(
        self,
        report: AppraisalReport,
        subject: Property,
        comparables: Sequence[Comparable],
    ) -> bytes:
        """Generate the PDF and return it as bytes."""
        buffer = BytesIO()
        self._build_document(report, subject, list(comparables), buffer)
        return buffer.getvalue()

    def generate_to_file(
        self,
        report: AppraisalReport,
        subject: Property,
        comparables: Sequence[Comparable],
        output_dir: Path,
    ) -> Path:
        """Generate the PDF into output_dir and return its path."""
        output_dir.mkdir(parents=True, exist_ok=True)
        output_path = output_dir / f"appraisal-report-{report.id}.pdf"
        output_path.write_bytes(self.generate_to_buffer(report, subject, comparables))
        return output_path

    def _build_document(
        self,
        report: AppraisalReport,
        subject: Property,
        comparables: List[Comparable],
        buffer: BytesIO,
    ):
        doc = SimpleDocTemplate(
            buffer,
            pagesize=LETTER,
            leftMargin=self.MARGIN_LEFT,
            rightMargin=self.MARGIN_RIGHT,
            topMargin=self.MARGIN_TOP,
            bottomMargin=self.MARGIN_BOTTOM,
            title=f"Appraisal Report {report.id}",
            author=self.brand,
            subject=subject.address,
            invariant=1,
        )

        story = []
        story.extend(self._build_cover(report, subject))
        story.extend(self._build_subject(subject))
        story.extend(self._build_adjustment_grid(comparables))
        story.extend(self._build_reconciliation(report, comparables))
        story.extend(self._build_certification(report))

        doc.build(story, onFirstPage=self._draw_page_frame, onLaterPages=self._draw_page_frame)

    def _draw_page_frame(self, canvas_obj: canvas.Canvas, doc):
        """Footer: brand left, page number right."""
        canvas_obj.saveState()
        canvas_obj.setFont('Helvetica', 7)
        canvas_obj.setFillColor(Palette.GRAY)
        canvas_obj.drawString(self.MARGIN_LEFT, self.MARGIN_BOTTOM - 10*mm, self.brand.upper())
        canvas_obj.drawRightString(
            self.PAGE_WIDTH - self.MARGIN_RIGHT,
            self.MARGIN_BOTTOM - 10*mm,
            f"{doc.page}",
        )
        canvas_obj.restoreState()

    # =========================================================================
    # Sections
    # =========================================================================

    def _build_cover(self, report: AppraisalReport, subject: Property) -> list:
        elements = [
            Paragraph("Residential Appraisal Report", self.styles['ReportTitle']),
            Paragraph(escape(f"{subject.address}, {subject.city}, {subject.state} {subject.zip_code}"),
                      self.styles['ReportMeta']),
            Paragraph(f"Report #{report.id}, status: {report.status.value.replace('_', ' ').title()}",
                      self.styles['ReportMeta']),
        ]
        if report.effective_date:
            elements.append(Paragraph(
                f"Effective date: {report.effective_date.date().isoformat()}",
                self.styles['ReportMeta'],
            ))
        if report.purpose:
            elements.append(Paragraph(escape(f"Purpose: {report.purpose}"), self.styles['ReportMeta']))
        elements.append(Spacer(1, 6*mm))
        return elements

    def _build_subject(self, subject: Property) -> list:
        elements = [Paragraph("Subject Property", self.styles['SectionTitle'])]

        rows = [
            ["Property type", subject.property_type.value.replace("_", " ").title()],
            ["Year built", _display(subject.year_built)],
            ["Building size", _display(subject.building_size, " sq ft")],
            ["Lot size", _display(subject.lot_size)],
            ["Bedrooms", _display(subject.bedrooms)],
            ["Bathrooms", _display(subject.bathrooms)],
            ["Parking spaces", _display(subject.parking_spaces)],
        ]
        table = Table(rows, colWidths=[45*mm, 70*mm])
        table.setStyle(TableStyle([
            ('FONTNAME', (0, 0), (0, -1), 'Helvetica-Bold'),
            ('FONTNAME', (1, 0), (1, -1), 'Helvetica'),
            ('FONTSIZE', (0, 0), (-1, -1), 9),
            ('TEXTCOLOR', (0, 0), (-1, -1), Palette.CHARCOAL),
            ('LINEBELOW', (0, 0), (-1, -1), 0.5, Palette.LIGHT_GRAY),
            ('TOPPADDING', (0, 0), (-1, -1), 2*mm),
            ('BOTTOMPADDING', (0, 0), (-1, -1), 2*mm),
        ]))
        elements.append(table)

        if subject.description:
            elements.append(Spacer(1, 4*mm))
            elements.append(Paragraph(escape(subject.description), self.styles['Body']))
        return elements

    def _build_adjustment_grid(self, comparables: List[Comparable]) -> list:
        elements = [Paragraph("Comparable Sales Adjustment Grid", self.styles['SectionTitle'])]

        if not comparables:
            elements.append(Paragraph("No comparable sales have been added to this report.",
                                      self.styles['Body']))
            return elements

        for start in range(0, len(comparables), GRID_COLUMNS):
            chunk = comparables[start:start + GRID_COLUMNS]
            elements.append(self._grid_table(chunk, start))
            elements.append(Spacer(1, 5*mm))
        return elements

    def _grid_table(self, chunk: List[Comparable], offset: int) -> Table:
        header = [""] + [f"Comparable {offset + i + 1}" for i in range(len(chunk))]
        rows = [
            header,
            ["Address"] + [c.address[:28] for c in chunk],
            ["Sale price"] + [_money(c.sale_price) for c in chunk],
            ["Sale date"] + [_display(c.sale_date) for c in chunk],
        ]
        for key, label in GRID_CATEGORIES:
            rows.append([label] + [
                _money(c.adjustments[key]) if key in c.adjustments else "-" for c in chunk
            ])
        rows.append(["Net adjustment"] + [_money(c.total_adjustment) for c in chunk])
        rows.append(["Adjusted price"] + [_money(c.adjusted_price) for c in chunk])

        label_width = 35*mm
        column_width = (self.PAGE_WIDTH - self.MARGIN_LEFT - self.MARGIN_RIGHT - label_width) / GRID_COLUMNS
        table = Table(rows, colWidths=[label_width] + [column_width] * len(chunk))
        table.setStyle(TableStyle([
            ('FONTNAME', (0, 0), (-1, 0), 'Helvetica-Bold'),
            ('FONTNAME', (0, 1), (0, -1), 'Helvetica-Bold'),
            ('FONTNAME', (1, 1), (-1, -1), 'Helvetica'),
            ('FONTNAME', (0, -1), (-1, -1), 'Helvetica-Bold'),
            ('FONTSIZE', (0, 0), (-1, -1), 8.5),
            ('BACKGROUND', (0, 0), (-1, 0), Palette.CHARCOAL),
            ('TEXTCOLOR', (0, 0), (-1, 0), Palette.WHITE),
            ('TEXTCOLOR', (0, 1), (-1, -1), Palette.CHARCOAL),
            ('ALIGN', (1, 0), (-1, -1), 'RIGHT'),
            ('VALIGN', (0, 0), (-1, -1), 'MIDDLE'),
            ('GRID', (0, 0), (-1, -1), 0.5, Palette.LIGHT_GRAY),
            ('ROWBACKGROUNDS', (0, 1), (-1, -1), [Palette.WHITE, Palette.PALE_GRAY]),
            ('TOPPADDING', (0, 0), (-1, -1), 1.8*mm),
            ('BOTTOMPADDING', (0, 0), (-1, -1), 1.8*mm),
        ]))
        return table

    def _build_reconciliation(self, report: AppraisalReport, comparables: List[Comparable]) -> list:
        indication = ValueIndication.from_comparables(report, comparables)
        elements = [Paragraph("Reconciliation", self.styles['SectionTitle'])]

        if indication.low is None:
            range_text = "No adjusted comparable prices are available."
        else:
            range_text = (
                f"Adjusted comparable prices indicate a value range of "
                f"{_money(indication.low)} to {_money(indication.high)}."
            )
        elements.append(Paragraph(range_text, self.styles['Body']))
        elements.append(Spacer(1, 3*mm))
        elements.append(Paragraph(
            f"Concluded market value: <b>{_money(indication.concluded)}</b>",
            self.styles['Body'],
        ))
        return elements

    def _build_certification(self, report: AppraisalReport) -> list:
        notes = [
            "Adjustments are applied to each comparable's sale price for differences from "
            "the subject property; a positive adjustment indicates a feature superior in "
            "the subject.",
        ]
        if report.finalized_at:
            notes.append(f"Report finalized {report.finalized_at.date().isoformat()}.")
        elif report.approved_at:
            notes.append(f"Report approved {report.approved_at.date().isoformat()}; not yet finalized.")
        else:
            notes.append("This report has not been approved and is subject to change.")

        elements = [Spacer(1, 10*mm)]
        elements.extend(Paragraph(note, self.styles['SmallPrint']) for note in notes)
        return elements
