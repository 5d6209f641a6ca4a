"""Point allocation report generator for PDF output."""

from dataclasses import dataclass
from io import BytesIO
from pathlib import Path
from typing import List, Optional

from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.pdfgen import canvas as pdf_canvas
from reportlab.platypus import Table, TableStyle

from ..engine.capacity import summarize_capacity
from ..engine.classifier import count_demand
from ..models.card import CardInstance
from ..models.generation import GenerationResult
from ..models.point import ALLOCATABLE_SIGNAL_TYPES
from ..models.project import ProjectParams

SPARE_LABEL = "SPARE"


@dataclass
class ReportConfig:
    """Configuration for the allocation report."""
    title: str = "POINT ALLOCATION REPORT"
    params: Optional[ProjectParams] = None


class AllocationReportGenerator:
    """Generates PDF reports of point-to-card allocations."""

    def __init__(self, config: Optional[ReportConfig] = None):
        """Initialize the report generator."""
        self.config = config or ReportConfig()

    def generate_pdf(self, result: GenerationResult, output_path: str):
        """
        Generate PDF report from a generation result.

        Args:
            result: GenerationResult from the schema generator
            output_path: Output PDF file path
        """
        Path(output_path).parent.mkdir(parents=True, exist_ok=True)
        c = pdf_canvas.Canvas(output_path, pagesize=A4)
        self._draw(c, result)
        c.save()

    def generate_bytes(self, result: GenerationResult) -> bytes:
        """Generate the PDF report in memory."""
        buffer = BytesIO()
        c = pdf_canvas.Canvas(buffer, pagesize=A4)
        self._draw(c, result)
        c.save()
        return buffer.getvalue()

    def _draw(self, c: pdf_canvas.Canvas, result: GenerationResult):
        width, height = A4

        y_pos = self._draw_header(c, width, height)
        y_pos = self._draw_summary(c, result, y_pos, width)
        y_pos = self._draw_card_table(c, result.cards, y_pos, width, height)

        if result.warnings:
            y_pos = self._draw_warnings(c, result, y_pos, height)

        c.showPage()
        self._draw_channel_assignments(c, result.cards, height - 50, width, height)
        self._draw_footer(c, width)

    def _draw_header(self, c: pdf_canvas.Canvas, width: float, height: float) -> float:
        """Draw report header."""
        y_pos = height - 40

        c.setFont("Helvetica-Bold", 18)
        c.drawCentredString(width/2, y_pos, self.config.title)
        y_pos -= 25

        params = self.config.params
        c.setFont("Helvetica", 11)
        if params and params.site_name:
            c.drawCentredString(width/2, y_pos, f"Site: {params.site_name}")
            y_pos -= 15
        if params and params.cabinet_name:
            c.drawCentredString(width/2, y_pos, f"Cabinet: {params.cabinet_name}")
            y_pos -= 15
        y_pos -= 5

        c.setStrokeColor(colors.black)
        c.setLineWidth(0.5)
        c.line(50, y_pos, width - 50, y_pos)
        y_pos -= 20

        return y_pos

    def _draw_summary(
        self,
        c: pdf_canvas.Canvas,
        result: GenerationResult,
        y_pos: float,
        width: float
    ) -> float:
        """Draw demand against capacity per signal type."""
        c.setFont("Helvetica-Bold", 14)
        c.drawString(50, y_pos, "CAPACITY SUMMARY")
        y_pos -= 25

        summary = summarize_capacity(
            count_demand(result.points_by_type),
            [card.spec for card in result.cards]
        )
        data = [["Type", "Points", "Channels", "Spare"]]
        for signal_type, (demanded, available) in summary.items():
            data.append([signal_type.value, str(demanded), str(available), str(available - demanded)])

        table = Table(data, colWidths=[60, 70, 70, 70])
        table.setStyle(TableStyle([
            ('BACKGROUND', (0, 0), (-1, 0), colors.Color(0.2, 0.2, 0.3)),
            ('TEXTCOLOR', (0, 0), (-1, 0), colors.whitesmoke),
            ('ALIGN', (0, 0), (-1, -1), 'CENTER'),
            ('FONTNAME', (0, 0), (-1, 0), 'Helvetica-Bold'),
            ('FONTSIZE', (0, 0), (-1, -1), 9),
            ('TOPPADDING', (0, 0), (-1, -1), 6),
            ('BOTTOMPADDING', (0, 0), (-1, -1), 6),
            ('GRID', (0, 0), (-1, -1), 0.5, colors.black),
        ]))

        table_width, table_height = table.wrap(width, 200)
        table.drawOn(c, 50, y_pos - table_height)

        return y_pos - table_height - 30

    def _draw_card_table(
        self,
        c: pdf_canvas.Canvas,
        cards: List[CardInstance],
        y_pos: float,
        width: float,
        height: float
    ) -> float:
        """Draw one row per card instance, continuing on new pages as needed."""
        if y_pos < 150:
            c.showPage()
            y_pos = height - 50

        c.setFont("Helvetica-Bold", 12)
        c.drawString(50, y_pos, "CARDS")
        y_pos -= 20

        data = [["#", "Card", "Category", "DI", "AI", "DO", "AO", "Spare", "Util %"]]
        for card in cards:
            row = [str(card.position), card.spec.display_name, card.spec.category.value]
            for signal_type in ALLOCATABLE_SIGNAL_TYPES:
                row.append(f"{len(card.points(signal_type))}/{card.spec.capacity.for_type(signal_type)}")
            row.append(str(card.spare_channels))
            row.append(f"{card.utilization_percent:.0f}%")
            data.append(row)

        table = Table(data, colWidths=[25, 120, 65, 40, 40, 40, 40, 40, 45], repeatRows=1)
        table.setStyle(TableStyle([
            ('BACKGROUND', (0, 0), (-1, 0), colors.Color(0.7, 0.7, 0.8)),
            ('ALIGN', (0, 0), (-1, -1), 'CENTER'),
            ('FONTNAME', (0, 0), (-1, 0), 'Helvetica-Bold'),
            ('FONTSIZE', (0, 0), (-1, -1), 8),
            ('TOPPADDING', (0, 0), (-1, -1), 4),
            ('BOTTOMPADDING', (0, 0), (-1, -1), 4),
            ('GRID', (0, 0), (-1, -1), 0.5, colors.black),
        ]))

        pending = [table]
        page_top = False
        while pending:
            part = pending.pop(0)
            table_width, table_height = part.wrap(width, height)
            if y_pos - table_height < 50:
                pieces = part.split(width, y_pos - 50)
                if len(pieces) >= 2:
                    part = pieces[0]
                    pending = list(pieces[1:]) + pending
                    table_width, table_height = part.wrap(width, height)
                elif not page_top:
                    c.showPage()
                    y_pos = height - 50
                    c.setFont("Helvetica-Bold", 12)
                    c.drawString(50, y_pos, "CARDS (continued)")
                    y_pos -= 20
                    page_top = True
                    pending.insert(0, part)
                    continue
            part.drawOn(c, 50, y_pos - table_height)
            y_pos = y_pos - table_height - 10
            page_top = False

        return y_pos - 15

    def _draw_warnings(
        self,
        c: pdf_canvas.Canvas,
        result: GenerationResult,
        y_pos: float,
        height: float
    ) -> float:
        """Draw generation warnings."""
        if y_pos < 150:
            c.showPage()
            y_pos = height - 50

        c.setFont("Helvetica-Bold", 12)
        c.drawString(50, y_pos, "WARNINGS")
        y_pos -= 20

        c.setFont("Helvetica", 9)
        for warning in result.warnings:
            c.drawString(60, y_pos, f"• {warning.message}")
            y_pos -= 14

        return y_pos - 10

    def _draw_channel_assignments(
        self,
        c: pdf_canvas.Canvas,
        cards: List[CardInstance],
        y_pos: float,
        width: float,
        height: float
    ) -> float:
        """Draw the point of every channel of every card."""
        c.setFont("Helvetica-Bold", 12)
        c.drawString(50, y_pos, "Channel Assignments")
        y_pos -= 20

        for card in cards:
            if card.total_channels == 0:
                continue

            if y_pos < 200:
                c.showPage()
                y_pos = height - 50
                c.setFont("Helvetica-Bold", 12)
                c.drawString(50, y_pos, "Channel Assignments (continued)")
                y_pos -= 20

            c.setFont("Helvetica-Bold", 10)
            c.drawString(50, y_pos, f"Card #{card.position}: {card.spec.display_name} ({card.card_id})")
            y_pos -= 15

            data = [["Type", "CH", "Point", "Status"]]
            for signal_type in ALLOCATABLE_SIGNAL_TYPES:
                points = card.points(signal_type)
                for ch in range(1, card.spec.capacity.for_type(signal_type) + 1):
                    if ch <= len(points):
                        data.append([signal_type.value, str(ch), points[ch - 1].display_name, "USED"])
                    else:
                        data.append([signal_type.value, str(ch), SPARE_LABEL, SPARE_LABEL])

            table = Table(data, colWidths=[40, 30, 250, 60])
            table.setStyle(TableStyle([
                ('BACKGROUND', (0, 0), (-1, 0), colors.Color(0.7, 0.75, 0.85)),
                ('ALIGN', (0, 0), (-1, -1), 'LEFT'),
                ('ALIGN', (0, 0), (1, -1), 'CENTER'),
                ('ALIGN', (-1, 0), (-1, -1), 'CENTER'),
                ('FONTNAME', (0, 0), (-1, 0), 'Helvetica-Bold'),
                ('FONTSIZE', (0, 0), (-1, -1), 7),
                ('TOPPADDING', (0, 0), (-1, -1), 3),
                ('BOTTOMPADDING', (0, 0), (-1, -1), 3),
                ('GRID', (0, 0), (-1, -1), 0.3, colors.gray),
                ('ROWBACKGROUNDS', (0, 1), (-1, -1), [colors.white, colors.Color(0.95, 0.95, 0.95)]),
            ]))

            for i, row in enumerate(data[1:], start=1):
                if row[-1] == SPARE_LABEL:
                    table.setStyle(TableStyle([
                        ('BACKGROUND', (0, i), (-1, i), colors.Color(1.0, 0.95, 0.85)),
                        ('TEXTCOLOR', (2, i), (2, i), colors.Color(0.8, 0.5, 0.0)),
                    ]))

            table_width, table_height = table.wrap(width - 100, 500)
            if y_pos - table_height < 50:
                c.showPage()
                y_pos = height - 50
            table.drawOn(c, 50, y_pos - table_height)

            y_pos = y_pos - table_height - 15

        return y_pos - 10

    def _draw_footer(self, c: pdf_canvas.Canvas, width: float):
        """Draw report footer."""
        c.setFont("Helvetica", 8)
        c.setFillColor(colors.Color(0.5, 0.5, 0.5))

        params = self.config.params
        footer_y = 30
        if params:
            c.drawString(50, footer_y, f"Edition: {params.edition_date}")
            if params.revision_index:
                c.drawRightString(width - 50, footer_y, f"Rev: {params.revision_index}")
            if params.author:
                c.drawString(50, footer_y - 12, f"Prepared by: {params.author}")


def generate_allocation_report(
    result: GenerationResult,
    output_path: str,
    config: Optional[ReportConfig] = None
):
    """
    Convenience function to generate the allocation report.

    Args:
        result: GenerationResult from the schema generator
        output_path: Output PDF file path
        config: Optional report configuration
    """
    generator = AllocationReportGenerator(config)
    generator.generate_pdf(result, output_path)
