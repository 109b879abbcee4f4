"""
PDF Report Generator for Groundwork Estimator

Generates a priced estimate PDF from one calculation result.
"""

import math
from io import BytesIO
from datetime import datetime
from typing import List
from xml.sax.saxutils import escape

from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import getSampleStyleSheet, ParagraphStyle
from reportlab.lib.units import inch
from reportlab.platypus import (
    SimpleDocTemplate, Paragraph, Spacer, Table, TableStyle, HRFlowable
)
from reportlab.lib.enums import TA_CENTER, TA_LEFT

from estimator.cost_estimator import ProjectEstimate, format_price
from estimator.models import MaterialUsage, TaskEntry


def _format_amount(value) -> str:
    if isinstance(value, str):
        return value
    if isinstance(value, float):
        return f"{value:,.2f}".rstrip("0").rstrip(".")
    return str(value)


def _format_hours(hours: float) -> str:
    if hours is None or not math.isfinite(hours):
        return "N/A"
    return f"{hours:.2f} h"


class PDFReportGenerator:
    """Generates PDF reports for groundwork estimates."""

    # Brand colors
    PRIMARY_COLOR = colors.HexColor('#B45309')  # Amber
    SECONDARY_COLOR = colors.HexColor('#1F2937')  # Dark gray
    LIGHT_GRAY = colors.HexColor('#F3F4F6')
    BORDER_COLOR = colors.HexColor('#E5E7EB')

    def __init__(self):
        self.styles = getSampleStyleSheet()
        self._setup_custom_styles()

    def _setup_custom_styles(self):
        """Setup custom paragraph styles."""
        self.styles.add(ParagraphStyle(
            name='ReportTitle',
            parent=self.styles['Heading1'],
            fontSize=22,
            textColor=self.SECONDARY_COLOR,
            spaceAfter=16,
            alignment=TA_LEFT
        ))

        self.styles.add(ParagraphStyle(
            name='ReportSection',
            parent=self.styles['Heading2'],
            fontSize=14,
            textColor=self.SECONDARY_COLOR,
            spaceBefore=18,
            spaceAfter=10
        ))

        self.styles.add(ParagraphStyle(
            name='ReportBody',
            parent=self.styles['Normal'],
            fontSize=10,
            textColor=self.SECONDARY_COLOR,
            spaceAfter=6
        ))

        self.styles.add(ParagraphStyle(
            name='ReportSmall',
            parent=self.styles['Normal'],
            fontSize=8,
            textColor=colors.gray,
            spaceAfter=4
        ))

        self.styles.add(ParagraphStyle(
            name='ReportFooter',
            parent=self.styles['Normal'],
            fontSize=8,
            textColor=colors.gray,
            alignment=TA_CENTER
        ))

    def generate_report(self, estimate: ProjectEstimate) -> BytesIO:
        """
        Generate a PDF report for a priced calculation.

        Args:
            estimate: Result of CostEstimator.estimate_project

        Returns: BytesIO buffer containing the PDF
        """
        buffer = BytesIO()

        doc = SimpleDocTemplate(
            buffer,
            pagesize=A4,
            rightMargin=0.75*inch,
            leftMargin=0.75*inch,
            topMargin=0.75*inch,
            bottomMargin=0.75*inch,
            title=estimate.project_name
        )

        story = []
        story.extend(self._build_header(estimate.project_name))
        story.extend(self._build_summary(estimate))
        story.extend(self._build_task_table(list(estimate.calculation.task_breakdown)))
        story.extend(self._build_materials_table(estimate.materials, estimate.subtotal_materials))
        if estimate.calculation.warnings:
            story.extend(self._build_warnings(list(estimate.calculation.warnings)))
        story.extend(self._build_footer())

        doc.build(story)
        buffer.seek(0)
        return buffer

    def _build_header(self, project_name: str) -> List:
        """Build the report header."""
        elements = []

        elements.append(Paragraph(
            '<b>Groundwork Estimator</b>',
            ParagraphStyle(
                name='Brand',
                fontSize=18,
                textColor=self.PRIMARY_COLOR,
                spaceAfter=5
            )
        ))

        elements.append(Spacer(1, 16))

        elements.append(Paragraph(
            '<b>Materials &amp; Labour Estimate</b>',
            self.styles['ReportTitle']
        ))

        elements.append(Paragraph(
            f'<b>Project:</b> {escape(project_name)}',
            self.styles['ReportBody']
        ))

        elements.append(Paragraph(
            f'<b>Generated:</b> {datetime.now().strftime("%d %B %Y at %H:%M")}',
            self.styles['ReportBody']
        ))

        elements.append(Spacer(1, 10))
        elements.append(HRFlowable(
            width="100%",
            thickness=1,
            color=self.BORDER_COLOR,
            spaceAfter=16
        ))

        return elements

    def _build_summary(self, estimate: ProjectEstimate) -> List:
        """Build the calculation summary box."""
        elements = []
        result = estimate.calculation

        elements.append(Paragraph('Summary', self.styles['ReportSection']))

        summary_data = [
            ['Calculation', escape(result.name)],
            ['Amount', f'{_format_amount(result.amount)} {result.unit}'],
            ['Materials Subtotal', format_price(estimate.subtotal_materials)],
            ['Total Labour', _format_hours(result.total_hours)],
        ]

        table = Table(summary_data, colWidths=[2*inch, 3*inch])
        table.setStyle(TableStyle([
            ('BACKGROUND', (0, 0), (0, -1), self.LIGHT_GRAY),
            ('TEXTCOLOR', (0, 0), (-1, -1), self.SECONDARY_COLOR),
            ('ALIGN', (0, 0), (0, -1), 'LEFT'),
            ('ALIGN', (1, 0), (1, -1), 'RIGHT'),
            ('FONTNAME', (0, 0), (0, -1), 'Helvetica-Bold'),
            ('FONTNAME', (1, -1), (1, -1), 'Helvetica-Bold'),
            ('FONTSIZE', (0, 0), (-1, -1), 10),
            ('FONTSIZE', (1, -1), (1, -1), 13),
            ('TEXTCOLOR', (1, -1), (1, -1), self.PRIMARY_COLOR),
            ('BOTTOMPADDING', (0, 0), (-1, -1), 8),
            ('TOPPADDING', (0, 0), (-1, -1), 8),
            ('GRID', (0, 0), (-1, -1), 0.5, self.BORDER_COLOR),
        ]))

        elements.append(table)
        return elements

    def _header_style(self) -> List:
        return [
            ('BACKGROUND', (0, 0), (-1, 0), self.PRIMARY_COLOR),
            ('TEXTCOLOR', (0, 0), (-1, 0), colors.white),
            ('FONTNAME', (0, 0), (-1, 0), 'Helvetica-Bold'),
            ('FONTSIZE', (0, 0), (-1, 0), 9),
            ('BOTTOMPADDING', (0, 0), (-1, 0), 8),
            ('TOPPADDING', (0, 0), (-1, 0), 8),
            ('TEXTCOLOR', (0, 1), (-1, -1), self.SECONDARY_COLOR),
            ('FONTSIZE', (0, 1), (-1, -1), 8),
            ('BOTTOMPADDING', (0, 1), (-1, -1), 5),
            ('TOPPADDING', (0, 1), (-1, -1), 5),
            ('ALIGN', (1, 0), (-1, -1), 'RIGHT'),
            ('ROWBACKGROUNDS', (0, 1), (-1, -1), [colors.white, self.LIGHT_GRAY]),
            ('GRID', (0, 0), (-1, -1), 0.5, self.BORDER_COLOR),
        ]

    def _build_task_table(self, tasks: List[TaskEntry]) -> List:
        """Build the labour breakdown table."""
        elements = []
        elements.append(Paragraph('Labour Breakdown', self.styles['ReportSection']))

        if not tasks:
            elements.append(Paragraph('No labour tasks.', self.styles['ReportBody']))
            return elements

        data = [['Task', 'Amount', 'Unit', 'Hours']]
        for task in tasks:
            data.append([
                Paragraph(escape(task.task), self.styles['ReportBody']),
                _format_amount(task.amount),
                task.unit,
                _format_hours(task.hours),
            ])
        data.append(['Total', '', '', _format_hours(sum(t.hours for t in tasks))])

        table = Table(data, colWidths=[3*inch, 1.1*inch, 1.3*inch, 1*inch], repeatRows=1)
        table.setStyle(TableStyle(self._header_style() + [
            ('FONTNAME', (0, -1), (-1, -1), 'Helvetica-Bold'),
            ('VALIGN', (0, 0), (-1, -1), 'MIDDLE'),
        ]))
        elements.append(table)
        return elements

    def _build_materials_table(self, materials: List[MaterialUsage], subtotal: float) -> List:
        """Build the priced materials table; unpriced lines show N/A."""
        elements = []
        elements.append(Paragraph('Materials', self.styles['ReportSection']))

        data = [['Material', 'Quantity', 'Unit', 'Unit Price', 'Total']]
        for material in materials:
            data.append([
                Paragraph(escape(material.name), self.styles['ReportBody']),
                _format_amount(material.amount),
                material.unit,
                format_price(material.price_per_unit),
                format_price(material.total_price),
            ])
        data.append(['Subtotal (priced materials)', '', '', '', format_price(subtotal)])

        table = Table(data, colWidths=[2.4*inch, 0.9*inch, 1.1*inch, 1*inch, 1*inch], repeatRows=1)
        table.setStyle(TableStyle(self._header_style() + [
            ('FONTNAME', (0, -1), (-1, -1), 'Helvetica-Bold'),
            ('SPAN', (0, -1), (3, -1)),
            ('VALIGN', (0, 0), (-1, -1), 'MIDDLE'),
        ]))
        elements.append(table)
        return elements

    def _build_warnings(self, warnings: List[str]) -> List:
        elements = [Paragraph('Assumptions', self.styles['ReportSection'])]
        for warning in warnings:
            elements.append(Paragraph(f'&bull; {escape(warning)}', self.styles['ReportSmall']))
        return elements

    def _build_footer(self) -> List:
        """Build the report footer with disclaimer."""
        elements = []

        elements.append(HRFlowable(
            width="100%",
            thickness=1,
            color=self.BORDER_COLOR,
            spaceBefore=20,
            spaceAfter=15
        ))

        disclaimer = """
        <b>Disclaimer:</b> Quantities and hours are calculated from the dimensions entered and
        the company's task templates and price list. Materials marked N/A have no price on file
        and are not included in the subtotal. Allow for site conditions, waste and access before
        quoting.
        """

        elements.append(Paragraph(disclaimer.strip(), self.styles['ReportSmall']))
        elements.append(Spacer(1, 15))
        elements.append(Paragraph('Generated by Groundwork Estimator', self.styles['ReportFooter']))

        return elements
