"""
Reporting module for the appraisal engine.

Renders appraisal reports, subject property and adjusted comparables as
PDF.

Usage:
    from reporting import AppraisalReportPDF

    pdf_bytes = AppraisalReportPDF().generate_to_buffer(report, subject, comparables)
"""

from .pdf_generator import AppraisalReportPDF, ValueIndication, get_report_styles

__all__ = [
    "AppraisalReportPDF",
    "ValueIndication",
    "get_report_styles",
]
