# =============================================================================
# core/models/report.py - Printable Report Schemas
# =============================================================================
# Reports are plain data: a title and a list of tabular sections. The PDF
# renderer in lib/pdf_report.py consumes nothing else.
# =============================================================================

from enum import Enum

from pydantic import BaseModel, Field


class ReportType(str, Enum):
    """Report choices offered by POST /print/generate."""
    RECEIVED = "received"
    EXTRACTED = "extracted"
    COMPLETED = "completed"
    ACCOUNTS = "accounts"
    ALL = "all"


class ReportSection(BaseModel):
    """
    One table in a report.

    Example:
        {
            "title": "Completed Files",
            "columns": ["Folder", "Date Completed"],
            "rows": [["batch-01", "2024-01-15 18:30:00"]]
        }
    """

    title: str
    columns: list[str]
    rows: list[list[str]] = Field(default_factory=list)

    @property
    def is_wide(self) -> bool:
        return len(self.columns) > 4


class Report(BaseModel):
    """A complete report ready to render."""

    title: str
    generated_at: str
    sections: list[ReportSection] = Field(default_factory=list)
    filename: str = "report.pdf"

    @property
    def is_wide(self) -> bool:
        return any(section.is_wide for section in self.sections)
