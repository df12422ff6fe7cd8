"""Export module for analysis workbooks."""

from .workbook import (
    WorkbookConfig,
    generate_analysis_excel,
)

__all__ = [
    "WorkbookConfig",
    "generate_analysis_excel",
]
