"""Result presentation and build report output."""

from .sink import CollectingReportSink, LoggingReportSink, ReportSink, format_bucket
from .writer import BuildReportWriter, report_directory, report_filename

__all__ = [
    "BuildReportWriter",
    "CollectingReportSink",
    "LoggingReportSink",
    "ReportSink",
    "format_bucket",
    "report_directory",
    "report_filename",
]
