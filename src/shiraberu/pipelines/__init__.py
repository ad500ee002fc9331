"""Pipelines orchestrating record fetching and rollups."""

from .report_pipeline import ReportPipeline, ReportPipelineConfig, ReportResult, create_report_pipeline

__all__ = [
    "ReportPipeline",
    "ReportPipelineConfig",
    "ReportResult",
    "create_report_pipeline",
]
