"""Renderers turning a report result into Markdown or JSON."""

from .export import render_json, report_to_dict
from .markdown import format_delta, render_markdown

__all__ = [
    "format_delta",
    "render_json",
    "render_markdown",
    "report_to_dict",
]
