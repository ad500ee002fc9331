"""Shiraberu: pull-request activity reports with calendar rollups."""

__version__ = "0.3.0"
