"""Command-line interface for Shiraberu."""
