"""Markdown / JSON compliance reports."""

from signage_compliance.reporting.report import generate_report, render_json, render_markdown

__all__ = ["generate_report", "render_json", "render_markdown"]
