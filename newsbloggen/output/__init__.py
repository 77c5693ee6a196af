"""Export of article snapshots to files."""

from .exporter import default_filename, export_article, render_doc, render_html, render_text

__all__ = ["default_filename", "export_article", "render_doc", "render_html", "render_text"]
