"""
Module: builder.output

Purpose:
    Rendering backends for laid-out exam papers.
    Converts ExamDocument to PDF (ReportLab or a remote HTML API) or HTML.

Key Functions:
    - render_to_pdf(): Render a document to a PDF file
    - render_html(): Serialize a document to HTML

Dependencies:
    - reportlab: Local PDF generation
    - requests: Remote HTML-to-PDF API

Used By:
    - builder.controller: Pipeline orchestration
"""

from .renderer import Renderer, RenderError, ReportLabRenderer, render_to_pdf
from .html import render_html
from .remote import RemoteHtmlRenderer, RemoteRendererConfig

__all__ = [
    "Renderer",
    "RenderError",
    "ReportLabRenderer",
    "render_to_pdf",
    "render_html",
    "RemoteHtmlRenderer",
    "RemoteRendererConfig",
]
