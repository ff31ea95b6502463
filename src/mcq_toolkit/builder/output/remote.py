"""
Module: builder.output.remote

Purpose:
    Render an ExamDocument through a hosted HTML-to-PDF API. The document
    is serialized with render_html(), base64-encoded and posted; the
    response body is the PDF.

Key Classes:
    - RemoteRendererConfig: Endpoint, credentials and timeout
    - RemoteHtmlRenderer: Renderer implementation

Dependencies:
    - requests: HTTP client
    - builder.output.html: HTML serialization

Used By:
    - mcq_toolkit.__main__: --renderer remote
"""

from __future__ import annotations

import base64
import logging
import os
from dataclasses import dataclass
from typing import Optional

import requests

from mcq_toolkit.builder.layout.document import ExamDocument

from .html import render_html
from .renderer import RenderError

logger = logging.getLogger(__name__)

DEFAULT_API_URL = "https://api.pdfbolt.com/v1/direct"
API_KEY_ENV = "PDFBOLT_API_KEY"
TIMEOUT_ENV = "PDF_GENERATION_TIMEOUT"  # milliseconds


@dataclass(frozen=True)
class RemoteRendererConfig:
    """
    Remote rendering settings (immutable).

    Attributes:
        api_key: Value of the API-KEY header
        api_url: Endpoint accepting {"html": <base64>, ...}
        timeout_s: Request timeout in seconds
    """

    api_key: str
    api_url: str = DEFAULT_API_URL
    timeout_s: float = 45.0

    def __post_init__(self) -> None:
        if not self.api_key:
            raise ValueError("api_key must not be empty")
        if self.timeout_s <= 0:
            raise ValueError(f"timeout_s must be positive: {self.timeout_s}")

    @classmethod
    def from_env(cls, api_url: Optional[str] = None) -> RemoteRendererConfig:
        """
        Build config from PDFBOLT_API_KEY and PDF_GENERATION_TIMEOUT.

        Raises:
            RenderError: If the API key is not set
        """
        api_key = os.environ.get(API_KEY_ENV, "")
        if not api_key:
            raise RenderError(f"{API_KEY_ENV} environment variable is required")

        timeout_ms = os.environ.get(TIMEOUT_ENV, "45000")
        try:
            timeout_s = int(timeout_ms) / 1000
        except ValueError:
            logger.warning(f"Ignoring invalid {TIMEOUT_ENV}={timeout_ms!r}, using 45s")
            timeout_s = 45.0

        return cls(api_key=api_key, api_url=api_url or DEFAULT_API_URL, timeout_s=timeout_s)


class RemoteHtmlRenderer:
    """Posts the HTML serialization of a document and returns the PDF bytes."""

    def __init__(self, config: RemoteRendererConfig, session: Optional[requests.Session] = None):
        self.config = config
        self.session = session or requests.Session()

    def render(self, document: ExamDocument) -> bytes:
        html = render_html(document)
        payload = {
            "html": base64.b64encode(html.encode("utf-8")).decode("ascii"),
            "printBackground": True,
            "waitUntil": "networkidle",
        }
        headers = {"API-KEY": self.config.api_key, "Content-Type": "application/json"}

        logger.info(f"Posting {len(html)} chars of HTML to {self.config.api_url}")
        try:
            resp = self.session.post(
                self.config.api_url,
                json=payload,
                headers=headers,
                timeout=self.config.timeout_s,
            )
        except requests.exceptions.RequestException as e:
            raise RenderError(f"PDF generation failed: {e}") from e

        if resp.status_code >= 300:
            raise RenderError(
                f"PDF generation failed: HTTP {resp.status_code}: {resp.text[:200]}"
            )
        if not resp.content.startswith(b"%PDF"):
            raise RenderError("PDF generation failed: response is not a PDF")

        return resp.content
