"""
Module: report_engine.layout.context

Purpose:
    Per-report layout state: the page list, the current page, the font
    set, the active format and the cursor. Every primitive routes its
    space requirement through ensure_space() before drawing.

Key Classes:
    - LayoutContext: Mutable layout state for one report
    - LayoutError: Raised when the context is misused

Dependencies:
    - report_engine.layout.formats: ReportFormat
    - report_engine.layout.fonts: FontSet
    - report_engine.layout.models: ReportDocument, Page, LayoutCursor

Used By:
    - report_engine.layout.text / sections / table: All primitives
    - report_engine.output.renderer: Reads the finished pages
"""

from __future__ import annotations

import logging
from typing import Callable, List, Optional

from .fonts import FontSet
from .formats import ReportFormat, get_report_format
from .models import LayoutCursor, Page, ReportDocument

logger = logging.getLogger(__name__)

PageHook = Callable[["LayoutContext"], None]

# Slack for float comparisons against the bottom bound
EPSILON = 1e-6


class LayoutError(Exception):
    """Layout context used out of order (e.g. drawing after footers)."""
    pass


class LayoutContext:
    """
    Layout state for a single report.

    Created once per report, mutated by every primitive in content
    order, then closed by the footer pass. Never shared between reports.

    Attributes:
        format: Active ReportFormat (immutable)
        fonts: FontSet used for measurement and drawing
        document: Pages laid out so far
        page: Current (last) page
        cursor: Write position and content bounds

    Example:
        >>> ctx = LayoutContext.create("v3")
        >>> ctx.ensure_space(100)
        False
        >>> ctx.page_count
        1
    """

    def __init__(
        self,
        report_format: ReportFormat,
        fonts: Optional[FontSet] = None,
        on_page_added: Optional[PageHook] = None,
    ) -> None:
        self.format = report_format
        self.fonts = fonts or FontSet.standard()
        self.document = ReportDocument(width=report_format.page.width, height=report_format.page.height)
        self._page_hooks: List[PageHook] = []
        self._finalized = False

        page = report_format.page
        self.cursor = LayoutCursor(
            x=page.margin_left,
            y=page.height - page.margin_top,
            min_x=page.margin_left,
            max_x=page.width - page.margin_right,
            min_y=page.margin_bottom,
            max_y=page.height - page.margin_top,
        )
        self.page: Page = self.document.new_page()

        if on_page_added is not None:
            # First page gets the same treatment as later pages
            self.add_page_hook(on_page_added)

    @classmethod
    def create(
        cls,
        style_version: str,
        fonts: Optional[FontSet] = None,
        on_page_added: Optional[PageHook] = None,
    ) -> "LayoutContext":
        """Open a context for the format registered under style_version."""
        return cls(get_report_format(style_version), fonts=fonts, on_page_added=on_page_added)

    @property
    def pages(self) -> List[Page]:
        return self.document.pages

    @property
    def page_count(self) -> int:
        return self.document.page_count

    @property
    def content_width(self) -> float:
        return self.cursor.max_x - self.cursor.min_x

    @property
    def content_height(self) -> float:
        return self.cursor.max_y - self.cursor.min_y

    @property
    def finalized(self) -> bool:
        return self._finalized

    @property
    def at_page_top(self) -> bool:
        """True when nothing has advanced the cursor on the current page."""
        return self.cursor.y >= self.cursor.max_y - EPSILON

    def add_page_hook(self, hook: PageHook) -> None:
        """Register a callback run for the current page and every new page."""
        self._page_hooks.append(hook)
        hook(self)

    def add_page(self) -> Page:
        """
        Append a fresh page and move the cursor to its top margin.

        Returns:
            The new current page

        Raises:
            LayoutError: If the footer pass already ran
        """
        self.check_open()
        self.page = self.document.new_page()
        self.cursor.x = self.cursor.min_x
        self.cursor.y = self.cursor.max_y
        logger.debug(f"Started page {self.page.index + 1}")
        for hook in self._page_hooks:
            hook(self)
        return self.page

    def remaining_height(self) -> float:
        """Vertical room between the cursor and the bottom margin."""
        return self.cursor.y - self.cursor.min_y

    def fits(self, height: float) -> bool:
        return self.cursor.y - height >= self.cursor.min_y - EPSILON

    def ensure_space(self, height: float) -> bool:
        """
        Guarantee `height` of room below the cursor, breaking the page if needed.

        A block taller than the whole content area cannot be helped by a
        new page; when the cursor already sits at the top of a page no
        blank page is added and the caller is expected to clamp.

        Args:
            height: Vertical space the next block needs

        Returns:
            True if a page was added
        """
        self.check_open()
        if self.fits(height):
            return False
        if self.at_page_top:
            logger.warning(
                f"Block of {height:.1f}pt exceeds page content height "
                f"{self.content_height:.1f}pt on page {self.page.index + 1}"
            )
            return False
        self.add_page()
        return True

    def check_open(self) -> None:
        if self._finalized:
            raise LayoutError("Footers already finalized; no more content can be laid out")

    def mark_finalized(self) -> None:
        if self._finalized:
            raise LayoutError("Footers already finalized")
        self._finalized = True
