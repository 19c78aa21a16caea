import io
import sys
from dataclasses import replace
from pathlib import Path

import pytest
from PIL import Image

# Add src to sys.path so we can import report_engine
SRC_PATH = Path(__file__).resolve().parent.parent / "src"
if SRC_PATH.as_posix() not in sys.path:
    sys.path.insert(0, SRC_PATH.as_posix())

from report_engine.layout import LayoutContext, ReportImage, get_report_format  # noqa: E402


# Common test fixtures
@pytest.fixture
def ctx_v3():
    """Fresh v3 context with the built-in fonts."""
    return LayoutContext.create("v3")


@pytest.fixture
def ctx_v2():
    return LayoutContext.create("v2")


@pytest.fixture
def make_context():
    """Factory for contexts, optionally with a custom page height."""
    def _create(style: str = "v3", page_height: float = None, **kwargs):
        fmt = get_report_format(style)
        if page_height is not None:
            fmt = replace(fmt, page=replace(fmt.page, height=page_height))
        return LayoutContext(fmt, **kwargs)
    return _create


@pytest.fixture
def logo_image():
    """A 200x100 RGBA logo."""
    return ReportImage.from_pil(Image.new("RGBA", (200, 100), color=(20, 60, 130, 255)))


@pytest.fixture
def png_bytes():
    buf = io.BytesIO()
    Image.new("RGBA", (40, 20), color=(255, 0, 0, 128)).save(buf, format="PNG")
    return buf.getvalue()


@pytest.fixture
def jpeg_bytes():
    buf = io.BytesIO()
    Image.new("RGB", (30, 30), color="white").save(buf, format="JPEG")
    return buf.getvalue()
