import io
import sys
from pathlib import Path

import pytest
from PIL import Image

# Add src to sys.path so we can import mcq_toolkit
SRC_PATH = Path(__file__).resolve().parent.parent / "src"
if SRC_PATH.as_posix() not in sys.path:
    sys.path.insert(0, SRC_PATH.as_posix())

from mcq_toolkit.builder.math import TypesetError, TypesetMath  # noqa: E402
from mcq_toolkit.core.models import QuestionItem, TestMetadata  # noqa: E402


def make_item(index: int, text_len: int = 20, option_len: int = 5, labels: str = "ABCD") -> QuestionItem:
    """Question with predictable text lengths."""
    text = f"Q{index} " + "x" * max(0, text_len - len(f"Q{index} "))
    return QuestionItem(
        text=text,
        options=tuple((label, label.lower() * option_len) for label in labels),
    )


class StubTypesetter:
    """Typesetter that renders a tiny PNG and rejects spans containing BAD."""

    def __init__(self):
        self.calls = []

    def typeset(self, latex, *, display=False):
        self.calls.append((latex, display))
        if "BAD" in latex:
            raise TypesetError(f"Cannot typeset {latex!r}")
        buf = io.BytesIO()
        Image.new("RGB", (40, 20), color="white").save(buf, format="PNG")
        return TypesetMath(png=buf.getvalue(), width_px=40, height_px=20, dpi=200, font_size_pt=12.0)


# Common test fixtures
@pytest.fixture
def items_factory():
    """Build n questions of a given size."""
    def _factory(count: int, text_len: int = 20, option_len: int = 5):
        return [make_item(i, text_len, option_len) for i in range(count)]
    return _factory


@pytest.fixture
def metadata():
    """Metadata with every field set."""
    return TestMetadata(
        instructor="Dr. Sana",
        subject="Physics",
        date="2024-03-01",
        time="09:00 - 10:00",
        class_name="XII",
        max_marks="40",
        min_marks="20",
    )


@pytest.fixture
def stub_typesetter():
    """Typesetter double that never touches matplotlib."""
    return StubTypesetter()


@pytest.fixture
def sample_image(tmp_path: Path):
    """Create a simple test image."""
    img = Image.new("RGB", (200, 100), color="white")
    img_path = tmp_path / "sample.png"
    img.save(img_path)
    return img_path
