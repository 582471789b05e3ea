"""Document loading: decoding, sample data and the workspace state."""

from __future__ import annotations

import json
import logging
import math
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path

from jview.model import JsonValue
from jview.tree import DocumentStats, TreeNode, build

logger = logging.getLogger(__name__)

# Data directory path
_DATA_DIR = Path(__file__).parent / "data"

SAMPLE_LABEL = "Sample dataset"
MANUAL_LABEL = "Manual input"
READ_ERROR = "Unable to read the selected file."


def _load_data(filename: str) -> str:
    """Load content from data directory."""
    return (_DATA_DIR / filename).read_text(encoding="utf-8")


def sample_text() -> str:
    return _load_data("sample.json")


class DocumentError(ValueError):
    """Raised when text cannot be decoded as JSON."""

    def __init__(self, message: str, line: int = 0, column: int = 0) -> None:
        super().__init__(message)
        self.message = message
        self.line = line
        self.column = column

    def __str__(self) -> str:
        if self.line:
            return f"{self.message} (line {self.line}, column {self.column})"
        return self.message


def _reject_constant(name: str) -> JsonValue:
    raise ValueError(f"Non-finite number {name} is not valid JSON")


def _finite_float(literal: str) -> float:
    number = float(literal)
    if not math.isfinite(number):
        raise ValueError(f"Number {literal} is out of range")
    return number


def decode(text: str) -> JsonValue:
    """Decode *text* as a single JSON document.

    NaN and Infinity literals are rejected even though the stdlib decoder
    accepts them by default, and so are literals like ``1e400`` that
    overflow to infinity.
    """
    try:
        return json.loads(
            text, parse_constant=_reject_constant, parse_float=_finite_float
        )
    except json.JSONDecodeError as e:
        raise DocumentError(e.msg, e.lineno, e.colno) from e
    except ValueError as e:
        raise DocumentError(str(e)) from e
    except RecursionError as e:
        # stdlib decoder recurses per nesting level
        raise DocumentError("Document is nested too deeply to decode") from e


@dataclass
class Snapshot:
    """Outputs of one successful load. Never partially updated."""

    value: JsonValue
    tree: TreeNode
    stats: DocumentStats
    label: str
    updated_at: datetime = field(default_factory=datetime.now)


class Workspace:
    """Editable source text plus the last successfully loaded document.

    A failed parse or read only sets ``error``; the previous snapshot stays
    in place so callers never see a half-built tree.
    """

    def __init__(self, text: str = "", *, root_label: str | None = "root") -> None:
        self.text: str = text
        self.root_label = root_label
        self.snapshot: Snapshot | None = None
        self.error: str | None = None

    @property
    def label(self) -> str:
        return self.snapshot.label if self.snapshot else ""

    def parse_and_load(self, text: str, label: str = MANUAL_LABEL) -> bool:
        try:
            value = decode(text)
        except DocumentError as e:
            self.error = f"Unable to parse JSON: {e}"
            logger.info("parse failed for %s: %s", label, e)
            return False
        tree, stats = build(value, self.root_label)
        self.snapshot = Snapshot(value=value, tree=tree, stats=stats, label=label)
        self.error = None
        logger.info(
            "loaded %s: %d nodes, max depth %d",
            label,
            stats.node_count,
            stats.max_depth,
        )
        return True

    def load_file(self, path: str | Path) -> bool:
        path = Path(path)
        try:
            text = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            logger.warning("cannot read %s: %s", path, exc)
            self.error = READ_ERROR
            return False
        self.text = text
        return self.parse_and_load(text, path.name)

    def load_sample(self) -> bool:
        self.text = sample_text()
        return self.parse_and_load(self.text, SAMPLE_LABEL)
