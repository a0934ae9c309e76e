import os
from collections.abc import Callable
from typing import Any

import pytest

from pysyntax.pysyntax_parser import PythonParser
from pysyntax.pysyntax_tree import SyntaxNode

# Monkeypatch coverage to bypass teardown crash in act/docker
if os.getenv("COVERAGE_PROCESS_START"):
    import coverage

    coverage.process_startup()

    # Nukes the teardown assertion that fails in act
    import coverage.collector

    def safe_stop(self: Any) -> None:
        if self in getattr(self, "_collectors", []):
            self._collectors.remove(self)

    coverage.collector.Collector.stop = safe_stop


ParseFn = Callable[..., SyntaxNode]


@pytest.fixture  # type: ignore[misc]
def parse() -> ParseFn:
    """parse(source, level="2.7", future=None) -> FILE node"""

    def _parse(source: str, level: str = "2.7", future: str | None = None) -> SyntaxNode:
        return PythonParser(level, future).parse(source)

    return _parse
