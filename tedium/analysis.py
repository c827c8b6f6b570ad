"""
Static analysis over every checked-out repository.

The analyzer runs exactly once per batch. Its result is shared, read-only,
by every WorkingRepository so cleanup passes can look at elements defined in
other repositories.
"""

import re
from collections.abc import Callable
from dataclasses import dataclass, field
from html.parser import HTMLParser
from pathlib import Path
from typing import Any

from tedium.element import WorkingRepository
from tedium.interfaces import AnalysisSession, Analyzer
from tedium.logging import get_logger

logger = get_logger("analysis")

# Demo pages, index pages and dependency manifests are not element sources.
_SKIPPED_FILES = re.compile(r"demo|index\.html|dependencies\.html")


def is_analyzable(filename: str) -> bool:
    return filename.endswith(".html") and not _SKIPPED_FILES.search(filename)


def missing_file_filter(path: str) -> bool:
    """Analyzer filter: True means skip, used for imports we have no copy of."""
    return not Path(path).exists()


def source_files(work_dir: str | Path) -> list[Path]:
    """
    Top-level HTML sources of every working copy.

    Repositories are visited in name order, files in name order within each
    repository.
    """
    work_dir = Path(work_dir)
    files: list[Path] = []
    for repo_dir in sorted(work_dir.iterdir()):
        if not repo_dir.is_dir():
            continue
        for path in sorted(repo_dir.iterdir()):
            if path.is_file() and is_analyzable(path.name):
                files.append(path)
    return files


@dataclass
class AnalysisResult:
    """What the analyzer learned about all sources."""

    # custom element name -> file defining it
    elements: dict[str, Path] = field(default_factory=dict)
    # file -> hrefs it imports, in document order
    imports: dict[Path, list[str]] = field(default_factory=dict)

    def defining_file(self, element: str) -> Path | None:
        return self.elements.get(element)

    def importers_of(self, path: Path) -> list[Path]:
        """Files whose imports resolve to ``path``."""
        target = path.resolve()
        return [
            source
            for source, hrefs in self.imports.items()
            if any((source.parent / href).resolve() == target for href in hrefs)
        ]


class _ImportParser(HTMLParser):
    def __init__(self) -> None:
        super().__init__()
        self.imports: list[str] = []
        self.modules: list[str] = []

    def handle_starttag(self, tag: str, attrs: list[tuple[str, str | None]]) -> None:
        attributes = dict(attrs)
        if tag == "link" and (attributes.get("rel") or "").lower() == "import":
            href = attributes.get("href")
            if href:
                self.imports.append(href)
        elif tag == "dom-module":
            module_id = attributes.get("id")
            if module_id:
                self.modules.append(module_id)


class ImportGraphSession:
    """Incrementally parses files and follows their HTML imports."""

    def __init__(self, filter: Callable[[str], bool]) -> None:
        self.filter = filter
        self.result = AnalysisResult()
        self._seen: set[Path] = set()

    async def metadata_tree(self, path: Path) -> None:
        pending = [Path(path)]
        while pending:
            current = pending.pop()
            key = current.resolve()
            if key in self._seen or self.filter(str(current)) or not current.is_file():
                continue
            self._seen.add(key)

            parser = _ImportParser()
            parser.feed(current.read_text(encoding="utf-8", errors="replace"))
            parser.close()

            self.result.imports[current] = parser.imports
            for module in parser.modules:
                self.result.elements.setdefault(module, current)
            for href in reversed(parser.imports):
                if "://" in href or href.startswith("//"):
                    continue
                pending.append(current.parent / href)

    def annotate(self) -> AnalysisResult:
        return self.result


class ImportGraphAnalyzer:
    """Default ``Analyzer``: HTML imports and ``<dom-module>`` definitions."""

    async def analyze(
        self, entry_point: Path, filter: Callable[[str], bool]
    ) -> ImportGraphSession:
        session = ImportGraphSession(filter)
        await session.metadata_tree(entry_point)
        return session


class AnalysisBridge:
    """Runs the analyzer once over all sources and shares the result."""

    def __init__(
        self,
        analyzer: Analyzer,
        work_dir: str | Path,
        entry_point: str | Path,
        filter: Callable[[str], bool] = missing_file_filter,
    ) -> None:
        self.analyzer = analyzer
        self.work_dir = Path(work_dir)
        self.entry_point = Path(entry_point)
        self.filter = filter

    async def analyze(self, repos: list[WorkingRepository]) -> Any:
        files = [path for path in source_files(self.work_dir) if not self.filter(str(path))]

        session: AnalysisSession = await self.analyzer.analyze(self.entry_point, self.filter)
        total = len(files) + 1
        for index, path in enumerate(files, start=1):
            await session.metadata_tree(path)
            logger.debug(f"Analyzing {path.relative_to(self.work_dir)} {index}/{total}")

        logger.info(f"Analyzed {len(files)} files, annotating...")
        result = session.annotate()
        for repo in repos:
            repo.analysis = result
        return result


__all__ = [
    "AnalysisBridge",
    "AnalysisResult",
    "ImportGraphAnalyzer",
    "ImportGraphSession",
    "is_analyzable",
    "missing_file_filter",
    "source_files",
]
