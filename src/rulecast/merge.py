"""
Merge Engine -- combine several rule documents into one.

Documents are split into titled sections on level 1-3 markdown
headers, then recombined under one of three strategies:

    concat    keep each document together, separated by '---'
    sections  group same-titled sections across documents
    smart     longest-first, dropping near-duplicate bodies

Everything here is pure except merge_files, which reads the inputs
and writes the framed result.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Union

from .errors import OutputExists, SourceNotFound

logger = logging.getLogger("rulecast.merge")

INTRODUCTION = "Introduction"
MERGED_TITLE = "# AI Assistant Configuration (Merged)"
DEDUP_KEY_LENGTH = 200

_HEADER_LINE = re.compile(r"^(#{1,3})[ \t]+(\S.*)$")
_WHITESPACE = re.compile(r"\s+")


class MergeStrategy(str, Enum):
    CONCAT = "concat"
    SECTIONS = "sections"
    SMART = "smart"


@dataclass
class ConfigSection:
    """One titled chunk of a rule document."""

    title: str
    content: str
    source: str

    @property
    def is_introduction(self) -> bool:
        return self.title == INTRODUCTION


def parse_sections(document: str, source: str) -> List[ConfigSection]:
    """Split a markdown document into sections.

    Scans line by line. Text before the first header becomes an
    'Introduction' section when it is not blank. Each header line
    (1-3 '#' then a title) opens a new section that runs to the next
    header.

    Args:
        document: Markdown text.
        source: Label recorded on every section (usually the filename).

    Returns:
        Sections in document order.
    """
    sections: List[ConfigSection] = []
    current: Optional[ConfigSection] = None
    body: List[str] = []

    for line in document.splitlines():
        match = _HEADER_LINE.match(line)
        if match is None:
            body.append(line)
            continue

        if current is not None:
            current.content = "\n".join(body)
            sections.append(current)
        else:
            preamble = "\n".join(body)
            if preamble.strip():
                sections.append(ConfigSection(INTRODUCTION, preamble, source))
        current = ConfigSection(match.group(2).strip(), "", source)
        body = []

    if current is not None:
        current.content = "\n".join(body)
        sections.append(current)
    else:
        preamble = "\n".join(body)
        if preamble.strip():
            sections.append(ConfigSection(INTRODUCTION, preamble, source))

    return sections


def _render(section: ConfigSection) -> str:
    if section.is_introduction:
        return section.content.strip()
    return f"## {section.title}\n\n{section.content.strip()}"


def _from_comment(source: str) -> str:
    return f"<!-- From: {source} -->"


def _merge_concat(documents: Sequence[Sequence[ConfigSection]]) -> str:
    blocks = []
    for i, sections in enumerate(documents):
        source = sections[0].source if sections else f"Source {i + 1}"
        body = "\n\n".join(_render(s) for s in sections)
        blocks.append(f"{_from_comment(source)}\n{body}")
    return "\n\n---\n\n".join(blocks)


def _merge_sections(documents: Sequence[Sequence[ConfigSection]]) -> str:
    groups: Dict[str, List[ConfigSection]] = {}
    for sections in documents:
        for section in sections:
            groups.setdefault(section.title.lower(), []).append(section)

    merged = []
    for contributors in groups.values():
        first = contributors[0]
        if len(contributors) == 1:
            merged.append(f"## {first.title}\n\n{first.content.strip()}")
            continue
        combined = "\n\n".join(
            f"{_from_comment(s.source)}\n{s.content.strip()}" for s in contributors
        )
        merged.append(f"## {first.title}\n\n{combined}")
    return "\n\n".join(merged)


def dedup_key(content: str) -> str:
    """Near-duplicate key: case-folded, whitespace-collapsed, first 200 chars."""
    return _WHITESPACE.sub(" ", content.lower()).strip()[:DEDUP_KEY_LENGTH]


def _merge_smart(documents: Sequence[Sequence[ConfigSection]]) -> str:
    flat = [s for sections in documents for s in sections]
    # longer bodies are taken as more specific and win ties on the key
    ordered = sorted(flat, key=lambda s: len(s.content), reverse=True)

    seen = set()
    result = []
    for section in ordered:
        key = dedup_key(section.content)
        if key in seen:
            continue
        seen.add(key)
        result.append(_render(section))
    return "\n\n".join(result)


_STRATEGIES = {
    MergeStrategy.CONCAT: _merge_concat,
    MergeStrategy.SECTIONS: _merge_sections,
    MergeStrategy.SMART: _merge_smart,
}


def merge_sections(
    documents: Sequence[Sequence[ConfigSection]],
    strategy: Union[MergeStrategy, str] = MergeStrategy.SMART,
) -> str:
    """Combine per-document section lists into one markdown body.

    Args:
        documents: One list of sections per input document, in input order.
        strategy: concat, sections, or smart.

    Returns:
        str: The merged body (without the framing header).
    """
    return _STRATEGIES[MergeStrategy(strategy)](documents)


def frame_merged(
    body: str,
    sources: Sequence[str],
    strategy: Union[MergeStrategy, str],
    generated_at: Optional[datetime] = None,
) -> str:
    """Wrap a merged body with the title and a provenance comment."""
    generated_at = generated_at or datetime.now(timezone.utc)
    return (
        f"{MERGED_TITLE}\n\n"
        "<!--\n"
        f"  Merged from: {', '.join(sources)}\n"
        f"  Strategy: {MergeStrategy(strategy).value}\n"
        f"  Date: {generated_at.isoformat()}\n"
        "-->\n\n"
        f"{body}\n"
    )


@dataclass
class MergeResult:
    output: Path
    content: str
    section_counts: Dict[str, int]

    @property
    def line_count(self) -> int:
        return len(self.content.split("\n"))

    @property
    def size(self) -> int:
        return len(self.content.encode("utf-8"))


def read_documents(root: Path, files: Sequence[str]) -> List[List[ConfigSection]]:
    """Read and parse every input file, labelled by its basename.

    Raises:
        SourceNotFound: On the first file that is missing or unreadable.
    """
    documents = []
    for file in files:
        path = root / file
        if not path.is_file():
            raise SourceNotFound(file, "file not found")
        try:
            text = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            raise SourceNotFound(file, str(exc)) from exc
        sections = parse_sections(text, Path(file).name)
        logger.debug("Read %s (%d sections)", file, len(sections))
        documents.append(sections)
    return documents


def merge_files(
    root: Path,
    files: Sequence[str],
    output: str = "merged.md",
    strategy: Union[MergeStrategy, str] = MergeStrategy.SMART,
    force: bool = False,
    documents: Optional[Sequence[Sequence[ConfigSection]]] = None,
) -> MergeResult:
    """Merge ``files`` into ``output`` under ``root``.

    Args:
        root: Directory the paths are relative to.
        files: Input documents.
        output: Output filename.
        strategy: Merge strategy.
        force: Overwrite an existing output file.
        documents: Pre-parsed (e.g. user-filtered) sections to merge
            instead of re-reading ``files``.

    Raises:
        OutputExists: If ``output`` exists and ``force`` is False.
        SourceNotFound: If an input cannot be read.
    """
    root = Path(root)
    out_path = root / output
    if out_path.exists() and not force:
        raise OutputExists(output)

    if documents is None:
        documents = read_documents(root, files)

    body = merge_sections(documents, strategy)
    content = frame_merged(body, list(files), strategy)
    out_path.parent.mkdir(parents=True, exist_ok=True)
    out_path.write_text(content, encoding="utf-8")
    logger.info("Merged %d file(s) into %s", len(files), out_path)

    counts: Dict[str, int] = {}
    for sections in documents:
        for s in sections:
            counts[s.source] = counts.get(s.source, 0) + 1
    return MergeResult(output=out_path, content=content, section_counts=counts)
