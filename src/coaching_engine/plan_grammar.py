"""
A small line grammar for the semi-structured prose the coach writes.

Assistant replies are tokenized into lines, each line is tagged as a header,
a numbered item, a bullet item, plain text or a blank, and consecutive lines
under a header are grouped into a `Section`. Extraction then works on the
typed sections instead of chaining regexes over raw text.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import List, Optional, Pattern, Tuple


# Accepted header spellings per section kind, checked against a line with its
# markdown emphasis removed. A header always ends with a colon.
HEADER_SPELLINGS: Tuple[Tuple[str, Pattern[str]], ...] = (
    ("top3", re.compile(r"top 3:$", re.IGNORECASE)),
    ("top3", re.compile(r"here's your plan[^:]*:$", re.IGNORECASE)),
    ("top3", re.compile(r"plan for today:$", re.IGNORECASE)),
    ("admin_batch", re.compile(r"admin batch:$", re.IGNORECASE)),
    ("admin_batch", re.compile(r"^quick hits:$", re.IGNORECASE)),
    (
        "summary",
        re.compile(
            r"(here's what i'm capturing|let me organize|here's what i'm hearing|i'm capturing|organizing)[^:]*:$",
            re.IGNORECASE,
        ),
    ),
    ("meetings", re.compile(r"^meetings?[^:]*:$", re.IGNORECASE)),
    ("follow_ups", re.compile(r"^(follow[- ]?ups?|waiting on)[^:]*:$", re.IGNORECASE)),
)

NUMBERED_ITEM = re.compile(r"^\d+[.)]\s*(.+)")
BULLET_ITEM = re.compile(r"^[-*]\s*(.+)")
_EMPHASIS = re.compile(r"[*_#>]+")


@dataclass(frozen=True)
class Line:
    kind: str  # "header", "numbered_item", "bullet_item", "text" or "blank"
    text: str
    header_kind: Optional[str] = None


@dataclass
class Section:
    """
    A header plus the lines that follow it, up to a blank line or the next header.
    """

    kind: str
    header: str
    lines: List[Line] = field(default_factory=list)

    def numbered_items(self) -> List[str]:
        return [line.text for line in self.lines if line.kind == "numbered_item"]

    def bullet_items(self) -> List[str]:
        return [line.text for line in self.lines if line.kind == "bullet_item"]

    def body(self) -> str:
        return "\n".join(line.text for line in self.lines)


def header_kind(line: str) -> Optional[str]:
    normalized = _EMPHASIS.sub("", line).strip()
    if not normalized.endswith(":"):
        return None
    for kind, pattern in HEADER_SPELLINGS:
        if pattern.search(normalized):
            return kind
    return None


def tag_line(raw: str) -> Line:
    stripped = raw.strip()
    if not stripped:
        return Line(kind="blank", text="")

    kind = header_kind(stripped)
    if kind:
        return Line(kind="header", text=stripped, header_kind=kind)

    numbered = NUMBERED_ITEM.match(stripped)
    if numbered:
        return Line(kind="numbered_item", text=numbered.group(1).strip())

    bullet = BULLET_ITEM.match(stripped)
    if bullet:
        return Line(kind="bullet_item", text=bullet.group(1).strip())

    return Line(kind="text", text=stripped)


def tokenize(text: str) -> List[Line]:
    return [tag_line(raw) for raw in (text or "").splitlines()]


def parse_sections(text: str) -> List[Section]:
    sections: List[Section] = []
    current: Optional[Section] = None
    for line in tokenize(text):
        if line.kind == "header":
            current = Section(kind=line.header_kind or "", header=line.text)
            sections.append(current)
        elif line.kind == "blank":
            # allow a single blank line between a header and its first line
            if current is not None and current.lines:
                current = None
        elif current is not None:
            current.lines.append(line)
    return sections


def find_sections(text: str, kind: str) -> List[Section]:
    return [section for section in parse_sections(text) if section.kind == kind]
