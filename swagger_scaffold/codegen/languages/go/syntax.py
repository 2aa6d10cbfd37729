"""Small Go source helpers shared by the emitters."""

import json
from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Set


@dataclass
class GoFile:
    """An emitted file before its header is rendered."""

    path: str
    package: str
    body: str
    imports: Set[str] = field(default_factory=set)
    header_comment: Optional[str] = None


def go_quote(text: str) -> str:
    """Interpreted Go string literal (``"petId"``)."""
    return json.dumps(text)


def go_raw(text: str) -> str:
    """Raw Go string literal, falling back to a quoted one when it holds a backtick."""
    if "`" in text:
        return go_quote(text)
    return f"`{text}`"


def is_stdlib_import(path: str) -> bool:
    """Go standard library paths have no dot in their first element."""
    return "." not in path.split("/", 1)[0]


def group_imports(imports: Iterable[str]) -> List[List[str]]:
    """Standard library imports first, then everything else; each group sorted and quoted."""
    unique = sorted(set(imports))
    stdlib = [go_quote(path) for path in unique if is_stdlib_import(path)]
    external = [go_quote(path) for path in unique if not is_stdlib_import(path)]
    return [group for group in (stdlib, external) if group]


def align_columns(rows: List[List[str]]) -> List[str]:
    """Pad every column but the last to the widest cell, as gofmt does for struct fields."""
    if not rows:
        return []
    widths = [0] * max(len(row) for row in rows)
    for row in rows:
        for i, cell in enumerate(row[:-1]):
            widths[i] = max(widths[i], len(cell))
    lines = []
    for row in rows:
        cells = [cell.ljust(widths[i]) for i, cell in enumerate(row[:-1])]
        cells.append(row[-1])
        lines.append(" ".join(cells).rstrip())
    return lines
