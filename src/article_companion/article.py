"""The article a widget is attached to."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path


@dataclass(slots=True, frozen=True)
class Article:
    title: str
    content: str

    @classmethod
    def from_file(cls, path: Path, *, title: str | None = None) -> Article:
        """Load an article from a text or markdown file.

        The first non-empty line (without leading ``#`` markers) becomes the
        title unless ``title`` is given; the remaining text is the body.
        """
        if not path.exists():
            message = f"Article not found: {path}"
            raise FileNotFoundError(message)
        lines = path.read_text(encoding="utf-8").splitlines()
        first = next((idx for idx, line in enumerate(lines) if line.strip()), None)
        if first is None:
            return cls(title=title or path.stem, content="")
        heading = lines[first].strip().lstrip("#").strip()
        if title:
            return cls(title=title, content="\n".join(lines[first:]).strip())
        return cls(title=heading or path.stem, content="\n".join(lines[first + 1 :]).strip())
