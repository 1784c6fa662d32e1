from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from urllib.parse import unquote, urlparse


@dataclass(frozen=True)
class TextDocument:
    """One snapshot of a source document."""

    uri: str
    text: str

    @classmethod
    def from_path(cls, path: Path) -> TextDocument:
        return cls(uri=path.resolve().as_uri(), text=path.read_text(encoding="utf8"))

    @property
    def path(self) -> Path | None:
        """Filesystem path for ``file://`` URIs, None for any other scheme."""
        parsed = urlparse(self.uri)
        if parsed.scheme != "file":
            return None
        return Path(unquote(parsed.path))


__all__ = ["TextDocument"]
