"""Input lists written to files for the engine (languages, keywords, audio files)."""

import os
import tempfile
from abc import ABC, abstractmethod
from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from pathlib import Path


class ListFile(ABC):
    """A list serialized to a text file the engine reads."""

    prefix = "voxsigma_lst_"
    suffix = ".lst"

    @abstractmethod
    def to_file_content(self) -> str:
        """File content, one entry per line."""

    def write_to_file(self, path: str | Path) -> str:
        Path(path).write_text(self.to_file_content())
        return str(path)

    def write_to_temp_file(self, tmp_dir: str | None = None) -> str:
        """Write the list to a new temporary file and return its path.

        The caller owns the file.
        """
        fd, path = tempfile.mkstemp(prefix=self.prefix, suffix=self.suffix, dir=tmp_dir)
        with os.fdopen(fd, "w") as f:
            f.write(self.to_file_content())
        return path


class LineList(ListFile):
    """Ordered, de-duplicated list of entries written one per line."""

    def __init__(self, entries: Iterable[str] = ()):
        self._entries: list[str] = []
        self.add_many(entries)

    def add(self, entry: str) -> "LineList":
        if entry not in self._entries:
            self._entries.append(entry)
        return self

    def add_many(self, entries: Iterable[str]) -> "LineList":
        for entry in entries:
            self.add(entry)
        return self

    def all(self) -> list[str]:
        return list(self._entries)

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def to_file_content(self) -> str:
        return "".join(f"{entry}\n" for entry in self._entries)


class FileList(LineList):
    """Audio files for keyword spotting (``-kf``)."""


class LanguageList(LineList):
    """Candidate languages for language identification (``-m`` / ``llfile``)."""

    prefix = "voxsigma_ll_"


@dataclass(frozen=True)
class Keyword:
    """A keyword to spot, with its detection threshold."""

    id: str
    threshold: float
    text: str

    def to_line(self) -> str:
        return f"{self.id} {self.threshold:.2f} {self.text}"


class KeywordList(ListFile):
    """Keywords for spotting (``-kl``), one ``<id> <threshold> <text>`` per line."""

    prefix = "voxsigma_kwl_"
    suffix = ".kwl"

    def __init__(self):
        self._keywords: list[Keyword] = []
        self._used_ids: set[str] = set()
        self._next_auto_id = 1

    def add(self, keyword_id: str, threshold: float, text: str) -> "KeywordList":
        """Add a keyword with an explicit id.

        Raises:
            ValueError: If the id is already used
        """
        return self.add_entry(Keyword(keyword_id, threshold, text))

    def add_keyword(self, text: str, threshold: float = 0.5) -> "KeywordList":
        """Add a keyword with a generated id (KW001, KW002, ...)."""
        return self.add_entry(Keyword(self._generate_id(), threshold, text))

    def add_entry(self, keyword: Keyword) -> "KeywordList":
        if keyword.id in self._used_ids:
            raise ValueError(f"Keyword ID already used: {keyword.id}")
        self._used_ids.add(keyword.id)
        self._keywords.append(keyword)
        return self

    def _generate_id(self) -> str:
        while True:
            candidate = f"KW{self._next_auto_id:03d}"
            self._next_auto_id += 1
            if candidate not in self._used_ids:
                return candidate

    def all(self) -> list[Keyword]:
        return list(self._keywords)

    def __iter__(self) -> Iterator[Keyword]:
        return iter(self._keywords)

    def __len__(self) -> int:
        return len(self._keywords)

    def to_file_content(self) -> str:
        return "".join(f"{keyword.to_line()}\n" for keyword in self._keywords)
