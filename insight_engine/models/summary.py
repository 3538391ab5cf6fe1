from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple


def _require(payload: Dict[str, Any], key: str, expected_type, where: str):
    if key not in payload:
        raise ValueError(f"{where}: missing required field '{key}'")
    value = payload[key]
    # bool is an int subclass; JSON true/false is never a valid chapter id
    if not isinstance(value, expected_type) or isinstance(value, bool):
        raise ValueError(f"{where}: field '{key}' has unexpected type {type(value).__name__}")
    return value


@dataclass(frozen=True)
class Chapter:
    id: int
    title: str
    summary: str
    key_points: Tuple[str, ...] = field(default_factory=tuple)

    @classmethod
    def from_dict(cls, payload: Any, index: int = 0) -> "Chapter":
        where = f"chapters[{index}]"
        if not isinstance(payload, dict):
            raise ValueError(f"{where}: expected an object")

        key_points = _require(payload, "keyPoints", list, where)
        if not all(isinstance(point, str) for point in key_points):
            raise ValueError(f"{where}: keyPoints must be a list of strings")

        return cls(
            id=_require(payload, "id", int, where),
            title=_require(payload, "title", str, where),
            summary=_require(payload, "summary", str, where),
            key_points=tuple(key_points),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "summary": self.summary,
            "keyPoints": list(self.key_points),
        }


@dataclass(frozen=True)
class SummaryDocument:
    title: str
    author_alias: str
    executive_summary: str
    chapters: Tuple[Chapter, ...] = field(default_factory=tuple)
    conclusion: str = ""

    @classmethod
    def from_dict(cls, payload: Any) -> "SummaryDocument":
        """
        Build a document from the decoded model response.

        The response is untrusted: every required field is checked, chapter
        ids must be unique and at least one chapter must be present.
        Chapter and bullet counts are prompt conventions and are not checked.

        Raises:
            ValueError: If the payload does not have the expected shape.
        """
        where = "document"
        if not isinstance(payload, dict):
            raise ValueError(f"{where}: expected an object, got {type(payload).__name__}")

        raw_chapters = _require(payload, "chapters", list, where)
        if not raw_chapters:
            raise ValueError(f"{where}: chapters must not be empty")

        chapters = tuple(Chapter.from_dict(item, i) for i, item in enumerate(raw_chapters))
        ids = [ch.id for ch in chapters]
        if len(set(ids)) != len(ids):
            raise ValueError(f"{where}: duplicate chapter ids {ids}")

        return cls(
            title=_require(payload, "title", str, where),
            author_alias=_require(payload, "authorAlias", str, where),
            executive_summary=_require(payload, "executiveSummary", str, where),
            chapters=chapters,
            conclusion=_require(payload, "conclusion", str, where),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "title": self.title,
            "authorAlias": self.author_alias,
            "executiveSummary": self.executive_summary,
            "chapters": [ch.to_dict() for ch in self.chapters],
            "conclusion": self.conclusion,
        }

    @property
    def chapter_ids(self) -> List[int]:
        return [ch.id for ch in self.chapters]

    def find_chapter(self, chapter_id: Optional[int]) -> Optional[Chapter]:
        for ch in self.chapters:
            if ch.id == chapter_id:
                return ch
        return None

    def position_of(self, chapter_id: Optional[int]) -> Optional[int]:
        """Array position of a chapter id, or None if it is not in this document."""
        for i, ch in enumerate(self.chapters):
            if ch.id == chapter_id:
                return i
        return None
