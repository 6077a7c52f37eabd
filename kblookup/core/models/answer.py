"""Answer domain models returned by the synthesizer."""
from dataclasses import dataclass, field
from typing import Optional


@dataclass
class Finding:
    """Single regulated item with its limit."""
    item: str
    limit: str
    note: Optional[str] = None

    @classmethod
    def from_dict(cls, data: dict) -> "Finding":
        return cls(
            item=str(data.get("item", "")),
            limit=str(data.get("limit", "")),
            note=data.get("note") or None,
        )


@dataclass
class SourceRef:
    title: str
    url: str = ""
    source_type: Optional[str] = None

    @classmethod
    def from_dict(cls, data: dict) -> "SourceRef":
        return cls(
            title=str(data.get("title", "")),
            url=str(data.get("url", "")),
            source_type=data.get("sourceType") or data.get("source_type"),
        )


@dataclass
class RegulationAnswer:
    """Structured answer: topic, category, summary and cited findings."""
    food_item: str
    category: str
    summary: str
    pesticides: list[Finding] = field(default_factory=list)
    heavy_metals: list[Finding] = field(default_factory=list)
    others: list[Finding] = field(default_factory=list)
    sources: list[SourceRef] = field(default_factory=list)

    @property
    def findings(self) -> list[Finding]:
        return self.pesticides + self.heavy_metals + self.others

    @classmethod
    def from_dict(cls, data: dict) -> "RegulationAnswer":
        def findings(key: str, alt: str | None = None) -> list[Finding]:
            raw = data.get(key)
            if raw is None and alt:
                raw = data.get(alt)
            return [Finding.from_dict(f) for f in raw or [] if isinstance(f, dict)]

        return cls(
            food_item=str(data.get("foodItem", data.get("food_item", ""))),
            category=str(data.get("category", "")),
            summary=str(data.get("summary", "")),
            pesticides=findings("pesticides"),
            heavy_metals=findings("heavyMetals", "heavy_metals"),
            others=findings("others"),
            sources=[
                SourceRef.from_dict(s) for s in data.get("sources") or [] if isinstance(s, dict)
            ],
        )


@dataclass
class QueryAnswer:
    """Answer plus retrieval debug info."""
    answer: RegulationAnswer
    retrieved_chunks: int
    model: str
