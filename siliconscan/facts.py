"""Structured facts each stage contributes to the report."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class Entry:
    kind: str  # "field" | "bullet" | "text" | "heading" | "code"
    text: str = ""
    label: str = ""
    indent: int = 0
    lang: str = ""


@dataclass
class Section:
    """Facts for one pipeline stage, in the order they were observed."""

    stage: str
    title: str
    entries: list[Entry] = field(default_factory=list)

    def fact(self, label: str, value: object) -> None:
        self.entries.append(Entry("field", text=str(value), label=label))

    def bullet(self, text: str, indent: int = 0) -> None:
        self.entries.append(Entry("bullet", text=text, indent=indent))

    def text(self, text: str) -> None:
        self.entries.append(Entry("text", text=text))

    def heading(self, text: str) -> None:
        self.entries.append(Entry("heading", text=text))

    def code(self, body: str, lang: str = "") -> None:
        self.entries.append(Entry("code", text=body, lang=lang))

    def to_dict(self) -> dict:
        return {
            "stage": self.stage,
            "title": self.title,
            "entries": [
                {k: v for k, v in (("kind", e.kind), ("label", e.label), ("text", e.text),
                                   ("indent", e.indent), ("lang", e.lang)) if v or k == "kind"}
                for e in self.entries
            ],
        }
