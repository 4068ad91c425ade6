from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Final


class ResourceClass(str, Enum):
    CSS = "css"
    JS = "js"

    @property
    def profile(self) -> ModeProfile:
        return MODE_PROFILES[self]

    @property
    def display(self) -> str:
        return self.value.upper()


class ResourceKind(str, Enum):
    EXTERNAL = "external"
    INLINE = "inline"


@dataclass(frozen=True)
class ModeProfile:
    file_name: str
    manifest_type: str
    default_name: str
    script_element_attributes: dict[str, Any] = field(default_factory=dict)


MODE_PROFILES: Final[dict[ResourceClass, ModeProfile]] = {
    ResourceClass.CSS: ModeProfile(
        file_name="global.css",
        manifest_type="globalCSS",
        default_name="Liferay CSS Client Extension",
    ),
    ResourceClass.JS: ModeProfile(
        file_name="global.js",
        manifest_type="globalJS",
        default_name="Liferay JS Client Extension",
        script_element_attributes={
            "async": True,
            "data-attribute": "value",
            "data-senna-track": "permanent",
            "fetchpriority": "low",
        },
    ),
}


@dataclass(frozen=True)
class ResourceReference:
    kind: ResourceKind
    label: str
    locator: str | None = None
    raw_content: str | None = None

    @classmethod
    def external(cls, url: str) -> ResourceReference:
        return cls(kind=ResourceKind.EXTERNAL, label=url, locator=url)

    @classmethod
    def inline(cls, tag: str, number: int, content: str) -> ResourceReference:
        return cls(
            kind=ResourceKind.INLINE,
            label=f"<{tag}> inline #{number}",
            raw_content=content,
        )

    @property
    def is_external(self) -> bool:
        return self.kind == ResourceKind.EXTERNAL


@dataclass(frozen=True)
class ResolvedContent:
    source_label: str
    text: str
    succeeded: bool
    error: str | None = None
