from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Any

import yaml

from .content import ResourceClass

MANIFEST_FILE_NAME = "client-extension.yaml"
ASSEMBLE_RULES: list[dict[str, str]] = [{"from": "assets", "into": "static"}]

_VISIBLE_NAME_RE = re.compile(r"^[A-Za-z0-9\s-]+$")
NAME_RULE_MESSAGE = "Only letters, numbers, spaces and dashes are allowed."


def is_valid_visible_name(name: str) -> bool:
    return bool(_VISIBLE_NAME_RE.match(name))


def technical_id(visible_name: str, resource_class: ResourceClass) -> str:
    """Derive the archive/manifest key, e.g. "My Cool Site!" -> "my-cool-site-css"."""

    slug = visible_name.lower()
    slug = re.sub(r"\s+", "-", slug)
    slug = re.sub(r"[^a-z0-9-]", "", slug)
    return f"{slug}-{resource_class.value}"


@dataclass(frozen=True)
class PackageManifest:
    technical_id: str
    visible_name: str
    resource_class: ResourceClass
    output_file_name: str
    extra_attributes: dict[str, Any] = field(default_factory=dict)

    def to_document(self) -> dict[str, Any]:
        entry: dict[str, Any] = {
            "name": self.visible_name,
            "type": self.resource_class.profile.manifest_type,
            "url": self.output_file_name,
        }
        if self.extra_attributes:
            entry["scriptElementAttributes"] = dict(self.extra_attributes)
        return {
            "assemble": [dict(rule) for rule in ASSEMBLE_RULES],
            self.technical_id: entry,
        }


def build_manifest(
    visible_name: str,
    resource_class: ResourceClass,
    output_file_name: str,
) -> PackageManifest:
    return PackageManifest(
        technical_id=technical_id(visible_name, resource_class),
        visible_name=visible_name,
        resource_class=resource_class,
        output_file_name=output_file_name,
        extra_attributes=dict(resource_class.profile.script_element_attributes),
    )


def render_manifest(manifest: PackageManifest) -> str:
    return yaml.safe_dump(
        manifest.to_document(),
        sort_keys=False,
        default_flow_style=False,
        allow_unicode=True,
    )
