"""Staging layout and archive writer for client extension bundles."""

from __future__ import annotations

import shutil
import zipfile
from dataclasses import dataclass
from pathlib import Path

from .manifest import MANIFEST_FILE_NAME

ARCHIVE_EXT = "zip"
ASSETS_DIR_NAME = "assets"
STAGING_DIR_NAME = "temp"


@dataclass(frozen=True)
class StagingContext:
    """Where one pipeline run writes its files before archiving.

    Two runs sharing a context also share the staging tree: with archiving
    skipped, the second run overwrites the first one's files. An ``exclusive``
    context belongs to a single run.
    """

    output_dir: Path
    staging_dir: Path
    exclusive: bool = False

    @classmethod
    def shared(cls, output_dir: Path) -> StagingContext:
        return cls(output_dir=output_dir, staging_dir=output_dir / STAGING_DIR_NAME)

    @classmethod
    def isolated(cls, output_dir: Path, technical_id: str) -> StagingContext:
        return cls(
            output_dir=output_dir,
            staging_dir=output_dir / f"{STAGING_DIR_NAME}-{technical_id}",
            exclusive=True,
        )

    @property
    def assets_dir(self) -> Path:
        return self.staging_dir / ASSETS_DIR_NAME

    @property
    def manifest_path(self) -> Path:
        return self.staging_dir / MANIFEST_FILE_NAME

    def archive_path(self, technical_id: str) -> Path:
        return self.output_dir / f"{technical_id}.{ARCHIVE_EXT}"

    def cleanup(self) -> None:
        if self.staging_dir.exists():
            shutil.rmtree(self.staging_dir)


@dataclass(frozen=True)
class PackageArtifact:
    content_path: Path
    manifest_path: Path
    archive_path: Path | None

    @property
    def staging_kept(self) -> bool:
        return self.archive_path is None


def write_archive(archive_path: Path, *, content_path: Path, manifest_path: Path) -> None:
    archive_path.parent.mkdir(parents=True, exist_ok=True)
    with zipfile.ZipFile(archive_path, "w", compression=zipfile.ZIP_DEFLATED) as zf:
        zf.write(content_path, arcname=f"{ASSETS_DIR_NAME}/{content_path.name}")
        zf.write(manifest_path, arcname=manifest_path.name)


def package(
    context: StagingContext,
    output_file_name: str,
    merged_content: str,
    manifest_text: str,
    technical_id: str,
    *,
    skip_archive: bool,
) -> PackageArtifact:
    context.assets_dir.mkdir(parents=True, exist_ok=True)
    content_path = context.assets_dir / output_file_name
    manifest_path = context.manifest_path

    content_path.write_text(merged_content, encoding="utf-8", newline="\n")
    manifest_path.write_text(manifest_text, encoding="utf-8", newline="\n")

    if skip_archive:
        print(f"Files saved without ZIP in: {context.staging_dir}")
        if not context.exclusive:
            print(
                "Note: running both modes without --mode will overwrite "
                f"{context.staging_dir.name}/ on the second run."
            )
        return PackageArtifact(
            content_path=content_path,
            manifest_path=manifest_path,
            archive_path=None,
        )

    archive_path = context.archive_path(technical_id)
    write_archive(archive_path, content_path=content_path, manifest_path=manifest_path)
    print(f"Final ZIP created at: {archive_path}")

    context.cleanup()
    return PackageArtifact(
        content_path=content_path,
        manifest_path=manifest_path,
        archive_path=archive_path,
    )
