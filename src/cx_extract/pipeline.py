from __future__ import annotations

import sys
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from pathlib import Path

from .content import ResourceClass
from .discover import discover
from .http_client import FetchError, HttpClient, fetch_page
from .manifest import build_manifest, render_manifest
from .packaging import PackageArtifact, StagingContext, package
from .resolve import ContentResolver, merge
from .selection import SelectionService, prompt_visible_name, select_resources

NameAsker = Callable[[ResourceClass], str]

STATUS_PACKAGED = "packaged"
STATUS_NOTHING_FOUND = "nothing_found"
STATUS_NOTHING_SELECTED = "nothing_selected"
STATUS_FETCH_FAILED = "fetch_failed"


@dataclass
class ExtractConfig:
    url: str
    output_dir: Path = Path("output")
    auto_approve_all: bool = False
    skip_archive: bool = False
    visible_name: str | None = None
    isolate_staging: bool = False
    max_workers: int = 8


@dataclass(frozen=True)
class PipelineResult:
    resource_class: ResourceClass
    status: str
    discovered: int = 0
    selected: int = 0
    failed: int = 0
    technical_id: str | None = None
    artifact: PackageArtifact | None = None
    error: str | None = None


def run_once(
    config: ExtractConfig,
    resource_class: ResourceClass,
    *,
    http: HttpClient,
    selector: SelectionService,
    ask_name: NameAsker = prompt_visible_name,
    resolver: ContentResolver | None = None,
) -> PipelineResult:
    """Run fetch -> discover -> select -> resolve -> manifest -> package once.

    Raises FetchError when the page itself cannot be fetched. Everything after
    that degrades to a smaller (or empty) result instead of failing.
    """

    label = resource_class.display
    print(f"Fetching {config.url} for {label}...")

    markup = fetch_page(http, config.url)
    found = discover(markup, config.url, resource_class)
    if not found:
        print(f"No {label} resources found.")
        return PipelineResult(resource_class, STATUS_NOTHING_FOUND)

    if config.auto_approve_all:
        print(f"--all flag: all {label} resources included.")
    selected = select_resources(
        found,
        auto_approve_all=config.auto_approve_all,
        service=selector,
        resource_class=resource_class,
    )
    if not selected:
        print(f"No {label} selected. Skipping.")
        return PipelineResult(
            resource_class, STATUS_NOTHING_SELECTED, discovered=len(found)
        )

    visible_name = config.visible_name or ask_name(resource_class)
    manifest = build_manifest(
        visible_name, resource_class, resource_class.profile.file_name
    )
    print(f"Selected {label} blocks: {len(selected)}")

    resolver = resolver or ContentResolver(http, max_workers=config.max_workers)
    resolved = resolver.resolve(selected)
    for item in resolved:
        if item.succeeded:
            print(f"Loaded {item.source_label}")
    failed = sum(1 for item in resolved if not item.succeeded)

    if config.isolate_staging:
        context = StagingContext.isolated(config.output_dir, manifest.technical_id)
    else:
        context = StagingContext.shared(config.output_dir)

    artifact = package(
        context,
        manifest.output_file_name,
        merge(resolved),
        render_manifest(manifest),
        manifest.technical_id,
        skip_archive=config.skip_archive,
    )
    return PipelineResult(
        resource_class,
        STATUS_PACKAGED,
        discovered=len(found),
        selected=len(selected),
        failed=failed,
        technical_id=manifest.technical_id,
        artifact=artifact,
    )


def run(
    config: ExtractConfig,
    modes: Iterable[ResourceClass],
    *,
    http: HttpClient,
    selector: SelectionService,
    ask_name: NameAsker = prompt_visible_name,
) -> list[PipelineResult]:
    """Run each resource class one after the other.

    A page fetch failure ends that class's run only; the next class still runs.
    """

    results: list[PipelineResult] = []
    for resource_class in modes:
        try:
            result = run_once(
                config,
                resource_class,
                http=http,
                selector=selector,
                ask_name=ask_name,
            )
        except FetchError as e:
            print(str(e), file=sys.stderr)
            result = PipelineResult(resource_class, STATUS_FETCH_FAILED, error=str(e))
        results.append(result)
    return results
