from __future__ import annotations

import zipfile
from pathlib import Path

import yaml

from cx_extract.content import ResourceClass
from cx_extract.pipeline import (
    STATUS_FETCH_FAILED,
    STATUS_NOTHING_FOUND,
    STATUS_NOTHING_SELECTED,
    STATUS_PACKAGED,
    ExtractConfig,
    run,
    run_once,
)

PAGE = "https://example.com/"
PAGE_HTML = """
<html><head>
  <link rel="stylesheet" href="a.css">
  <style>body{color:red}</style>
  <script src="/js/app.js"></script>
  <script>window.x = 1;</script>
</head><body></body></html>
"""


def _no_prompt(_cls: ResourceClass) -> str:
    raise AssertionError("name prompt should not be used")


def test_css_run_with_all(tmp_path: Path, fake_http_factory, fixed_selection_factory) -> None:
    http = fake_http_factory({PAGE: PAGE_HTML, "https://example.com/a.css": "a{}"})
    selector = fixed_selection_factory([])
    cfg = ExtractConfig(
        url=PAGE,
        output_dir=tmp_path,
        auto_approve_all=True,
        skip_archive=True,
        visible_name="My Cool Site!",
    )

    result = run_once(cfg, ResourceClass.CSS, http=http, selector=selector, ask_name=_no_prompt)

    assert result.status == STATUS_PACKAGED
    assert result.technical_id == "my-cool-site-css"
    assert selector.calls == []
    merged = (tmp_path / "temp" / "assets" / "global.css").read_text(encoding="utf-8")
    assert "/* https://example.com/a.css */\na{}" in merged
    assert "/* <style> inline #1 */\nbody{color:red}" in merged
    assert merged.index("a.css") < merged.index("inline #1")


def test_failed_external_still_packages(tmp_path: Path, fake_http_factory, fixed_selection_factory) -> None:
    http = fake_http_factory({PAGE: PAGE_HTML})
    cfg = ExtractConfig(url=PAGE, output_dir=tmp_path, auto_approve_all=True, visible_name="Site")

    result = run_once(cfg, ResourceClass.JS, http=http, selector=fixed_selection_factory([]))

    assert result.status == STATUS_PACKAGED
    assert result.failed == 1
    assert result.artifact is not None and result.artifact.archive_path is not None
    with zipfile.ZipFile(result.artifact.archive_path) as zf:
        body = zf.read("assets/global.js").decode("utf-8")
        manifest = yaml.safe_load(zf.read("client-extension.yaml"))
    assert body == "/* <script> inline #1 */\nwindow.x = 1;"
    assert manifest["site-js"]["scriptElementAttributes"]["fetchpriority"] == "low"
    assert not (tmp_path / "temp").exists()


def test_nothing_found(tmp_path: Path, fake_http_factory, fixed_selection_factory) -> None:
    http = fake_http_factory({PAGE: "<p>plain</p>"})
    selector = fixed_selection_factory([0])
    cfg = ExtractConfig(url=PAGE, output_dir=tmp_path)

    result = run_once(cfg, ResourceClass.CSS, http=http, selector=selector, ask_name=_no_prompt)

    assert result.status == STATUS_NOTHING_FOUND
    assert selector.calls == []
    assert not tmp_path.joinpath("temp").exists()


def test_nothing_selected(tmp_path: Path, fake_http_factory, fixed_selection_factory, capsys) -> None:
    http = fake_http_factory({PAGE: PAGE_HTML})
    cfg = ExtractConfig(url=PAGE, output_dir=tmp_path)

    result = run_once(
        cfg,
        ResourceClass.CSS,
        http=http,
        selector=fixed_selection_factory([]),
        ask_name=_no_prompt,
    )

    assert result.status == STATUS_NOTHING_SELECTED
    assert result.discovered == 2
    assert http.requested == [PAGE]
    assert "No CSS selected. Skipping." in capsys.readouterr().out
    assert list(tmp_path.iterdir()) == []


def test_operator_subset_and_prompted_name(tmp_path: Path, fake_http_factory, fixed_selection_factory) -> None:
    http = fake_http_factory({PAGE: PAGE_HTML, "https://example.com/a.css": "a{}"})
    asked: list[ResourceClass] = []

    def ask(cls: ResourceClass) -> str:
        asked.append(cls)
        return "Picked"

    cfg = ExtractConfig(url=PAGE, output_dir=tmp_path)
    result = run_once(cfg, ResourceClass.CSS, http=http, selector=fixed_selection_factory([1]), ask_name=ask)

    assert asked == [ResourceClass.CSS]
    assert result.selected == 1
    assert "https://example.com/a.css" not in http.requested
    with zipfile.ZipFile(tmp_path / "picked-css.zip") as zf:
        assert zf.read("assets/global.css").decode("utf-8") == "/* <style> inline #1 */\nbody{color:red}"


def test_both_modes_share_name(tmp_path: Path, fake_http_factory, fixed_selection_factory) -> None:
    http = fake_http_factory(
        {
            PAGE: PAGE_HTML,
            "https://example.com/a.css": "a{}",
            "https://example.com/js/app.js": "app()",
        }
    )
    cfg = ExtractConfig(url=PAGE, output_dir=tmp_path, auto_approve_all=True, visible_name="Shared Name")

    results = run(
        cfg,
        [ResourceClass.CSS, ResourceClass.JS],
        http=http,
        selector=fixed_selection_factory([]),
        ask_name=_no_prompt,
    )

    assert [r.technical_id for r in results] == ["shared-name-css", "shared-name-js"]
    for tid in ("shared-name-css", "shared-name-js"):
        with zipfile.ZipFile(tmp_path / f"{tid}.zip") as zf:
            doc = yaml.safe_load(zf.read("client-extension.yaml"))
        assert doc[tid]["name"] == "Shared Name"


def test_no_zip_second_class_overwrites_staging(tmp_path: Path, fake_http_factory, fixed_selection_factory) -> None:
    http = fake_http_factory({PAGE: PAGE_HTML})
    cfg = ExtractConfig(
        url=PAGE,
        output_dir=tmp_path,
        auto_approve_all=True,
        skip_archive=True,
        visible_name="Site",
    )

    run(cfg, [ResourceClass.CSS, ResourceClass.JS], http=http, selector=fixed_selection_factory([]))

    manifest = yaml.safe_load((tmp_path / "temp" / "client-extension.yaml").read_text(encoding="utf-8"))
    assert list(manifest) == ["assemble", "site-js"]
    assert not list(tmp_path.glob("*.zip"))


def test_isolated_staging_keeps_both(tmp_path: Path, fake_http_factory, fixed_selection_factory) -> None:
    http = fake_http_factory({PAGE: PAGE_HTML})
    cfg = ExtractConfig(
        url=PAGE,
        output_dir=tmp_path,
        auto_approve_all=True,
        skip_archive=True,
        visible_name="Site",
        isolate_staging=True,
    )

    run(cfg, [ResourceClass.CSS, ResourceClass.JS], http=http, selector=fixed_selection_factory([]))

    assert (tmp_path / "temp-site-css" / "assets" / "global.css").exists()
    assert (tmp_path / "temp-site-js" / "assets" / "global.js").exists()


def test_page_fetch_failure_aborts_class_only(tmp_path: Path, fake_http_factory, fixed_selection_factory, capsys) -> None:
    http = fake_http_factory({})
    cfg = ExtractConfig(url=PAGE, output_dir=tmp_path, auto_approve_all=True, visible_name="Site")

    results = run(cfg, [ResourceClass.CSS, ResourceClass.JS], http=http, selector=fixed_selection_factory([]))

    assert [r.status for r in results] == [STATUS_FETCH_FAILED, STATUS_FETCH_FAILED]
    assert http.requested == [PAGE, PAGE]
    assert "Failed to fetch https://example.com/" in capsys.readouterr().err
    assert not tmp_path.joinpath("temp").exists()


def test_malformed_link_does_not_abort_run(tmp_path: Path, fake_http_factory, fixed_selection_factory) -> None:
    html = (
        '<link rel="stylesheet" href="http://[broken/a.css">'
        '<link rel="stylesheet" href="ok.css">'
        '<script src="http://[broken/x.js"></script><script>go()</script>'
    )
    http = fake_http_factory({PAGE: html, "https://example.com/ok.css": "ok{}"})
    cfg = ExtractConfig(url=PAGE, output_dir=tmp_path, auto_approve_all=True, visible_name="Site")

    results = run(cfg, [ResourceClass.CSS, ResourceClass.JS], http=http, selector=fixed_selection_factory([]))

    assert [r.status for r in results] == [STATUS_PACKAGED, STATUS_PACKAGED]
    assert [r.discovered for r in results] == [1, 1]
    with zipfile.ZipFile(tmp_path / "site-css.zip") as zf:
        assert zf.read("assets/global.css").decode("utf-8") == "/* https://example.com/ok.css */\nok{}"
