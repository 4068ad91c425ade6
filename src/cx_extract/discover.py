from __future__ import annotations

from urllib.parse import urljoin

from bs4 import BeautifulSoup
from bs4.element import Tag

from .content import ResourceClass, ResourceReference

# Keep inline style/script text verbatim, whitespace-only bodies included.
_PRESERVE_WHITESPACE_TAGS = {"pre", "textarea", "style", "script"}


def resolve_url(raw_url: str, base_url: str) -> str:
    return urljoin(base_url, raw_url.strip())


def _external(raw_url: str | None, base_url: str) -> ResourceReference | None:
    if not raw_url or not raw_url.strip():
        return None
    try:
        return ResourceReference.external(resolve_url(raw_url, base_url))
    except ValueError:
        # Unparseable locator (e.g. a broken IPv6 host): treat as missing.
        return None


def _is_stylesheet_link(el: Tag) -> bool:
    rel = el.get("rel") or []
    if isinstance(rel, str):
        rel = rel.split()
    return any(token.lower() == "stylesheet" for token in rel)


def _inner_text(el: Tag) -> str:
    # script/style children are raw text; decode_contents leaves them unescaped.
    return el.decode_contents()


def _discover_styles(soup: BeautifulSoup, base_url: str) -> list[ResourceReference]:
    found: list[ResourceReference] = []
    inline_counter = 1
    for el in soup.find_all(["link", "style"]):
        if el.name == "link":
            if not _is_stylesheet_link(el):
                continue
            ref = _external(el.get("href"), base_url)
            if ref is not None:
                found.append(ref)
            continue

        # Empty <style> blocks are kept on purpose; only scripts are filtered.
        found.append(ResourceReference.inline("style", inline_counter, _inner_text(el)))
        inline_counter += 1
    return found


def _discover_scripts(soup: BeautifulSoup, base_url: str) -> list[ResourceReference]:
    found: list[ResourceReference] = []
    inline_counter = 1
    for el in soup.find_all("script"):
        src = el.get("src")
        if src is not None:
            # An empty or unparseable src is an external reference without a
            # locator: skip it rather than reading the body as inline.
            ref = _external(src, base_url)
            if ref is not None:
                found.append(ref)
            continue

        content = _inner_text(el)
        if content.strip():
            found.append(ResourceReference.inline("script", inline_counter, content))
            inline_counter += 1
    return found


def discover(
    markup: str,
    base_url: str,
    resource_class: ResourceClass,
) -> list[ResourceReference]:
    """Return the resources of ``resource_class`` referenced by ``markup``.

    References come back in document order. External locators are resolved
    against ``base_url``; elements whose locator is missing or cannot be
    parsed are skipped. No match yields an empty list.
    """

    soup = BeautifulSoup(
        markup,
        "html.parser",
        preserve_whitespace_tags=_PRESERVE_WHITESPACE_TAGS,
    )
    if resource_class == ResourceClass.CSS:
        return _discover_styles(soup, base_url)
    return _discover_scripts(soup, base_url)
