from __future__ import annotations

import html
import re
from pathlib import Path

from ..markup import clean_html_to_text
from ..models import Article
from ..utils.logging import get_logger

logger = get_logger("nbg.output.exporter")

_WORD_HEADER = (
    "<html xmlns:o='urn:schemas-microsoft-com:office:office' "
    "xmlns:w='urn:schemas-microsoft-com:office:word' "
    "xmlns='http://www.w3.org/TR/REC-html40'>"
    "<head><meta charset='utf-8'><title>{title}</title></head><body>"
)
_WORD_FOOTER = "</body></html>"

_unsafe_filename_re = re.compile(r'[\\/:*?"<>|\x00-\x1f]+')


def default_filename(article: Article, ext: str) -> str:
    """First 20 characters of the title, made safe for the filesystem."""
    stem = _unsafe_filename_re.sub("_", article.title[:20]).strip(" ._") or "article"
    return f"{stem}.{ext.lstrip('.')}"


def render_html(article: Article) -> str:
    title = html.escape(article.title)
    return (
        "<!DOCTYPE html>\n<html>\n<head>\n<meta charset=\"utf-8\">\n"
        f"<title>{title}</title>\n</head>\n<body>\n<h1>{title}</h1>\n"
        f"{article.body}\n</body>\n</html>\n"
    )


def render_doc(article: Article) -> str:
    return _WORD_HEADER.format(title=html.escape(article.title)) + article.body + _WORD_FOOTER


def render_text(article: Article) -> str:
    lines = [article.title, "", clean_html_to_text(article.body)]
    if article.tags:
        lines += ["", " ".join(article.tags)]
    if article.sources:
        lines += ["", "Sources:"]
        lines += [f"- {s.label} ({s.locator})" if s.locator else f"- {s.label}" for s in article.sources]
    return "\n".join(lines) + "\n"


_RENDERERS = {
    ".html": render_html,
    ".htm": render_html,
    ".doc": render_doc,
    ".txt": render_text,
}


def export_article(article: Article, path: Path | str) -> Path:
    """Write ``article`` to ``path``; the format follows the file suffix."""
    out_path = Path(path)
    renderer = _RENDERERS.get(out_path.suffix.lower())
    if renderer is None:
        raise ValueError(f"Unsupported export format '{out_path.suffix}'. Use one of: {sorted(_RENDERERS)}")
    out_path.parent.mkdir(parents=True, exist_ok=True)
    out_path.write_text(renderer(article), encoding="utf-8")
    logger.info("Exported article to %s", out_path)
    return out_path
