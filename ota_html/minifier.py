import itertools
import logging
import re
import string
from collections import Counter
from dataclasses import dataclass

import minify_html

from ota_html.errors import MinificationError

logger = logging.getLogger(__name__)

# minify_html always does these; they can be asked for but not turned off.
ENGINE_BUILTINS = (
    "collapse_whitespace",
    "remove_attribute_quotes",
    "remove_redundant_attributes",
    "remove_script_type_attributes",
)


@dataclass(frozen=True)
class MinifyOptions:
    collapse_whitespace: bool = True
    remove_comments: bool = True
    remove_attribute_quotes: bool = True
    remove_redundant_attributes: bool = True
    use_short_doctype: bool = True
    remove_script_type_attributes: bool = True
    minify_css: bool = True
    minify_js: bool = True
    # Only safe for documents nothing outside them styles or scripts.
    shorten_class_names: bool = False
    keep_closing_tags: bool = True
    keep_html_and_head_opening_tags: bool = True

    def engine_kwargs(self):
        disabled = [name for name in ENGINE_BUILTINS if not getattr(self, name)]
        if disabled:
            raise MinificationError(
                f"minify_html cannot disable: {', '.join(disabled)}"
            )
        return {
            "keep_comments": not self.remove_comments,
            "minify_doctype": self.use_short_doctype,
            "minify_css": self.minify_css,
            "minify_js": self.minify_js,
            "keep_closing_tags": self.keep_closing_tags,
            "keep_html_and_head_opening_tags": self.keep_html_and_head_opening_tags,
        }


def minify(html: str, options: MinifyOptions = None) -> str:
    """Minify a whole document with minify_html.

    minify_html is lenient and accepts malformed markup as-is, so
    MinificationError here means an invalid option set or a failure
    inside the engine, not that the HTML was rejected.
    """
    options = options or MinifyOptions()
    kwargs = options.engine_kwargs()

    source = shorten_class_names(html) if options.shorten_class_names else html
    try:
        minified = minify_html.minify(source, **kwargs)
    except Exception as e:
        raise MinificationError(f"minify_html failed: {e}") from e

    old_size = len(html.encode("utf-8")) / 1024
    new_size = len(minified.encode("utf-8")) / 1024
    logger.info("[Minifier] Original: %.2fKB | Minified: %.2fKB", old_size, new_size)
    return minified


_START_TAG = re.compile(r"<[a-zA-Z][^\s/>]*")
_ATTR = re.compile(
    r"""(?P<name>[^\s"'<>/=]+)(?:\s*=\s*(?:"(?P<dq>[^"]*)"|'(?P<sq>[^']*)'|(?P<bare>[^\s"'=<>`]+)))?"""
)
_TAG_END = re.compile(r"\s*/?>")
_STYLE_BLOCK = re.compile(r"(<style\b[^>]*>)(.*?)(</style\s*>)", re.IGNORECASE | re.DOTALL)
_SCRIPT_BLOCK = re.compile(r"<script\b[^>]*>(.*?)</script\s*>", re.IGNORECASE | re.DOTALL)


def _short_names():
    letters = string.ascii_lowercase
    for length in itertools.count(1):
        for combo in itertools.product(letters, repeat=length):
            yield "".join(combo)


def _attr_value(match):
    for group in ("dq", "sq", "bare"):
        if match.group(group) is not None:
            return match.group(group)
    return None


def _rewrite_class_attrs(html, rename):
    """Call rename(tokens) for each class attribute of each start tag.

    Only attribute names are looked at, so text content and other
    attributes such as data-class are left alone. rename returns the new
    token list, or None to keep the attribute as written.
    """
    out = []
    pos = 0
    for tag in _START_TAG.finditer(html):
        if tag.start() < pos:
            continue
        out.append(html[pos:tag.end()])
        pos = tag.end()
        while pos < len(html):
            end = _TAG_END.match(html, pos)
            if end:
                out.append(end.group())
                pos = end.end()
                break
            attr = _ATTR.match(html, pos)
            if attr is None:
                out.append(html[pos])
                pos += 1
                continue
            value = _attr_value(attr)
            tokens = None
            if attr.group("name").lower() == "class" and value is not None:
                tokens = rename(value.split())
            out.append(attr.group() if tokens is None else f'class="{" ".join(tokens)}"')
            pos = attr.end()
    out.append(html[pos:])
    return "".join(out)


def shorten_class_names(html: str) -> str:
    """Rename classes to generated short names, most used first.

    Names that appear anywhere inside a <script> block are kept, since the
    script may build selectors from them.
    """
    # Scripts are cut out first so nothing inside them is rewritten.
    parts = re.split(r"(<script\b[^>]*>.*?</script\s*>)", html, flags=re.IGNORECASE | re.DOTALL)

    counts = Counter()
    for i in range(0, len(parts), 2):
        _rewrite_class_attrs(parts[i], lambda tokens: counts.update(tokens))
    if not counts:
        return html

    scripts = "\n".join(m.group(1) for m in _SCRIPT_BLOCK.finditer(html))
    pinned = {name for name in counts if re.search(rf"(?<![\w-]){re.escape(name)}(?![\w-])", scripts)}

    taken = set(counts)
    generated = _short_names()
    mapping = {}
    for name, _ in counts.most_common():
        if name in pinned:
            continue
        short = next(generated)
        while short in taken:
            short = next(generated)
        if len(short) < len(name):
            mapping[name] = short
            taken.add(short)
    if not mapping:
        return html

    selector = re.compile(
        r"(?<![\w-])\.("
        + "|".join(re.escape(name) for name in sorted(mapping, key=len, reverse=True))
        + r")(?![\w-])"
    )

    def rename_style(match):
        css = selector.sub(lambda m: "." + mapping[m.group(1)], match.group(2))
        return match.group(1) + css + match.group(3)

    for i in range(0, len(parts), 2):
        renamed = _rewrite_class_attrs(parts[i], lambda tokens: [mapping.get(t, t) for t in tokens])
        parts[i] = _STYLE_BLOCK.sub(rename_style, renamed)
    return "".join(parts)
