import logging
import re

from ota_html.errors import MissingInputError

logger = logging.getLogger(__name__)


def marker_pattern(name="sparkmd5", src="node_modules/spark-md5/spark-md5.js"):
    """Build directive comment followed by the script tag it stands in for."""
    return re.compile(
        rf'<!-- build:{re.escape(name)} -->\s*<script src="{re.escape(src)}"></script>'
    )


SPARK_MD5_MARKER = marker_pattern()


def read_source(path, what):
    try:
        with open(path, "r", encoding="utf-8") as fd:
            return fd.read()
    except OSError as e:
        raise MissingInputError(f"cannot read {what} {path}: {e.strerror or e}") from e
    except UnicodeDecodeError as e:
        raise MissingInputError(f"{what} {path} is not valid UTF-8: {e.reason} at byte {e.start}") from e


def inline_script(html, payload, pattern=None):
    pattern = pattern or SPARK_MD5_MARKER
    # A function replacement keeps backslashes in the payload verbatim.
    inlined, count = pattern.subn(lambda _: f"<script>{payload}</script>", html)
    if count == 0:
        logger.warning("[Inliner] marker %r not found, document left as is", pattern.pattern)
    else:
        logger.debug("[Inliner] replaced %d marker(s)", count)
    return inlined
