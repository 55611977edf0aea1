import logging
from pathlib import Path

from ota_html import config
from ota_html.compressor import compress
from ota_html.emitter import write_header
from ota_html.errors import BuildError
from ota_html.inliner import inline_script, read_source
from ota_html.minifier import minify

logger = logging.getLogger(__name__)


def build(html_path=None, script_path=None, output_path=None, options=None):
    """Inline, minify, gzip and emit the OTA page as a PROGMEM header.

    Nothing is written unless every earlier stage succeeded.
    """
    html_path = Path(html_path or config.HTML_PATH)
    script_path = Path(script_path or config.SCRIPT_PATH)
    output_path = Path(output_path or config.OUTPUT_PATH)

    index_html = read_source(html_path, "HTML source")
    spark_md5 = read_source(script_path, "script payload")

    index_html = inline_script(index_html, spark_md5)
    minified = minify(index_html, options or config.DEFAULT_OPTIONS)
    gzipped = compress(minified.encode("utf-8"))

    write_header(output_path, gzipped)
    logger.info("%s file created successfully!", output_path.name)
    return output_path


def main():
    logging.basicConfig(level=logging.INFO, format="%(levelname)s: %(message)s")
    try:
        build()
    except BuildError as e:
        logger.error("Build failed %s", e)
        return 1
    return 0
