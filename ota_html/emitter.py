import logging
import os
import re
import tempfile
from pathlib import Path

from ota_html.errors import WriteError

logger = logging.getLogger(__name__)

ARRAY_NAME = "OTA_HTML"
# Long single lines upset the Arduino IDE.
CHUNK_SIZE = 64

_ARRAY_BODY = re.compile(r"PROGMEM\s*=\s*\{(.*?)\};", re.DOTALL)
_HEX_TOKEN = re.compile(r"0x([0-9a-fA-F]{2})")


def chunked(data, size):
    return [data[i:i + size] for i in range(0, len(data), size)]


def render_header(data: bytes, name: str = ARRAY_NAME, chunk_size: int = CHUNK_SIZE) -> str:
    guard = f"{name}_H"
    rows = [
        "  " + ", ".join(f"0x{byte:02x}" for byte in chunk)
        for chunk in chunked(data, chunk_size)
    ]
    body = ",\n".join(rows)
    return (
        f"#ifndef {guard}\n"
        f"#define {guard}\n"
        "\n"
        "#include <Arduino.h>\n"
        "\n"
        f"const uint8_t {name}[] PROGMEM = {{\n"
        f"{body}\n"
        "};\n"
        "\n"
        f"#endif // {guard}\n"
    )


def parse_header(text: str) -> bytes:
    """Read the byte array back out of a rendered header."""
    match = _ARRAY_BODY.search(text)
    if match is None:
        raise ValueError("no PROGMEM byte array in header")
    return bytes(int(token, 16) for token in _HEX_TOKEN.findall(match.group(1)))


def write_header(path, data: bytes, name: str = ARRAY_NAME, chunk_size: int = CHUNK_SIZE):
    """Render and write the header, replacing any existing file in one step."""
    content = render_header(data, name, chunk_size)
    path = Path(path)
    tmp_name = None
    try:
        with tempfile.NamedTemporaryFile(
            "w", encoding="ascii", newline="\n", dir=path.parent, prefix=path.name, suffix=".tmp", delete=False
        ) as fd:
            tmp_name = fd.name
            fd.write(content)
        os.chmod(tmp_name, 0o644)
        os.replace(tmp_name, path)
    except OSError as e:
        if tmp_name is not None and os.path.exists(tmp_name):
            os.unlink(tmp_name)
        raise WriteError(f"cannot write {path}: {e.strerror or e}") from e
    logger.info("[Emitter] %s: %d bytes", name, len(data))
