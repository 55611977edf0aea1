import os

import pytest

from ota_html.emitter import chunked, parse_header, render_header, write_header
from ota_html.errors import WriteError


def body_lines(text):
    lines = text.splitlines()
    start = lines.index("const uint8_t OTA_HTML[] PROGMEM = {") + 1
    end = lines.index("};")
    return lines[start:end]


def test_layout():
    text = render_header(bytes([0x1F, 0x8B, 0x08]))
    assert text == (
        "#ifndef OTA_HTML_H\n"
        "#define OTA_HTML_H\n"
        "\n"
        "#include <Arduino.h>\n"
        "\n"
        "const uint8_t OTA_HTML[] PROGMEM = {\n"
        "  0x1f, 0x8b, 0x08\n"
        "};\n"
        "\n"
        "#endif // OTA_HTML_H\n"
    )


def test_exactly_one_chunk():
    lines = body_lines(render_header(bytes(range(64))))
    assert len(lines) == 1
    assert lines[0].count("0x") == 64
    assert not lines[0].endswith(",")


def test_one_byte_over():
    lines = body_lines(render_header(bytes(range(65))))
    assert len(lines) == 2
    assert lines[0].endswith("0x3f,")
    assert lines[1] == "  0x40"


def test_rows_are_64_wide():
    data = bytes(i % 256 for i in range(300))
    lines = body_lines(render_header(data))
    assert [line.count("0x") for line in lines] == [64, 64, 64, 64, 44]
    assert all(line.endswith(",") for line in lines[:-1])


def test_lowercase_hex():
    assert "0xab, 0xff" in render_header(b"\xab\xff")


@pytest.mark.parametrize("size", [0, 1, 63, 64, 65, 128, 1000])
def test_parse_back(size):
    data = bytes((i * 37) % 256 for i in range(size))
    assert parse_header(render_header(data)) == data


def test_custom_name():
    text = render_header(b"\x00", name="LOGIN_HTML")
    assert text.startswith("#ifndef LOGIN_HTML_H\n#define LOGIN_HTML_H\n")
    assert "const uint8_t LOGIN_HTML[] PROGMEM = {" in text
    assert text.endswith("#endif // LOGIN_HTML_H\n")


def test_chunked():
    assert chunked(b"abcde", 2) == [b"ab", b"cd", b"e"]
    assert chunked(b"", 64) == []


def test_write_overwrites(tmp_path):
    path = tmp_path / "OtaHTML.h"
    path.write_text("stale")
    write_header(path, b"\x01\x02")
    assert parse_header(path.read_text()) == b"\x01\x02"


def test_write_missing_directory(tmp_path):
    path = tmp_path / "missing" / "OtaHTML.h"
    with pytest.raises(WriteError) as info:
        write_header(path, b"\x01")
    assert info.value.stage == "emit"
    assert not path.parent.exists()


def test_failed_replace_keeps_old_file(tmp_path, monkeypatch):
    path = tmp_path / "OtaHTML.h"
    path.write_text("previous build")

    def boom(src, dst):
        raise OSError(28, "No space left on device")

    monkeypatch.setattr(os, "replace", boom)
    with pytest.raises(WriteError):
        write_header(path, b"\x01\x02")
    assert path.read_text() == "previous build"
    assert [p.name for p in tmp_path.iterdir()] == ["OtaHTML.h"]
