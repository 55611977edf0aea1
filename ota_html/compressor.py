import gzip

from ota_html.errors import ResourceError


def compress(data: bytes, level: int = 9) -> bytes:
    # mtime=0 keeps the gzip header free of timestamps.
    try:
        return gzip.compress(data, compresslevel=level, mtime=0)
    except MemoryError as e:
        raise ResourceError(f"out of memory compressing {len(data)} bytes") from e


def decompress(data: bytes) -> bytes:
    return gzip.decompress(data)
