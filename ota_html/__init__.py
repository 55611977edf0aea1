from ota_html.errors import (
    BuildError,
    MinificationError,
    MissingInputError,
    ResourceError,
    WriteError,
)
from ota_html.pipeline import build

__all__ = [
    "BuildError",
    "MinificationError",
    "MissingInputError",
    "ResourceError",
    "WriteError",
    "build",
]
