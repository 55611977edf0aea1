class BuildError(Exception):
    """Base error for the header build. `stage` names the step that failed."""

    stage = "build"

    def __init__(self, message):
        super().__init__(f"[{self.stage}] {message}")


class MissingInputError(BuildError):
    stage = "inline"


class MinificationError(BuildError):
    stage = "minify"


class ResourceError(BuildError):
    stage = "compress"


class WriteError(BuildError):
    stage = "emit"
