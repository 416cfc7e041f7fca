"""Fatal post-processing errors."""


class PostProcessorError(Exception):
    """Base class for errors that abort a post-processing run."""


class UnsupportedUnitError(PostProcessorError):
    """The program is not in millimeters; the controller only runs metric programs."""


class RadiusCompensationError(PostProcessorError):
    """Cutter radius compensation was requested; the controller has none."""
