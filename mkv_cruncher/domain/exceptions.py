"""
Defines custom exception types for MKV Cruncher.

These exceptions allow for specific and expressive error handling throughout the
crunching pipeline. The batch driver decides what to do with a failure purely from
its type: probe and precondition failures skip the current file, while encoding and
finalize failures stop the batch and roll back the intermediate directory.

All custom exceptions inherit from the base `CruncherException`.
"""


class CruncherException(Exception):
    """Base class for all custom exceptions in MKV Cruncher."""

    pass


class ConfigurationException(CruncherException):
    """Raised when the user configuration file is missing, unreadable or invalid."""

    pass


# --- Probe Specific Exceptions ---
class ProbeException(CruncherException):
    """
    Base class for failures while probing a container with ffprobe.

    Probe failures are recoverable at batch granularity: a single malformed file
    is logged and skipped, the rest of the library is still processed.
    """

    pass


class NumberParseException(ProbeException):
    """Raised when a numeric probe field (size, duration) cannot be parsed."""

    def __init__(self, field_name: str, value: object):
        self.field_name = field_name
        self.value = value
        super().__init__(f"Failed to parse {field_name} '{value}' as a number.")


class UnknownCodecTypeException(ProbeException):
    """
    Raised when ffprobe reports a stream whose codec type is not audio, video,
    subtitle or attachment. Such streams are never silently dropped.
    """

    def __init__(self, codec_type: object):
        self.codec_type = codec_type
        super().__init__(f"Unknown codec type '{codec_type}'.")


class ProbeExecException(ProbeException):
    """Raised when the ffprobe subprocess cannot be launched or exits with an error."""

    pass


class ProbeDecodeException(ProbeException):
    """Raised when the ffprobe output is not the expected JSON structure."""

    pass


# --- Precondition Exceptions ---
class PreconditionException(CruncherException):
    """Base class for files that cannot enter the pipeline at all."""

    pass


class NoVideoStreamException(PreconditionException):
    """Raised when a container has no video stream to map or judge."""

    pass


# --- Encoding Specific Exceptions ---
class EncodingException(CruncherException):
    """Base class for exceptions raised while running the ffmpeg encode. Fatal to the batch."""

    pass


class EncoderExitException(EncodingException):
    """Raised when ffmpeg exits with a non-zero status code."""

    def __init__(self, returncode: int):
        self.returncode = returncode
        super().__init__(f"ffmpeg exited with status {returncode}.")


class EncoderIOException(EncodingException):
    """
    Raised when ffmpeg cannot be started or communicating with it fails
    (for example the stdin writer hitting a broken pipe).
    """

    pass


# --- Finalize Specific Exceptions ---
class FinalizeException(CruncherException):
    """
    Base class for failures while moving the staged output to its destination.

    These are fatal: the batch stops and the intermediate directory is purged.
    """

    pass


class CopyFailedException(FinalizeException):
    """Raised when copying the staged file to the output directory fails."""

    pass


class SizeMismatchException(FinalizeException):
    """Raised when the number of bytes copied differs from the staged file's size."""

    def __init__(self, expected: int, copied: int):
        self.expected = expected
        self.copied = copied
        super().__init__(f"Copied {copied} bytes, but the staged file has {expected} bytes.")


class ChecksumMismatchException(FinalizeException):
    """Raised when the destination file's digest differs from the staged file's digest."""

    pass


class StagedCleanupException(FinalizeException):
    """Raised when the staged file cannot be deleted after a successful copy."""

    pass
