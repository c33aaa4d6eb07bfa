"""
This package contains the core domain models of MKV Cruncher.

The domain layer represents the fundamental concepts of the crunching process,
independent of the services that probe files, run ffmpeg or move outputs around.
Every model here is an immutable value object, which keeps the stream selector and
command builder pure and easy to test.

Modules:
    exceptions.py: The exception hierarchy. The batch driver decides whether to
                   skip a file or abort the batch purely from the exception type.
    media.py: `MediaFile` and `Stream`, the parsed ffprobe result with one tagged
              kind (audio, video, subtitle, attachment) per stream.
    selection.py: `SelectionResult`, the per-category keep-list.
    command.py: `EncodeCommand` and its input-delivery modes.
"""
