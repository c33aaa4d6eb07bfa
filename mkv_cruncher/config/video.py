"""
Configuration settings related to video processing.

This module defines the target codec, the size/duration thresholds that decide
whether a file already in the target codec is worth re-encoding, and the
encoder parameters used when it is.
"""

# --- Transcode Decision ---

# Codec name, as reported by ffprobe, that the library is being converted to.
TARGET_VIDEO_CODEC = "av1"

# Files at least this long (55 minutes) are judged against the large-file threshold.
LONG_DURATION_SECONDS = 55 * 60.0

# Files already in the target codec are only re-encoded above these sizes.
LARGE_FILE_THRESHOLD = 5 * 1024**3  # 5 GiB
SMALL_FILE_THRESHOLD = 600 * 1024**2  # 600 MiB

# --- Encoder Settings ---
VIDEO_ENCODER = "libsvtav1"
VIDEO_CRF = 30
VIDEO_PRESET = 7
VIDEO_GOP_SIZE = 120
VIDEO_PIXEL_FORMAT = "yuv420p10le"

# Environment passed to ffmpeg. SVT-AV1 prints its whole configuration on stderr otherwise.
ENCODER_ENVIRONMENT = {"SVT_LOG": "fatal"}

# --- Input Delivery ---

# Files smaller than this are read into memory and piped to ffmpeg's stdin.
PRELOAD_THRESHOLD = 3 * 1024**3  # 3 GiB
