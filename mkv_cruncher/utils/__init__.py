"""
Utilities Package for MKV Cruncher.

Helpers that are not specific to any single stage of the pipeline.

Modules:
    - ffmpeg_utils.py: Formatting of ffmpeg command lines for logs and parsing of
      the `-progress` key=value records ffmpeg writes to stdout.
    - format_utils.py: Human-readable durations and file sizes.
"""
