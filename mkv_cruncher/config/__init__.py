"""
Configuration Package for MKV Cruncher.

This package centralizes the static defaults for the application. The values
defined here are only defaults: at startup they are merged with the optional
YAML user configuration and the command-line arguments into a single
`Settings` object (see `settings.py`), which is then passed explicitly to every
component that needs it.

This package includes settings for:
- Logging format, container extension and user config location (`common.py`).
- Video transcode thresholds and target encoder parameters (`video.py`).
- Audio language allow-lists and lossless re-encode targets (`audio.py`).
- Subtitle and attachment selection word lists (`subtitle.py`).
"""
