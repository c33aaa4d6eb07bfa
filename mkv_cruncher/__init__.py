"""
MKV Cruncher: shrinks a directory of Matroska files by dropping unwanted tracks and
re-encoding oversized video.

Layout:
    config/    default rules, the user config file and the per-run `Settings`
    domain/    probe data model, selection results, encode commands and exceptions
    services/  probing, stream selection, command building, execution, finalizing
    pipeline/  the batch driver tying the services together
    utils/     small formatting and ffmpeg helpers
"""
