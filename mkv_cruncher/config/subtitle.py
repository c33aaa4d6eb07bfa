"""
Configuration settings related to subtitle and attachment selection.
"""

# --- Subtitle Selection ---

# Languages whose subtitle tracks are kept ('enm' is Middle English, which some
# release groups use to tag alternative English translations).
SUBTITLE_LANGUAGES = ("eng", "enm", "jpn", "spa", "und")

# Lowercase title fragments for tracks that only carry partial dialogue or
# unwanted content. Japanese tracks are never dropped by this list.
SUBTITLE_UNWANTED_WORDS = (
    "s&s",
    "signs",
    "songs",
    "spain",
    "closed",
    "captions",
    "closed captions",
    "commentary",
)

# Title fragments / language code identifying Japanese subtitle tracks.
JAPANESE_TITLE_WORDS = ("jap", "jpn")
JAPANESE_LANGUAGE = "jpn"

# Styled subtitle codec preferred over bitmap (PGS/VobSub) duplicates.
ASS_CODEC = "ass"


# --- Attachment Selection ---

# Filename fragments that identify font attachments.
FONT_FILENAME_WORDS = ("ttf", "otf")

# Treat attachments without any extension as fonts (some muxers dump fonts
# without a suffix).
KEEP_EXTENSIONLESS_ATTACHMENTS = True
