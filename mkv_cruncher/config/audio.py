"""
Configuration settings related to audio stream selection and re-encoding.

Audio tracks are kept by language and stripped of commentary/description
tracks. Tracks stored in a lossless codec are re-encoded to a lossy target to
keep output sizes in check; everything else is stream-copied.
"""

# ======================================================================================
# Audio Stream Selection
# ======================================================================================

# Languages whose audio tracks are kept. 'und' keeps untagged tracks just in case;
# an empty language tag is always accepted as well.
AUDIO_LANGUAGES = ("jpn", "chi", "und")

# Lowercase title fragments that mark a track as unwanted (commentary tracks,
# audio description for the visually impaired).
AUDIO_UNWANTED_TITLE_WORDS = ("commentary", "description")

# Channel counts preferred when more than one track survives filtering.
# 0 is what ffprobe reports when it could not read the layout, kept as a fallback.
AUDIO_PREFERRED_CHANNELS = (2, 0)


# ======================================================================================
# Audio Encoding Parameters
# ======================================================================================

# Codecs considered lossless (or uncompressed). Tracks in these codecs are re-encoded.
LOSSLESS_AUDIO_CODECS = ("dts", "flac", "truehd", "pcm_s24le")

# Encoder and channel count used for re-encoded lossless tracks.
LOSSLESS_TARGET_ENCODER = "libopus"
LOSSLESS_TARGET_CHANNELS = 2
