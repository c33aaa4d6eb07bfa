"""
The run-wide `Settings` object.

Defaults come from the constants in this package, are overridden by the YAML user
configuration, and finally by the command-line arguments. The resulting frozen
dataclass is created once in `main.py` and passed explicitly to the pipeline and
every service, so none of the components read global state.
"""
from dataclasses import dataclass, field, fields, replace
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

from loguru import logger

from ..domain.exceptions import ConfigurationException
from . import audio, subtitle, video
from .common import CONTAINER_EXTENSION, FFMPEG_BINARY, FFPROBE_BINARY


class TranscodeMode(str, Enum):
    """How the video transcode decision is made."""

    AUTO = "auto"
    FORCE = "force"
    NEVER = "never"


class PreloadMode(str, Enum):
    """When a source file is read into memory and piped to the encoder."""

    AUTO = "auto"  # whenever the file is below the preload threshold
    TRANSCODE_ONLY = "transcode-only"  # only when the video is re-encoded as well
    NEVER = "never"


@dataclass(frozen=True)
class Settings:
    input_dir: Path = Path(".")
    output_dir: Path = Path(".")
    intermediate_dir: Optional[Path] = None
    dry_run: bool = False
    recursive: bool = False
    transcode_mode: TranscodeMode = TranscodeMode.AUTO
    preload_mode: PreloadMode = PreloadMode.AUTO

    container_extension: str = CONTAINER_EXTENSION
    ffmpeg_binary: str = FFMPEG_BINARY
    ffprobe_binary: str = FFPROBE_BINARY

    # video
    target_video_codec: str = video.TARGET_VIDEO_CODEC
    long_duration_seconds: float = video.LONG_DURATION_SECONDS
    large_file_threshold: int = video.LARGE_FILE_THRESHOLD
    small_file_threshold: int = video.SMALL_FILE_THRESHOLD
    video_encoder: str = video.VIDEO_ENCODER
    video_crf: int = video.VIDEO_CRF
    video_preset: int = video.VIDEO_PRESET
    video_gop_size: int = video.VIDEO_GOP_SIZE
    video_pixel_format: str = video.VIDEO_PIXEL_FORMAT
    encoder_environment: Dict[str, str] = field(
        default_factory=lambda: dict(video.ENCODER_ENVIRONMENT)
    )
    preload_threshold: int = video.PRELOAD_THRESHOLD

    # audio
    audio_languages: Tuple[str, ...] = audio.AUDIO_LANGUAGES
    audio_unwanted_title_words: Tuple[str, ...] = audio.AUDIO_UNWANTED_TITLE_WORDS
    audio_preferred_channels: Tuple[int, ...] = audio.AUDIO_PREFERRED_CHANNELS
    lossless_audio_codecs: Tuple[str, ...] = audio.LOSSLESS_AUDIO_CODECS
    lossless_target_encoder: str = audio.LOSSLESS_TARGET_ENCODER
    lossless_target_channels: int = audio.LOSSLESS_TARGET_CHANNELS

    # subtitles and attachments
    subtitle_languages: Tuple[str, ...] = subtitle.SUBTITLE_LANGUAGES
    subtitle_unwanted_words: Tuple[str, ...] = subtitle.SUBTITLE_UNWANTED_WORDS
    japanese_title_words: Tuple[str, ...] = subtitle.JAPANESE_TITLE_WORDS
    japanese_language: str = subtitle.JAPANESE_LANGUAGE
    ass_codec: str = subtitle.ASS_CODEC
    font_filename_words: Tuple[str, ...] = subtitle.FONT_FILENAME_WORDS
    keep_extensionless_attachments: bool = subtitle.KEEP_EXTENSIONLESS_ATTACHMENTS

    @property
    def staging_dir(self) -> Path:
        """Where ffmpeg writes its output: the intermediate dir if set, else the output dir."""
        return self.intermediate_dir if self.intermediate_dir is not None else self.output_dir


# Maps `section.key` in the user YAML to a Settings field.
_USER_CONFIG_KEYS: Dict[str, str] = {
    "video.target_codec": "target_video_codec",
    "video.long_duration_seconds": "long_duration_seconds",
    "video.large_file_threshold": "large_file_threshold",
    "video.small_file_threshold": "small_file_threshold",
    "video.encoder": "video_encoder",
    "video.crf": "video_crf",
    "video.preset": "video_preset",
    "video.gop_size": "video_gop_size",
    "video.pixel_format": "video_pixel_format",
    "preload.threshold_bytes": "preload_threshold",
    "audio.languages": "audio_languages",
    "audio.unwanted_title_words": "audio_unwanted_title_words",
    "audio.preferred_channels": "audio_preferred_channels",
    "audio.lossless_codecs": "lossless_audio_codecs",
    "audio.lossless_target_encoder": "lossless_target_encoder",
    "audio.lossless_target_channels": "lossless_target_channels",
    "subtitle.languages": "subtitle_languages",
    "subtitle.unwanted_words": "subtitle_unwanted_words",
    "attachment.font_filename_words": "font_filename_words",
    "attachment.keep_extensionless": "keep_extensionless_attachments",
}


def _coerce(name: str, value: Any, default: Any) -> Any:
    """Converts a YAML value to the type of the field default."""
    if isinstance(default, tuple):
        if isinstance(value, str) or not isinstance(value, (list, tuple)):
            raise ConfigurationException(f"'{name}' must be a list, got {value!r}.")
        item_type = type(default[0]) if default else str
        try:
            return tuple(item_type(v) for v in value)
        except (TypeError, ValueError) as e:
            raise ConfigurationException(f"Invalid item in '{name}': {e}") from e
    if isinstance(default, bool):
        if not isinstance(value, bool):
            raise ConfigurationException(f"'{name}' must be true or false, got {value!r}.")
        return value
    if isinstance(default, (int, float)):
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise ConfigurationException(f"'{name}' must be a number, got {value!r}.")
        return type(default)(value)
    if not isinstance(value, str):
        raise ConfigurationException(f"'{name}' must be a string, got {value!r}.")
    return value


def apply_user_config(settings: Settings, user_config: Dict[str, Any]) -> Settings:
    """
    Returns a copy of `settings` with the values from a parsed user config applied.

    Unknown keys are reported as warnings and ignored; values of the wrong type
    raise `ConfigurationException`.
    """
    overrides: Dict[str, Any] = {}
    defaults = {f.name: getattr(settings, f.name) for f in fields(settings)}

    for section, values in user_config.items():
        if section == "paths":
            if values is not None and not isinstance(values, dict):
                raise ConfigurationException("'paths' must be a mapping.")
            ffmpeg_dir = (values or {}).get("ffmpeg_dir")
            if ffmpeg_dir:
                overrides["ffmpeg_binary"] = str(Path(ffmpeg_dir) / FFMPEG_BINARY)
                overrides["ffprobe_binary"] = str(Path(ffmpeg_dir) / FFPROBE_BINARY)
            continue
        if not isinstance(values, dict):
            logger.warning(f"Ignoring user config section '{section}': not a mapping.")
            continue
        for key, value in values.items():
            dotted = f"{section}.{key}"
            field_name = _USER_CONFIG_KEYS.get(dotted)
            if field_name is None:
                logger.warning(f"Unknown user config key '{dotted}' ignored.")
                continue
            overrides[field_name] = _coerce(dotted, value, defaults[field_name])

    return replace(settings, **overrides)


def build_settings(args: Any, user_config: Optional[Dict[str, Any]] = None) -> Settings:
    """
    Builds the run settings from defaults, the user config and parsed CLI arguments.

    Args:
        args: The `argparse.Namespace` returned by `cli.get_args()`.
        user_config: The parsed YAML user configuration, if any.

    Returns:
        The frozen `Settings` used for the whole run.
    """
    settings = Settings()
    if user_config:
        settings = apply_user_config(settings, user_config)

    return replace(
        settings,
        input_dir=Path(args.input_dir),
        output_dir=Path(args.output_dir),
        intermediate_dir=Path(args.intermediate_dir) if args.intermediate_dir else None,
        dry_run=bool(args.dry_run),
        recursive=bool(args.recursive),
        transcode_mode=TranscodeMode(args.transcode_video),
        preload_mode=PreloadMode(args.preload),
    )
