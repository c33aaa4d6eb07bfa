"""
Services Package for MKV Cruncher.

Each service performs one step of crunching a file and is usable on its own:

- **Probe Service (`probe_file`):** runs ffprobe and decodes its JSON into a `MediaFile`.
- **Stream Selector:** pure decision rules for subtitles, audio, attachments and
  whether the video is re-encoded.
- **Command Builder (`build_encode_command`):** turns those decisions into ffmpeg
  arguments and decides whether the source is piped through stdin.
- **Transcode Executor (`TranscodeExecutor`):** runs ffmpeg and streams its progress.
- **Output Finalizer (`OutputFinalizer`):** moves a staged encode into the output
  directory and verifies the copy.
- **File Processing Service (`ProcessFiles`):** discovers inputs and purges staged files.
- **Reporting Service (`Reporter`, `LoguruReporter`):** presents decisions and progress.
"""
