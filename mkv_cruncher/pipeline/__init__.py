"""
This package contains the batch pipeline for MKV Cruncher.

The pipeline discovers the containers in the input directory and walks each one
through the services in order: probe, stream selection, command building, the
ffmpeg run and, when an intermediate directory is used, finalization. It also owns
the batch-level failure policy (skip a file, or stop and roll back).
"""
