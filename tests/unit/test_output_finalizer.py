"""Tests for moving staged encodes to the output directory."""

import pytest

from mkv_cruncher.domain.exceptions import (
    ChecksumMismatchException,
    CopyFailedException,
    SizeMismatchException,
    StagedCleanupException,
)
from mkv_cruncher.services.output_finalizer import (
    OutputFinalizer,
    copy_file_counting,
    file_checksum,
    remove_partial_output,
)


@pytest.fixture
def staged_file(staged_settings):
    path = staged_settings.intermediate_dir / "show.mkv"
    path.write_bytes(b"\x1a\x45\xdf\xa3" + b"cluster" * 1000)
    return path


class TestCopyHelpers:
    """Tests for the default copier and checksum."""

    def test_copy_counts_bytes(self, tmp_path) -> None:
        """The copier returns exactly the number of bytes written."""
        src = tmp_path / "a.mkv"
        src.write_bytes(b"0123456789")
        dst = tmp_path / "b.mkv"

        assert copy_file_counting(src, dst) == 10
        assert dst.read_bytes() == b"0123456789"

    def test_checksum_detects_difference(self, tmp_path) -> None:
        """Different content gives a different digest."""
        a, b = tmp_path / "a", tmp_path / "b"
        a.write_bytes(b"same size 1")
        b.write_bytes(b"same size 2")

        assert file_checksum(a) != file_checksum(b)
        assert file_checksum(a) == file_checksum(a)


class TestOutputFinalizer:
    """Tests for OutputFinalizer.finalize."""

    def test_inactive_without_intermediate_dir(self, settings) -> None:
        """Finalizing only applies when ffmpeg wrote to an intermediate directory."""
        assert OutputFinalizer(settings).active is False

    def test_moves_and_verifies(self, staged_settings, staged_file) -> None:
        """The staged file ends up in the output directory and is removed from staging."""
        content = staged_file.read_bytes()

        destination = OutputFinalizer(staged_settings).finalize(staged_file, transcoded_video=True)

        assert destination == staged_settings.output_dir / "show.mkv"
        assert destination.read_bytes() == content
        assert not staged_file.exists()

    def test_size_mismatch(self, staged_settings, staged_file) -> None:
        """A short copy is fatal and keeps the staged file."""

        def short_copier(src, dst):
            dst.write_bytes(b"short")
            return 5

        finalizer = OutputFinalizer(staged_settings, copier=short_copier)

        with pytest.raises(SizeMismatchException) as exc_info:
            finalizer.finalize(staged_file, transcoded_video=False)

        assert exc_info.value.copied == 5
        assert exc_info.value.expected == staged_file.stat().st_size
        assert staged_file.exists()

    def test_checksum_mismatch_when_transcoded(self, staged_settings, staged_file) -> None:
        """Transcoded files are compared by digest."""
        digests = iter(["aaaa", "bbbb"])
        finalizer = OutputFinalizer(staged_settings, checksum=lambda path: next(digests))

        with pytest.raises(ChecksumMismatchException):
            finalizer.finalize(staged_file, transcoded_video=True)

    def test_no_checksum_when_copied(self, staged_settings, staged_file) -> None:
        """Stream-copied files are verified by size only."""

        def checksum(path):
            raise AssertionError("checksum must not be computed")

        finalizer = OutputFinalizer(staged_settings, checksum=checksum)

        finalizer.finalize(staged_file, transcoded_video=False)

        assert not staged_file.exists()

    def test_copy_failure(self, staged_settings, staged_file) -> None:
        """An I/O error while copying is a finalize failure."""

        def failing_copier(src, dst):
            raise OSError(28, "No space left on device")

        finalizer = OutputFinalizer(staged_settings, copier=failing_copier)

        with pytest.raises(CopyFailedException):
            finalizer.finalize(staged_file, transcoded_video=False)

    def test_missing_staged_file(self, staged_settings) -> None:
        """A staged file that does not exist cannot be copied."""
        finalizer = OutputFinalizer(staged_settings)

        with pytest.raises(CopyFailedException):
            finalizer.finalize(staged_settings.intermediate_dir / "gone.mkv", False)

    def test_cleanup_failure(self, monkeypatch, staged_settings, staged_file) -> None:
        """Not being able to delete the staged file is fatal."""
        original_unlink = type(staged_file).unlink

        def unlink(self, missing_ok=False):
            if self == staged_file:
                raise PermissionError(13, "Permission denied")
            return original_unlink(self, missing_ok=missing_ok)

        monkeypatch.setattr(type(staged_file), "unlink", unlink)

        with pytest.raises(StagedCleanupException):
            OutputFinalizer(staged_settings).finalize(staged_file, transcoded_video=False)


class TestRemovePartialOutput:
    """Tests for remove_partial_output."""

    def test_removes_file(self, tmp_path) -> None:
        path = tmp_path / "partial.mkv"
        path.write_bytes(b"x")

        remove_partial_output(path)

        assert not path.exists()

    def test_missing_file_is_ignored(self, tmp_path) -> None:
        remove_partial_output(tmp_path / "never-written.mkv")
        remove_partial_output(None)
