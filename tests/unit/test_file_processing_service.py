"""Tests for input discovery and staged file purging."""

from mkv_cruncher.services.file_processing_service import (
    ProcessFiles,
    name_matches,
    purge_staged_files,
)


def touch(path):
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(b"")
    return path


class TestProcessFiles:
    """Tests for ProcessFiles discovery."""

    def test_top_level_only_by_default(self, dirs) -> None:
        """Without recursion, subdirectories are ignored."""
        touch(dirs.input / "b.mkv")
        touch(dirs.input / "a.mkv")
        touch(dirs.input / "notes.txt")
        touch(dirs.input / "season 2" / "c.mkv")

        handler = ProcessFiles(dirs.input, ".mkv")

        assert [p.name for p in handler.files] == ["a.mkv", "b.mkv"]

    def test_recursive_sorted_by_relative_path(self, dirs) -> None:
        """Recursive discovery walks subdirectories in a stable order."""
        touch(dirs.input / "z.mkv")
        touch(dirs.input / "s02" / "e01.mkv")
        touch(dirs.input / "s01" / "e02.mkv")
        touch(dirs.input / "s01" / "e01.mkv")

        handler = ProcessFiles(dirs.input, ".mkv", recursive=True)

        relative = [p.relative_to(dirs.input).as_posix() for p in handler.files]
        assert relative == ["s01/e01.mkv", "s01/e02.mkv", "s02/e01.mkv", "z.mkv"]

    def test_directories_named_like_containers_are_skipped(self, dirs) -> None:
        """Only regular files are returned."""
        (dirs.input / "extras.mkv").mkdir()
        touch(dirs.input / "movie.MKV")

        handler = ProcessFiles(dirs.input, ".mkv")

        assert [p.name for p in handler.files] == ["movie.MKV"]

    def test_missing_directory(self, tmp_path) -> None:
        """A missing source directory yields no files."""
        assert ProcessFiles(tmp_path / "missing", ".mkv").files == ()

    def test_name_matches_is_case_insensitive(self, tmp_path) -> None:
        assert name_matches(tmp_path / "Show.MKV", ".mkv")
        assert name_matches(tmp_path / "show.mkv.part", ".mkv")
        assert not name_matches(tmp_path / "show.mp4", ".mkv")


class TestPurgeStagedFiles:
    """Tests for purge_staged_files."""

    def test_removes_only_matching_files(self, dirs) -> None:
        """Container files are deleted; everything else stays."""
        staged = touch(dirs.intermediate / "show.mkv")
        other = touch(dirs.intermediate / "keep.txt")
        nested = touch(dirs.intermediate / "sub" / "nested.mkv")

        removed = purge_staged_files(dirs.intermediate, ".mkv")

        assert removed == [staged]
        assert not staged.exists()
        assert other.exists()
        assert nested.exists()

    def test_missing_directory(self, tmp_path) -> None:
        assert purge_staged_files(tmp_path / "missing", ".mkv") == []
