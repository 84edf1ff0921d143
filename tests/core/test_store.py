"""Tests for context directory copy and size accounting."""

from pathlib import Path

import pytest

from context_cache.core.errors import ContextCopyError
from context_cache.core.store import (
    copy_context_tree,
    ensure_directory,
    format_byte_count,
    measure_tree_size,
    new_session_id,
    session_context_path,
    session_screenshot_path,
)


def _tree_contents(root: Path) -> dict[str, bytes]:
    return {
        str(path.relative_to(root)): path.read_bytes()
        for path in root.rglob("*")
        if path.is_file()
    }


class TestEnsureDirectory:
    def test_creates_nested_directories(self, tmp_path: Path) -> None:
        target = tmp_path / "a" / "b" / "c"
        result = ensure_directory(target)

        assert target.is_dir()
        assert result == target.resolve()

    def test_existing_directory_is_noop(self, tmp_path: Path) -> None:
        (tmp_path / "keep.txt").write_text("x")
        ensure_directory(tmp_path)

        assert (tmp_path / "keep.txt").read_text() == "x"

    def test_file_in_the_way_raises(self, tmp_path: Path) -> None:
        blocker = tmp_path / "blocker"
        blocker.write_text("not a directory")

        with pytest.raises(OSError):
            ensure_directory(blocker / "child")


class TestCopyContextTree:
    def test_copy_preserves_size_and_bytes(self, base_context: Path, tmp_path: Path) -> None:
        target = tmp_path / "contexts" / "session-1"
        copy_context_tree(base_context, target)

        assert measure_tree_size(base_context) == 30
        assert measure_tree_size(target) == 30
        assert (target / "a.txt").read_bytes() == b"0123456789"
        assert (target / "sub" / "b.txt").read_bytes() == b"abcdefghijklmnopqrst"
        assert _tree_contents(target) == _tree_contents(base_context)

    def test_copies_empty_directories(self, base_context: Path, tmp_path: Path) -> None:
        (base_context / "Cache" / "empty").mkdir(parents=True)
        target = tmp_path / "copy"
        copy_context_tree(base_context, target)

        assert (target / "Cache" / "empty").is_dir()

    def test_second_copy_replaces_stale_content(self, base_context: Path, tmp_path: Path) -> None:
        target = tmp_path / "copy"
        copy_context_tree(base_context, target)
        (target / "stale.txt").write_text("left over from a previous session")
        (target / "a.txt").write_text("modified")

        copy_context_tree(base_context, target)

        assert not (target / "stale.txt").exists()
        assert _tree_contents(target) == _tree_contents(base_context)

    def test_copy_is_independent_of_source(self, base_context: Path, tmp_path: Path) -> None:
        target = tmp_path / "copy"
        copy_context_tree(base_context, target)

        (target / "a.txt").write_bytes(b"changed in session")

        assert (base_context / "a.txt").read_bytes() == b"0123456789"
        assert (target / "a.txt").stat().st_ino != (base_context / "a.txt").stat().st_ino

    def test_creates_missing_target_parents(self, base_context: Path, tmp_path: Path) -> None:
        target = tmp_path / "deep" / "nested" / "copy"
        copy_context_tree(base_context, target)

        assert measure_tree_size(target) == 30

    def test_missing_source_names_path(self, tmp_path: Path) -> None:
        source = tmp_path / "does-not-exist"

        with pytest.raises(ContextCopyError) as exc_info:
            copy_context_tree(source, tmp_path / "copy")

        assert exc_info.value.path == source.resolve()
        assert isinstance(exc_info.value.__cause__, OSError)

    def test_source_left_untouched(self, base_context: Path, tmp_path: Path) -> None:
        before = _tree_contents(base_context)
        copy_context_tree(base_context, tmp_path / "copy")

        assert _tree_contents(base_context) == before

    def test_copy_onto_itself_is_rejected(self, base_context: Path) -> None:
        with pytest.raises(ContextCopyError) as exc_info:
            copy_context_tree(base_context, base_context)

        assert exc_info.value.path == base_context.resolve()
        assert measure_tree_size(base_context) == 30

    def test_copy_into_source_is_rejected(self, base_context: Path) -> None:
        before = _tree_contents(base_context)

        with pytest.raises(ContextCopyError):
            copy_context_tree(base_context, base_context / "session-x")

        assert not (base_context / "session-x").exists()
        assert _tree_contents(base_context) == before

    def test_sibling_with_shared_prefix_is_allowed(self, base_context: Path) -> None:
        target = base_context.parent / "base-context-copy"
        copy_context_tree(base_context, target)

        assert measure_tree_size(target) == 30


class TestMeasureTreeSize:
    def test_missing_path_is_zero(self, tmp_path: Path) -> None:
        assert measure_tree_size(tmp_path / "nope") == 0

    def test_empty_directory_is_zero(self, tmp_path: Path) -> None:
        assert measure_tree_size(tmp_path) == 0

    def test_sums_nested_files(self, base_context: Path) -> None:
        (base_context / "sub" / "deeper").mkdir()
        (base_context / "sub" / "deeper" / "c.bin").write_bytes(b"\x00" * 100)

        assert measure_tree_size(base_context) == 130

    def test_accepts_str_path(self, base_context: Path) -> None:
        assert measure_tree_size(str(base_context)) == 30

    def test_regular_file_path_is_zero(self, base_context: Path) -> None:
        assert measure_tree_size(base_context / "a.txt") == 0

    def test_unreadable_subdirectory_keeps_partial_total(
        self, base_context: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        locked = base_context / "locked"
        locked.mkdir()
        (locked / "secret.bin").write_bytes(b"12345")
        real_iterdir = Path.iterdir

        def iterdir_denying_locked(self: Path):
            if self.name == "locked":
                raise PermissionError(13, "Permission denied", str(self))
            return real_iterdir(self)

        monkeypatch.setattr(Path, "iterdir", iterdir_denying_locked)

        assert measure_tree_size(base_context) == 30


class TestFormatByteCount:
    @pytest.mark.parametrize(
        "num_bytes,expected",
        [
            (0, "0 Bytes"),
            (512, "512.00 Bytes"),
            (1024, "1.00 KB"),
            (1536, "1.50 KB"),
            (1048576, "1.00 MB"),
            (1073741824, "1.00 GB"),
        ],
    )
    def test_formats(self, num_bytes: int, expected: str) -> None:
        assert format_byte_count(num_bytes) == expected

    def test_caps_at_gigabytes(self) -> None:
        assert format_byte_count(1024**4) == "1024.00 GB"


class TestSessionNaming:
    def test_session_id_is_hex_token(self) -> None:
        session_id = new_session_id()

        assert len(session_id) == 16
        int(session_id, 16)

    def test_session_ids_do_not_repeat(self) -> None:
        assert len({new_session_id() for _ in range(50)}) == 50

    def test_session_paths(self, tmp_path: Path) -> None:
        assert session_context_path(tmp_path, "abc") == tmp_path / "session-abc"
        assert session_screenshot_path(tmp_path, "abc") == tmp_path / "session-abc.png"
