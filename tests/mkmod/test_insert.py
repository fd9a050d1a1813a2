"""Tests for mkmod.insert: declaration placement and the atomic rewrite."""

from __future__ import annotations

import stat
from pathlib import Path

import pytest

from mkmod.errors import FileOperationError
from mkmod.insert import add_module_to, insert_module_at_line, module_declaration


def _write(path: Path, content: str) -> Path:
    path.write_bytes(content.encode("utf-8"))
    return path


def _read(path: Path) -> str:
    return path.read_bytes().decode("utf-8")


class TestModuleDeclaration:
    """Tests for module_declaration."""

    def test_public(self) -> None:
        """Public modules get a ``pub`` prefix."""
        assert module_declaration("parser") == "pub mod parser;"

    def test_private(self) -> None:
        """Private modules are declared bare."""
        assert module_declaration("parser", public=False) == "mod parser;"


class TestInsertModuleAtLine:
    """Tests for insert_module_at_line."""

    def test_inserts_before_given_line(self, tmp_path: Path) -> None:
        """Every other line is preserved and the new line lands at the index."""
        original = ["// header\n", "use a;\n", "fn main() {}\n", "fn other() {}\n"]
        path = _write(tmp_path / "lib.rs", "".join(original))

        insert_module_at_line("y", 2, path)

        lines = _read(path).splitlines(keepends=True)
        assert lines[2] == "pub mod y;\n"
        assert lines[:2] + lines[3:] == original
        assert len(lines) == len(original) + 1

    def test_insert_at_top(self, tmp_path: Path) -> None:
        """Index 0 writes the declaration before the first line."""
        path = _write(tmp_path / "lib.rs", "fn main() {}\n")
        insert_module_at_line("y", 0, path, public=False)
        assert _read(path) == "mod y;\nfn main() {}\n"

    def test_append_when_insert_is_none(self, tmp_path: Path) -> None:
        """None appends after the last line."""
        path = _write(tmp_path / "lib.rs", "use a;\nmod b;\n")
        insert_module_at_line("y", None, path)
        assert _read(path) == "use a;\nmod b;\npub mod y;\n"

    def test_append_to_unterminated_last_line(self, tmp_path: Path) -> None:
        """A missing final newline is added before the appended declaration."""
        path = _write(tmp_path / "lib.rs", "mod b;")
        insert_module_at_line("y", None, path)
        assert _read(path) == "mod b;\npub mod y;\n"

    def test_empty_file_receives_only_the_declaration(self, tmp_path: Path) -> None:
        """A zero-byte file ends up containing exactly one line."""
        path = _write(tmp_path / "lib.rs", "")
        insert_module_at_line("y", 0, path)
        assert _read(path) == "pub mod y;\n"

    def test_index_past_end_appends(self, tmp_path: Path) -> None:
        """An index that is never reached still inserts the declaration."""
        path = _write(tmp_path / "lib.rs", "fn a() {}\n")
        insert_module_at_line("y", 10, path)
        assert _read(path) == "fn a() {}\npub mod y;\n"

    def test_crlf_files_keep_their_newlines(self, tmp_path: Path) -> None:
        """Original CRLF terminators are copied and reused for the new line."""
        path = _write(tmp_path / "lib.rs", "use a;\r\nfn f() {}\r\n")
        insert_module_at_line("y", 1, path)
        assert _read(path) == "use a;\r\npub mod y;\r\nfn f() {}\r\n"

    def test_preserves_permissions(self, tmp_path: Path) -> None:
        """The rewritten file keeps the original mode bits."""
        path = _write(tmp_path / "lib.rs", "fn a() {}\n")
        path.chmod(0o640)
        insert_module_at_line("y", 0, path)
        assert stat.S_IMODE(path.stat().st_mode) == 0o640

    def test_failed_rename_leaves_original_untouched(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """A rename failure keeps the original and removes the scratch file."""
        path = _write(tmp_path / "lib.rs", "use a;\nfn f() {}\n")

        def _fail_replace(self: Path, target: Path) -> Path:
            raise PermissionError(13, "Permission denied", str(target))

        monkeypatch.setattr(Path, "replace", _fail_replace)

        with pytest.raises(FileOperationError):
            insert_module_at_line("y", 1, path)

        assert _read(path) == "use a;\nfn f() {}\n"
        assert sorted(p.name for p in tmp_path.iterdir()) == ["lib.rs"]

    def test_failed_read_leaves_original_untouched(self, tmp_path: Path) -> None:
        """A decode failure while copying keeps the original and cleans up."""
        original = b"use a;\n\xff\xfe\nfn f() {}\n"
        path = tmp_path / "lib.rs"
        path.write_bytes(original)

        with pytest.raises(FileOperationError):
            insert_module_at_line("y", 1, path)

        assert path.read_bytes() == original
        assert sorted(p.name for p in tmp_path.iterdir()) == ["lib.rs"]


class TestAddModuleTo:
    """Tests for add_module_to (classify, then insert)."""

    def test_concrete_scenario(self, tmp_path: Path) -> None:
        """The declaration goes right after the preamble."""
        path = _write(tmp_path / "lib.rs", "// header\n\nuse a::b;\nmod x;\nfn main(){}\n")

        insert = add_module_to("y", path)

        assert insert == 4
        assert _read(path) == "// header\n\nuse a::b;\nmod x;\npub mod y;\nfn main(){}\n"

    def test_after_header_comment(self, tmp_path: Path) -> None:
        """Without a preamble the declaration follows the header comment."""
        path = _write(tmp_path / "lib.rs", "// one\n// two\n\nfn main() {}\n")
        assert add_module_to("y", path, public=False) == 2
        assert _read(path) == "// one\n// two\nmod y;\n\nfn main() {}\n"

    def test_preamble_to_end_of_file_appends(self, tmp_path: Path) -> None:
        """A preamble that runs to EOF gets the declaration appended last."""
        path = _write(tmp_path / "lib.rs", "//! crate docs\nmod a;\nmod b;\n")
        assert add_module_to("c", path) is None
        assert _read(path) == "//! crate docs\nmod a;\nmod b;\npub mod c;\n"

    def test_header_to_end_of_file_appends(self, tmp_path: Path) -> None:
        """A comment-only file gets the declaration appended last."""
        path = _write(tmp_path / "lib.rs", "// only a comment\n")
        add_module_to("c", path)
        assert _read(path) == "// only a comment\npub mod c;\n"

    def test_plain_file_inserts_at_top(self, tmp_path: Path) -> None:
        """With neither segment the declaration becomes the first line."""
        path = _write(tmp_path / "main.rs", "\nfn main() {}\n")
        assert add_module_to("cli", path) == 0
        assert _read(path) == "pub mod cli;\n\nfn main() {}\n"

    def test_empty_file(self, tmp_path: Path) -> None:
        """An empty super file receives exactly the declaration."""
        path = _write(tmp_path / "mod.rs", "")
        add_module_to("inner", path)
        assert _read(path) == "pub mod inner;\n"

    def test_lone_carriage_return_does_not_end_a_line(self, tmp_path: Path) -> None:
        """Line numbers count \\n terminators only."""
        path = _write(tmp_path / "lib.rs", "use a;\rstill\nfn f() {}\n")

        insert = add_module_to("y", path)

        assert insert == 1
        assert _read(path) == "use a;\rstill\npub mod y;\nfn f() {}\n"

    def test_missing_super_file(self, tmp_path: Path) -> None:
        """A missing file surfaces as FileOperationError and is not created."""
        path = tmp_path / "lib.rs"
        with pytest.raises(FileOperationError):
            add_module_to("y", path)
        assert not path.exists()
