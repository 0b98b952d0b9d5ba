"""Tests for source file reading."""

import pytest

from gnarl.exceptions import FileAccessError, PreprocessorError
from gnarl.file_ops import read_file_list, read_source


class TestReadSource:
    """Test plain and filtered reads."""

    def test_plain_read(self, c_file):
        path = c_file("int x;\r\n")
        assert read_source(path) == "int x;\r\n"

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileAccessError) as exc_info:
            read_source(tmp_path / "missing.c")
        assert exc_info.value.filepath == tmp_path / "missing.c"

    def test_directory_is_not_a_source(self, tmp_path):
        with pytest.raises(FileAccessError):
            read_source(tmp_path)

    def test_undecodable_bytes_replaced(self, tmp_path):
        path = tmp_path / "latin.c"
        path.write_bytes(b"/* caf\xe9 */ int x;\n")
        assert "int x;" in read_source(path)

    def test_filter_output_used(self, c_file):
        path = c_file("int x;\n")
        assert read_source(path, unifdef_args=["-u"], unifdef_exe="cat") == "int x;\n"

    def test_missing_filter(self, c_file):
        path = c_file("int x;\n")
        with pytest.raises(PreprocessorError):
            read_source(path, unifdef_args=["-DX"], unifdef_exe="no-such-unifdef-binary")

    def test_failing_filter(self, c_file):
        path = c_file("int x;\n")
        with pytest.raises(PreprocessorError) as exc_info:
            read_source(path, unifdef_args=["-c", "exit 2"], unifdef_exe="sh")
        assert exc_info.value.command[:2] == ["sh", "-c"]


class TestReadFileList:
    """Test parsing of --input listings."""

    def test_one_name_per_line(self):
        assert [str(p) for p in read_file_list("a.c\n\n  b.c  \n")] == ["a.c", "b.c"]
