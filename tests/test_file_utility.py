import io
import os

import pytest

from netrc_editor.errors import ComparisonFaultError, RenameFailedError, VerificationFailedError
from netrc_editor.storage import file_utility as file_utility_module
from netrc_editor.storage.copy_strategies import BufferedCopy, CopyStrategy
from netrc_editor.storage.file_utility import BUFFER_SIZE, FileUtility, compare_handles
from netrc_editor.storage.platform import Platform

needs_modes = pytest.mark.skipif(
    os.name == "nt" or os.geteuid() == 0,
    reason="permission bits are not enforced for root or on Windows",
)
posix_only = pytest.mark.skipif(os.name == "nt", reason="no POSIX mode bits on Windows")


@pytest.fixture(autouse=True)
def in_tmp_dir(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    return tmp_path


def _write(name: str, content: str) -> None:
    with open(name, "w") as f:
        f.write(content)


def _read(name: str) -> str:
    with open(name) as f:
        return f.read()


def _mode(name: str) -> int:
    return os.stat(name).st_mode & 0o777


def _forbid_open(monkeypatch):
    def _open(*args, **kwargs):
        raise AssertionError("file should not have been opened")

    monkeypatch.setattr(file_utility_module, "open", _open, raising=False)


# Backup


def test_backup_does_not_create_empty_file(file_utility):
    assert file_utility.backup("does_not_exist", lambda path, n: "a") is None
    assert not os.path.exists("a")
    assert not os.path.exists("does_not_exist")


@posix_only
def test_backup_copies_with_private_mode(file_utility):
    _write("b", "1234")
    os.chmod("b", 0o644)
    assert file_utility.backup("b") == "b.000"
    assert _read("b") == "1234"
    assert _read("b.000") == "1234"
    assert _mode("b") == 0o644
    assert _mode("b.000") == 0o600


def test_backup_picks_next_available_filename(file_utility):
    _write("c", "12345")
    _write("c.000", "")
    assert file_utility.backup("c") == "c.001"
    assert _read("c") == "12345"
    assert _read("c.000") == ""
    assert _read("c.001") == "12345"


def test_backup_never_overwrites_existing_backup(file_utility, monkeypatch):
    _write("h", "new")
    _write("h.000", "old")
    # Name probe says the slot is free, as when another process creates it meanwhile.
    monkeypatch.setattr(file_utility_module.os.path, "exists", lambda p: p == "h")
    assert file_utility.backup("h") == "h.001"
    assert _read("h.000") == "old"
    assert _read("h.001") == "new"


def test_copy_file_exclusive_refuses_existing_dest(file_utility):
    _write("src", "abc")
    _write("dst", "keep")
    with pytest.raises(FileExistsError):
        file_utility.copy_file("src", "dst", exclusive=True)
    assert _read("dst") == "keep"


def test_backup_custom_pattern(file_utility):
    _write("e", "x")
    assert file_utility.backup("e", lambda path, n: f"{path}~{n}") == "e~0"
    assert _read("e~0") == "x"


@needs_modes
@pytest.mark.parametrize("mode", [0o200, 0o000])
def test_backup_unreadable(file_utility, mode):
    _write("d", "72345")
    os.chmod("d", mode)
    with pytest.raises(PermissionError):
        file_utility.backup("d")
    assert not os.path.exists("d.000")


# Atomic write


def test_atomic_write_file_does_not_exist(file_utility):
    file_utility.atomic_write("g", lambda f: f.write(b"xxxx"))
    assert _read("g") == "xxxx"
    assert not os.path.exists("g.000")
    if os.name != "nt":
        assert _mode("g") == 0o600


def test_atomic_write_file_exists(file_utility, in_tmp_dir):
    _write("h", "123")
    file_utility.atomic_write("h", lambda f: f.write(b"zzzz"))
    assert _read("h") == "zzzz"
    assert sorted(os.listdir(in_tmp_dir)) == ["h"]


def test_atomic_write_file_exists_with_backup(file_utility):
    _write("h", "123")
    file_utility.atomic_write("h", lambda f: f.write(b"zzzz"), make_backup=True)
    assert _read("h") == "zzzz"
    assert _read("h.000") == "123"
    assert not os.path.exists("h.001")


@posix_only
def test_atomic_write_keeps_existing_mode(file_utility):
    _write("j", "123")
    os.chmod("j", 0o640)
    file_utility.atomic_write("j", lambda f: f.write(b"456"))
    assert _mode("j") == 0o640


def test_atomic_write_failure_leaves_original_untouched(file_utility, in_tmp_dir):
    _write("w", "original")

    def writer(f):
        f.write(b"partial")
        raise RuntimeError("boom")

    with pytest.raises(RuntimeError):
        file_utility.atomic_write("w", writer, make_backup=True)
    assert _read("w") == "original"
    assert sorted(os.listdir(in_tmp_dir)) == ["w"]


def test_atomic_write_failure_on_new_file_leaves_nothing(file_utility, in_tmp_dir):
    def writer(f):
        raise RuntimeError("boom")

    with pytest.raises(RuntimeError):
        file_utility.atomic_write("new", writer)
    assert os.listdir(in_tmp_dir) == []


@needs_modes
@pytest.mark.parametrize("mode", [0o100, 0o400, 0o000])
def test_atomic_write_file_exists_without_access(file_utility, in_tmp_dir, mode):
    _write("k", "123")
    os.chmod("k", mode)
    with pytest.raises(PermissionError):
        file_utility.atomic_write("k", lambda f: f.write(b"zzzz"), make_backup=True)
    os.chmod("k", 0o400)
    assert _read("k") == "123"
    assert sorted(os.listdir(in_tmp_dir)) == ["k"]


# Rename


def test_safe_rename_with_backup(file_utility):
    _write("src", "new")
    _write("dst", "old")
    file_utility.safe_rename("src", "dst", make_backup=True)
    assert not os.path.exists("src")
    assert _read("dst") == "new"
    assert _read("dst.000") == "old"


def test_safe_rename_failure_leaves_dest_untouched(file_utility):
    _write("src", "new")
    os.mkdir("dst")
    _write(os.path.join("dst", "keep"), "old")
    with pytest.raises(RenameFailedError) as excinfo:
        file_utility.safe_rename("src", "dst")
    assert isinstance(excinfo.value.__cause__, OSError)
    assert _read("src") == "new"
    assert _read(os.path.join("dst", "keep")) == "old"


# Copy


class ExplodingCopy(CopyStrategy):
    name = "exploding"

    def copy(self, src_fd, dst_fd, block_size):
        os.write(dst_fd, b"half")
        raise OSError("disk full")


def test_copy_file(file_utility):
    content = os.urandom(BUFFER_SIZE + 17)
    with open("src", "wb") as f:
        f.write(content)
    file_utility.copy_file("src", "dst", block_size=4096)
    with open("dst", "rb") as f:
        assert f.read() == content
    if os.name != "nt":
        assert _mode("dst") == 0o600


def test_copy_file_failure_removes_partial_dest(logger):
    utility = FileUtility(platform=Platform.detect(), copy_strategy=ExplodingCopy(), logger=logger)
    _write("src", "data")
    with pytest.raises(OSError, match="disk full"):
        utility.copy_file("src", "dst")
    assert not os.path.exists("dst")


def test_copy_file_verification_failure(file_utility):
    _write("src", "data")
    with pytest.raises(VerificationFailedError):
        file_utility.copy_file("src", "dst", equal=lambda a, b: False)
    assert not os.path.exists("dst")


def test_copy_file_without_verify_skips_compare(logger):
    utility = FileUtility(platform=Platform(), copy_strategy=BufferedCopy(), logger=logger)
    _write("src", "data")
    utility.copy_file("src", "dst", verify=False, equal=lambda a, b: False)
    assert _read("dst") == "data"


def test_verify_content(file_utility):
    _write("v", "abc")
    file_utility.verify_content("v", b"abc")
    with pytest.raises(VerificationFailedError):
        file_utility.verify_content("v", b"abd")


# Compare


def test_compare_requires_two_files():
    _write("a", "x")
    with pytest.raises(ValueError):
        FileUtility.compare_files("a")


def test_compare_different_sizes_without_opening(monkeypatch):
    _write("a", "data")
    _write("b", "data   ")
    _forbid_open(monkeypatch)
    assert FileUtility.compare_files("a", "b") is False


def test_compare_empty_files_without_opening(monkeypatch):
    _write("a", "")
    _write("b", "")
    _forbid_open(monkeypatch)
    assert FileUtility.compare_files("a", "b") is True


@pytest.mark.parametrize("buffer_size", [13, 4096, BUFFER_SIZE, 10 * BUFFER_SIZE])
def test_compare_identical_large_files(buffer_size):
    content = os.urandom(2 * BUFFER_SIZE + 5)
    for name in ("a", "b", "c"):
        with open(name, "wb") as f:
            f.write(content)
    assert FileUtility.compare_files("a", "b", "c", buffer_size=buffer_size) is True


def test_compare_detects_difference_in_last_byte():
    content = bytearray(os.urandom(BUFFER_SIZE + 3))
    with open("a", "wb") as f:
        f.write(content)
    content[-1] ^= 0xFF
    with open("b", "wb") as f:
        f.write(content)
    assert FileUtility.compare_files("a", "a", "b") is False


def test_compare_with_custom_equality():
    _write("a", "Hello")
    _write("b", "hELLO")
    assert FileUtility.compare_files("a", "b") is False
    assert FileUtility.compare_files("a", "b", equal=lambda x, y: x.lower() == y.lower()) is True


def test_compare_handles_unequal_read_sizes_is_a_fault():
    handles = [io.BytesIO(b"abcd"), io.BytesIO(b"ab")]
    with pytest.raises(ComparisonFaultError):
        compare_handles(handles, 4, lambda x, y: x == y)


def test_compare_handles_short_reference_is_a_fault():
    handles = [io.BytesIO(b""), io.BytesIO(b"")]
    with pytest.raises(ComparisonFaultError):
        compare_handles(handles, 3, lambda x, y: x == y)
