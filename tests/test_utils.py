# prsync Utility Tests
# Tests for path joining, repository identifiers and content encoding

import pytest

from prsync.utils.encoding import decode_content, encode_content
from prsync.utils.paths import is_valid_repo_dir, join_repo_path, split_repo


class TestJoinRepoPath:
    """Tests for join_repo_path."""

    def test_root(self):
        assert join_repo_path(".", "README.md") == "README.md"

    def test_directory(self):
        assert join_repo_path("docs", "README.md") == "docs/README.md"

    def test_nested_directory(self):
        assert join_repo_path(".github/workflows", "ci.yml") == ".github/workflows/ci.yml"


class TestIsValidRepoDir:
    """Tests for is_valid_repo_dir."""

    @pytest.mark.parametrize("value", [".", "docs", "a/b/c", ".github"])
    def test_valid(self, value: str):
        assert is_valid_repo_dir(value) is True

    @pytest.mark.parametrize("value", ["", "/", "/docs", "docs/", "a//b"])
    def test_invalid(self, value: str):
        assert is_valid_repo_dir(value) is False


class TestSplitRepo:
    """Tests for split_repo."""

    def test_valid(self):
        assert split_repo("acme/widgets") == ("acme", "widgets")

    @pytest.mark.parametrize("value", ["", "acme", "acme/", "/widgets", "a/b/c", " /b", "acme /widgets", "acme/ widgets"])
    def test_invalid(self, value: str):
        with pytest.raises(ValueError, match="owner/name"):
            split_repo(value)


class TestContentEncoding:
    """Tests for base64 transfer encoding."""

    def test_encode_text(self):
        assert encode_content("hello") == "aGVsbG8="

    def test_encode_bytes(self):
        assert encode_content(b"\x00\xff") == "AP8="

    def test_decode_wrapped(self):
        # Contents API wraps long payloads with newlines
        assert decode_content("aGVs\nbG8=\n") == b"hello"

    def test_decode_preserves_bytes(self):
        data = bytes(range(256))
        assert decode_content(encode_content(data)) == data

    def test_decode_invalid(self):
        with pytest.raises(ValueError, match="Invalid base64"):
            decode_content("not base64!")
