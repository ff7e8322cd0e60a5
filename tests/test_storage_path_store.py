"""Tests for the directory-backed PathPromptStorage."""

from __future__ import annotations

import json
import os
from pathlib import Path

import pytest
from structlog.testing import capture_logs

from promptline.errors import StorageError
from promptline.naming import PromptIdentifier
from promptline.storage.base import decode_prompt, encode_prompt
from promptline.storage.path_store import PathPromptStorage

PROMPT = {"name": "greeting", "prompt": [{"role": "user", "content": "Bonjour, ça va? 你好 👋"}]}


class TestEncoding:
    """Tests for the shared JSON helpers."""

    def test_round_trip_unicode(self):
        """decode(encode(data)) returns the original mapping."""
        assert decode_prompt(encode_prompt(PROMPT)) == PROMPT

    def test_encode_keeps_non_ascii(self):
        """Non-ASCII characters are written as-is, not escaped."""
        encoded = encode_prompt(PROMPT)
        assert "ça va" in encoded
        assert "\\u" not in encoded

    def test_encode_is_indented(self):
        """Encoded prompts are pretty-printed."""
        assert "\n  " in encode_prompt(PROMPT)

    def test_decode_invalid_json_returns_none(self):
        """Invalid JSON gives None and a warning."""
        with capture_logs() as logs:
            assert decode_prompt("{not json") is None
        assert logs[0]["event"] == "prompt_decode_failed"
        assert logs[0]["log_level"] == "warning"
        assert logs[0]["content_length"] == len("{not json")

    def test_decode_non_object_returns_none(self):
        """JSON whose top level is not an object gives None."""
        with capture_logs() as logs:
            assert decode_prompt("[1, 2]") is None
        assert logs[0]["event"] == "prompt_decode_failed"


class TestPathPromptStorage:
    """Tests for file operations on a local directory."""

    def test_save_then_load(self, tmp_path: Path) -> None:
        """A saved prompt loads back unchanged."""
        storage = PathPromptStorage(tmp_path / "prompts")
        assert storage.save("greeting", PROMPT) is True
        assert storage.load("greeting") == PROMPT

    def test_file_named_after_identifier(self, tmp_path: Path) -> None:
        """Files are named {identifier}.json."""
        storage = PathPromptStorage(tmp_path)
        storage.save("greeting", PROMPT, version=2, label="prod")
        expected = PromptIdentifier().build("greeting", 2, "prod") + ".json"
        assert (tmp_path / expected).is_file()
        assert json.loads((tmp_path / expected).read_text(encoding="utf-8")) == PROMPT

    def test_no_tmp_file_left_behind(self, tmp_path: Path) -> None:
        """The atomic write removes its temporary file."""
        storage = PathPromptStorage(tmp_path)
        storage.save("greeting", PROMPT)
        assert list(tmp_path.glob("*.tmp")) == []

    def test_load_missing_returns_none(self, tmp_path: Path) -> None:
        """Loading an unknown prompt returns None."""
        assert PathPromptStorage(tmp_path).load("missing") is None

    def test_load_corrupt_file_returns_none(self, tmp_path: Path) -> None:
        """A corrupt file is treated as absent."""
        (tmp_path / "broken.json").write_text("{oops", encoding="utf-8")
        assert PathPromptStorage(tmp_path).load("broken") is None

    def test_versions_are_separate(self, tmp_path: Path) -> None:
        """Different versions of a prompt are stored independently."""
        storage = PathPromptStorage(tmp_path)
        storage.save("greeting", {"v": 1}, version=1)
        storage.save("greeting", {"v": 2}, version=2)
        assert storage.load("greeting", version=1) == {"v": 1}
        assert storage.load("greeting", version=2) == {"v": 2}
        assert storage.load("greeting") is None

    def test_exists(self, tmp_path: Path) -> None:
        """exists reflects whether the prompt file is present."""
        storage = PathPromptStorage(tmp_path)
        assert storage.exists("greeting") is False
        storage.save("greeting", PROMPT)
        assert storage.exists("greeting") is True

    def test_delete(self, tmp_path: Path) -> None:
        """delete removes a stored prompt and reports False when absent."""
        storage = PathPromptStorage(tmp_path)
        storage.save("greeting", PROMPT)
        assert storage.delete("greeting") is True
        assert storage.exists("greeting") is False
        assert storage.delete("greeting") is False

    def test_list_sorted_identifiers(self, tmp_path: Path) -> None:
        """list returns sorted identifiers of stored prompts."""
        storage = PathPromptStorage(tmp_path)
        storage.save("zeta", PROMPT)
        storage.save("alpha", PROMPT, version=1)
        (tmp_path / "notes.txt").write_text("ignored")
        assert storage.list() == ["alpha_v1", "zeta"]

    def test_list_missing_directory_is_empty(self, tmp_path: Path) -> None:
        """list returns [] when the directory does not exist yet."""
        assert PathPromptStorage(tmp_path / "nope").list() == []

    def test_is_available_creates_directory(self, tmp_path: Path) -> None:
        """is_available creates the storage directory on demand."""
        target = tmp_path / "var" / "prompts"
        assert PathPromptStorage(target).is_available() is True
        assert target.is_dir()

    def test_uncreatable_directory_raises_storage_error(self, tmp_path: Path) -> None:
        """A path blocked by a file raises StorageError."""
        blocker = tmp_path / "blocker"
        blocker.write_text("file, not a directory")
        storage = PathPromptStorage(blocker / "prompts")
        with pytest.raises(StorageError, match="Cannot create storage directory"):
            storage.save("greeting", PROMPT)

    @pytest.mark.skipif(
        os.name == "nt" or (hasattr(os, "geteuid") and os.geteuid() == 0),
        reason="permission bits are not enforced",
    )
    def test_unwritable_directory_raises_storage_error(self, tmp_path: Path) -> None:
        """A read-only directory raises StorageError."""
        tmp_path.chmod(0o500)
        try:
            with pytest.raises(StorageError, match="not writable"):
                PathPromptStorage(tmp_path).is_available()
        finally:
            tmp_path.chmod(0o700)

    def test_supports_paths(self, tmp_path: Path) -> None:
        """Strings and PathLike values are supported configs."""
        storage = PathPromptStorage(tmp_path)
        assert storage.supports("var/prompts") is True
        assert storage.supports(tmp_path) is True
        assert storage.supports(None) is False
        assert storage.supports(42) is False
