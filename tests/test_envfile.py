"""Tests for the dotenv single-line rewrite."""

from pathlib import Path

from gong_fast_mcp.envfile import persist_env_value


def _write(path: Path, text: str) -> None:
    with open(path, "w", encoding="utf-8", newline="") as f:
        f.write(text)


def _read(path: Path) -> str:
    with open(path, "r", encoding="utf-8", newline="") as f:
        return f.read()


class TestPersistEnvValue:
    def test_replaces_existing_line(self, tmp_path: Path):
        env = tmp_path / ".env"
        _write(env, "A=1\nGONG_USER_ID=old\nB=2\n")

        assert persist_env_value(env, "GONG_USER_ID", "new") is True
        assert _read(env) == "A=1\nGONG_USER_ID=new\nB=2\n"

    def test_appends_when_missing(self, tmp_path: Path):
        env = tmp_path / ".env"
        _write(env, "A=1")

        assert persist_env_value(env, "GONG_USER_ID", "u1") is True
        assert _read(env) == "A=1\nGONG_USER_ID=u1"

    def test_preserves_crlf(self, tmp_path: Path):
        env = tmp_path / ".env"
        _write(env, "A=1\r\n# comment\r\n\r\nB=2\r\n")

        persist_env_value(env, "GONG_USER_ID", "u1")
        assert _read(env) == "A=1\r\n# comment\r\n\r\nB=2\r\nGONG_USER_ID=u1\r\n"

    def test_indented_key_is_replaced(self, tmp_path: Path):
        env = tmp_path / ".env"
        _write(env, "  GONG_USER_ID=old\n")

        persist_env_value(env, "GONG_USER_ID", "u1")
        assert _read(env) == "GONG_USER_ID=u1\n"

    def test_similar_key_untouched(self, tmp_path: Path):
        env = tmp_path / ".env"
        _write(env, "GONG_USER_ID_OLD=x\n")

        persist_env_value(env, "GONG_USER_ID", "u1")
        assert _read(env) == "GONG_USER_ID_OLD=x\nGONG_USER_ID=u1\n"

    def test_unchanged_file_not_rewritten(self, tmp_path: Path):
        env = tmp_path / ".env"
        _write(env, "GONG_USER_ID=u1\n")

        assert persist_env_value(env, "GONG_USER_ID", "u1") is False
        assert _read(env) == "GONG_USER_ID=u1\n"

    def test_missing_file_is_left_alone(self, tmp_path: Path):
        env = tmp_path / ".env"
        assert persist_env_value(env, "GONG_USER_ID", "u1") is False
        assert not env.exists()

    def test_empty_value_is_ignored(self, tmp_path: Path):
        env = tmp_path / ".env"
        _write(env, "A=1\n")
        assert persist_env_value(env, "GONG_USER_ID", "") is False
        assert _read(env) == "A=1\n"
