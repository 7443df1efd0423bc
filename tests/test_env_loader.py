import os

from roomassign.env import load_env_file, parse_env


def test_load_env_file_sets_missing_values(tmp_path, monkeypatch):
    env_file = tmp_path / ".env"
    env_file.write_text(
        '\n'.join(
            [
                "# comment",
                'REDIS_URL="redis://localhost:6379/1"',
                "export ROOMASSIGN_CONFIG='/etc/roomassign.yaml'",
                "  SPACED_KEY = spaced value  ",
                "NOT_A_PAIR",
                "",
            ]
        )
    )
    monkeypatch.delenv("REDIS_URL", raising=False)
    monkeypatch.delenv("ROOMASSIGN_CONFIG", raising=False)
    monkeypatch.delenv("SPACED_KEY", raising=False)

    load_env_file(env_file)

    assert os.environ["REDIS_URL"] == "redis://localhost:6379/1"
    assert os.environ["ROOMASSIGN_CONFIG"] == "/etc/roomassign.yaml"
    assert os.environ["SPACED_KEY"] == "spaced value"
    assert "NOT_A_PAIR" not in os.environ


def test_load_env_file_does_not_override_existing(tmp_path, monkeypatch):
    env_file = tmp_path / ".env"
    env_file.write_text("OVERWRITE_ME=new\n")
    monkeypatch.setenv("OVERWRITE_ME", "existing")

    load_env_file(env_file)

    assert os.environ["OVERWRITE_ME"] == "existing"


def test_missing_env_file_is_ignored(tmp_path):
    load_env_file(tmp_path / "absent.env")


def test_load_env_file_reports_applied_names(tmp_path, monkeypatch):
    env_file = tmp_path / ".env"
    env_file.write_text("FRESH_NAME=1\nTAKEN_NAME=2\n")
    monkeypatch.delenv("FRESH_NAME", raising=False)
    monkeypatch.setenv("TAKEN_NAME", "existing")

    assert load_env_file(env_file) == ["FRESH_NAME"]


def test_parse_env_strips_inline_comments_outside_quotes():
    values = parse_env(
        "\n".join(
            [
                "PLAIN=value # trailing note",
                'QUOTED="has # inside"',
                "EMPTY=",
                "1BAD=nope",
                "=nokey",
            ]
        )
    )

    assert values == {"PLAIN": "value", "QUOTED": "has # inside", "EMPTY": ""}
