import pytest

from roomassign.config import Config, RoomSettings


def test_missing_file_uses_defaults(tmp_path):
    config = Config.load(tmp_path / "missing.yaml")

    assert config == Config()
    assert config.log_level == "INFO"
    assert config.rooms.default_page_size == 100
    assert config.rooms.max_guests == 3


def test_load_reads_yaml(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text(
        "log_level: debug\n"
        "rooms:\n"
        "  default_page_size: 25\n"
        "  max_page_size: '50'\n"
        "  max_guests: 2\n"
    )

    config = Config.load(path)

    assert config.log_level == "DEBUG"
    assert config.rooms == RoomSettings(
        default_page_size=25, max_page_size=50, max_guests=2
    )


def test_load_uses_env_override(tmp_path, monkeypatch):
    path = tmp_path / "custom.yaml"
    path.write_text("rooms:\n  default_page_size: 10\n")
    monkeypatch.setenv("ROOMASSIGN_CONFIG", str(path))

    assert Config.load().rooms.default_page_size == 10


@pytest.mark.parametrize(
    "text",
    [
        "- a list\n",
        "rooms:\n  max_guests: true\n",
        "rooms:\n  default_page_size: many\n",
        "rooms:\n  max_guests: 5\n",
        "rooms:\n  default_page_size: 50\n  max_page_size: 10\n",
        "log_level: chatty\n",
    ],
)
def test_invalid_config_raises(tmp_path, text):
    path = tmp_path / "config.yaml"
    path.write_text(text)

    with pytest.raises(ValueError):
        Config.load(path)
