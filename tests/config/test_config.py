"""Test configuration management."""

from pathlib import Path

from declutter.config.config import Config
from declutter.config.paths import default_config_path


def test_default_config_is_created_on_first_load(repo_root: Path) -> None:
    config = Config.load()

    assert config.immediate_binning is True
    assert config.cloud_destination is None
    assert config.undo_limit == 50
    assert default_config_path() == (repo_root / "config" / "config.toml").resolve()
    assert default_config_path().exists()


def test_save_load_roundtrip(repo_root: Path) -> None:
    _ = repo_root  # acknowledge fixture usage
    original = Config(
        log_file=Path("/tmp/logs/declutter.log"),
        default_location=Path("/Users/me/Downloads"),
        immediate_binning=False,
        cloud_destination=Path("/Volumes/Drive"),
        debounce_ms=250,
        old_file_days=30,
    )
    original.save()

    Config._instance = None  # pyright: ignore[reportPrivateUsage] - reset singleton for test
    loaded = Config.load()

    assert loaded.log_file == Path("/tmp/logs/declutter.log")
    assert loaded.default_location == Path("/Users/me/Downloads")
    assert loaded.immediate_binning is False
    assert loaded.cloud_destination == Path("/Volumes/Drive")
    assert loaded.debounce_ms == 250
    assert loaded.old_file_days == 30
    assert loaded.large_file_mb == 50


def test_load_is_a_singleton(repo_root: Path) -> None:
    _ = repo_root  # acknowledge fixture usage

    assert Config.load() is Config.load()


def test_unknown_keys_are_ignored(repo_root: Path) -> None:
    _ = repo_root  # acknowledge fixture usage
    target = default_config_path()
    target.parent.mkdir(parents=True, exist_ok=True)
    _ = target.write_text('undo_limit = 10\nmystery = "value"\n', encoding="utf-8")

    loaded = Config.load()

    assert loaded.undo_limit == 10
    assert not hasattr(loaded, "mystery")


def test_blank_paths_become_none() -> None:
    config = Config(cloud_destination="  ", default_location="~/Desktop")  # type: ignore[arg-type]

    assert config.cloud_destination is None
    assert config.default_location == Path("~/Desktop").expanduser()
