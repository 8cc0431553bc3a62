import pytest

from canon.config import CanonConfig


def test_defaults():
    config = CanonConfig()
    assert config.width == 8
    assert config.byteorder == "little"
    assert config.capacity is None
    assert config.space.dimension == 8


@pytest.mark.parametrize(
    "kwargs",
    [
        {"width": 12},
        {"byteorder": "middle"},
        {"capacity": 0},
        {"capacity": 9},
        {"cache_max_width": -1},
        {"cache_max_width": 25},
        {"width": 32, "cache_max_width": 32},
        {"shard_size": 0},
        {"max_workers": 0},
    ],
)
def test_validation(kwargs):
    with pytest.raises(ValueError):
        CanonConfig(**kwargs)


def test_round_trip_through_yaml(tmp_path):
    config = CanonConfig(width=16, byteorder="big", capacity=12, shard_size=4096)
    path = tmp_path / "nested" / "canon.yml"
    config.save_to_file(path)
    assert CanonConfig.load_from_file(path) == config


def test_unknown_keys_rejected():
    with pytest.raises(ValueError, match="Unknown configuration keys: colour"):
        CanonConfig.from_dict({"width": 8, "colour": "blue"})


def test_empty_file_gives_defaults(tmp_path):
    path = tmp_path / "canon.yml"
    path.write_text("")
    assert CanonConfig.load_from_file(path) == CanonConfig()


def test_non_mapping_rejected(tmp_path):
    path = tmp_path / "canon.yml"
    path.write_text("- 8\n- 16\n")
    with pytest.raises(ValueError):
        CanonConfig.load_from_file(path)


def test_missing_file():
    with pytest.raises(FileNotFoundError):
        CanonConfig.load_from_file("does/not/exist.yml")


def test_load_or_default(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    assert CanonConfig.load_or_default() == CanonConfig()
    (tmp_path / ".canon.yml").write_text("width: 32\n")
    assert CanonConfig.load_or_default().width == 32


def test_processor_uses_settings():
    processor = CanonConfig(width=16, capacity=3, cache_max_width=8).processor()
    assert processor.space.width == 16
    store = processor.new_store()
    assert store.capacity == 3
    assert not store.oracle.has_cache
