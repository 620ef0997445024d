import json

import pytest

from arenapairing.constants import DEFAULT_ADVANCE_COUNT, DEFAULT_K_FACTOR, DEFAULT_RATING
from arenapairing.exceptions import InvalidConfigurationException
from arenapairing.models.enums import Seeding
from arenapairing.models.tournament import TournamentConfig


def test_defaults():
    config = TournamentConfig()
    assert config.k_factor == DEFAULT_K_FACTOR
    assert config.default_rating == DEFAULT_RATING
    assert config.hybrid_advance_count == DEFAULT_ADVANCE_COUNT
    assert config.hybrid_group_count is None
    assert config.hybrid_seeding == Seeding.RANKED
    assert config.seed is None


def test_seeding_accepts_string():
    assert TournamentConfig(hybrid_seeding="random").hybrid_seeding == Seeding.RANDOM


@pytest.mark.parametrize(
    "overrides",
    [
        {"k_factor": 0},
        {"swiss_rounds": 0},
        {"hybrid_group_count": 0},
        {"hybrid_advance_count": 1},
        {"hybrid_seeding": "alphabetical"},
    ],
)
def test_invalid_values_rejected(overrides):
    with pytest.raises(InvalidConfigurationException):
        TournamentConfig(**overrides)


def test_dict_round_trip():
    config = TournamentConfig(name="Spring Open", k_factor=24, hybrid_group_count=3, seed=7)
    assert TournamentConfig.from_dict(config.to_dict()) == config


def test_load_from_file(tmp_path):
    path = tmp_path / "config.json"
    path.write_text(json.dumps({"name": "Club Night", "k_factor": 16, "seed": 3}))

    config = TournamentConfig.load(path)

    assert config.name == "Club Night"
    assert config.k_factor == 16
    assert config.seed == 3
    assert config.guest_rating == TournamentConfig().guest_rating


@pytest.mark.parametrize("content", ["not json", "[1, 2]"])
def test_load_rejects_bad_files(tmp_path, content):
    path = tmp_path / "config.json"
    path.write_text(content)
    with pytest.raises(InvalidConfigurationException):
        TournamentConfig.load(path)


def test_load_missing_file(tmp_path):
    with pytest.raises(InvalidConfigurationException):
        TournamentConfig.load(tmp_path / "missing.json")
