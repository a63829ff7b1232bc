# tests/test_config.py
"""
Tests for loading scan policies from TOML files, profiles and saving them back.
"""
import pytest
import toml
from pathlib import Path

from dirscan import ConfigError, ScanPolicy
from dirscan.config import load_policy, policy_from_mapping, save_policy_profile
from dirscan.config.loader import load_and_merge_configs


@pytest.fixture
def project_dir(tmp_path: Path) -> Path:
    project = tmp_path / "project"
    project.mkdir()
    (project / ".dirscan.toml").write_text(
        """
preset = "files"
skip_symlinks = true

[profiles.everything]
description = "Every entry, hidden ones included."
preset = "all"

[profiles.with_hidden]
skip_hidden = false
"""
    )
    return project


def test_no_config_gives_all_policy(tmp_path: Path):
    assert load_policy(search_dir=tmp_path, user_config_file=None) == ScanPolicy.all()


def test_global_keys(project_dir: Path):
    policy = load_policy(search_dir=project_dir, user_config_file=None)
    assert policy == ScanPolicy.files().skip_symlinks()


def test_profile_with_own_preset(project_dir: Path):
    policy = load_policy(profile="everything", search_dir=project_dir, user_config_file=None)
    assert policy == ScanPolicy.all()


def test_profile_applies_on_top_of_globals(project_dir: Path):
    policy = load_policy(profile="with_hidden", search_dir=project_dir, user_config_file=None)
    assert policy == ScanPolicy.files().skip_symlinks().skip_hidden(False)


def test_unknown_profile(project_dir: Path):
    with pytest.raises(ConfigError, match="not_there"):
        load_policy(profile="not_there", search_dir=project_dir, user_config_file=None)


def test_pyproject_tool_table(tmp_path: Path):
    (tmp_path / "pyproject.toml").write_text(
        """
[project]
name = "demo"

[tool.dirscan]
preset = "dirs"
skip_hidden = false
"""
    )
    policy = load_policy(search_dir=tmp_path, user_config_file=None)
    assert policy == ScanPolicy.dirs().skip_hidden(False)


def test_project_file_overrides_user_file(tmp_path: Path, project_dir: Path):
    user_file = tmp_path / "user.toml"
    user_file.write_text('skip_backup = false\n\n[profiles.mine]\npreset = "dirs"\n')
    merged = load_and_merge_configs(search_dir=project_dir, user_config_file=user_file)
    assert merged["preset"] == "files"
    assert merged["skip_backup"] is False
    assert set(merged["profiles"]) == {"mine", "everything", "with_hidden"}

    policy = load_policy(search_dir=project_dir, user_config_file=user_file)
    assert policy == ScanPolicy.files().skip_symlinks().skip_backup(False)


@pytest.mark.parametrize("data, message", [
    ({"skip_hiden": True}, "unknown configuration keys"),
    ({"skip_hidden": "yes"}, "skip_hidden must be true or false"),
    ({"preset": "everything"}, "unknown preset"),
    ({"preset": 3}, "preset must be a string"),
])
def test_invalid_mappings(data, message):
    with pytest.raises(ConfigError, match=message):
        policy_from_mapping(data)


def test_malformed_toml(tmp_path: Path):
    (tmp_path / ".dirscan.toml").write_text("preset = \n")
    with pytest.raises(ConfigError, match="could not read config file"):
        load_policy(search_dir=tmp_path, user_config_file=None)


def test_save_profile_and_load_it_back(tmp_path: Path):
    policy = ScanPolicy.files().skip_hidden(False).skip_symlinks()
    assert save_policy_profile(policy, "custom", target_dir=tmp_path) is True

    saved = toml.load(tmp_path / ".dirscan.toml")
    assert saved["profiles"]["custom"] == {
        "preset": "all",
        "skip_dirs": True,
        "skip_symlinks": True,
        "skip_backup": True,
    }
    assert load_policy(profile="custom", search_dir=tmp_path, user_config_file=None) == policy


def test_save_default_profile_keeps_other_profiles(tmp_path: Path, project_dir: Path):
    assert save_policy_profile(ScanPolicy.dirs(), "DEFAULT", target_dir=project_dir) is True
    saved = toml.load(project_dir / ".dirscan.toml")
    assert "preset" not in saved
    assert saved["skip_files"] is True
    assert "everything" in saved["profiles"]
    assert load_policy(search_dir=project_dir, user_config_file=None) == ScanPolicy.dirs()


def test_save_nothing_for_all_policy(tmp_path: Path):
    assert save_policy_profile(ScanPolicy.all(), "plain", target_dir=tmp_path) is False
    assert not (tmp_path / ".dirscan.toml").exists()


def test_profile_that_is_not_a_table(tmp_path: Path):
    (tmp_path / ".dirscan.toml").write_text('[profiles]\nbroken = 3\nwords = "files"\n')
    with pytest.raises(ConfigError, match="profile 'broken' must be a table"):
        load_policy(profile="broken", search_dir=tmp_path, user_config_file=None)
    with pytest.raises(ConfigError, match="profile 'words' must be a table"):
        load_policy(profile="words", search_dir=tmp_path, user_config_file=None)


@pytest.mark.parametrize("data", [3, "files", ["skip_hidden"]])
def test_policy_from_non_mapping(data):
    with pytest.raises(ConfigError, match="configuration must be a table"):
        policy_from_mapping(data)
