# dirscan/config/loader.py
"""
Handles loading, merging, and saving of scan policies from/to TOML files.
"""
import toml
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

from dirscan.exceptions import ConfigError
from dirscan.logging_setup import get_logger

from .settings import Preset, ScanPolicy

log = get_logger(__name__)

PROJECT_CONFIG_FILENAMES = [".dirscan.toml", "dirscan.toml", "pyproject.toml"]
USER_CONFIG_DIR = Path.home() / ".config" / "dirscan"
USER_CONFIG_FILE = USER_CONFIG_DIR / "config.toml"

# toml key -> ScanPolicy toggle method.
FLAG_KEYS = ("skip_hidden", "skip_dirs", "skip_files", "skip_symlinks", "skip_backup")
KNOWN_KEYS = set(FLAG_KEYS) | {"preset", "description"}

def _load_toml_file_data(file_path: Path) -> Dict[str, Any]:
    if not file_path.is_file():
        return {}
    log.debug("loading_toml_config_file", path=str(file_path))
    try:
        data = toml.load(file_path)
    except (toml.TomlDecodeError, OSError) as e:
        raise ConfigError(f"could not read config file {file_path}: {e}")
    if file_path.name == "pyproject.toml":
        return data.get("tool", {}).get("dirscan", {})
    return data

def load_and_merge_configs(search_dir: Optional[Path] = None, user_config_file: Optional[Path] = USER_CONFIG_FILE) -> Dict[str, Any]:
    # user-level settings first, then the first project file found in search_dir.
    merged: Dict[str, Any] = {}
    if user_config_file is not None and user_config_file.is_file():
        log.debug("loading_user_global_config", path=str(user_config_file))
        merged.update(_load_toml_file_data(user_config_file))

    base = search_dir if search_dir is not None else Path.cwd()
    for filename in PROJECT_CONFIG_FILENAMES:
        candidate = base / filename
        if not candidate.is_file():
            continue
        project_settings = _load_toml_file_data(candidate)
        if not project_settings:
            continue
        log.debug("loading_project_local_config", path=str(candidate))
        profiles = merged.get("profiles", {})
        project_profiles = project_settings.pop("profiles", {})
        if isinstance(profiles, dict) and isinstance(project_profiles, dict):
            profiles.update(project_profiles)
            merged["profiles"] = profiles
        merged.update(project_settings)
        break

    if not merged:
        log.debug("no_configuration_files_loaded")
    return merged

def policy_from_mapping(data: Mapping[str, Any], base: Optional[ScanPolicy] = None) -> ScanPolicy:
    """Build a policy from a flat mapping of config keys.

    ``preset`` picks the starting policy (ignored when ``base`` is given
    and the mapping has no preset of its own), then every ``skip_*`` key
    is applied on top of it.
    """
    if not isinstance(data, Mapping):
        raise ConfigError(f"configuration must be a table, got {data!r}")
    unknown = set(data) - KNOWN_KEYS
    if unknown:
        raise ConfigError(f"unknown configuration keys: {', '.join(sorted(unknown))}")

    if "preset" in data or base is None:
        preset_value = data.get("preset")
        if preset_value is not None and not isinstance(preset_value, str):
            raise ConfigError(f"preset must be a string, got {preset_value!r}")
        try:
            policy = ScanPolicy.from_preset(Preset.from_string(preset_value))
        except ValueError:
            raise ConfigError(f"unknown preset {preset_value!r}, expected one of: all, files, dirs")
    else:
        policy = base

    for key in FLAG_KEYS:
        if key not in data:
            continue
        value = data[key]
        if not isinstance(value, bool):
            raise ConfigError(f"{key} must be true or false, got {value!r}")
        policy = getattr(policy, key)(value)
    return policy

def load_policy(profile: Optional[str] = None, search_dir: Optional[Path] = None, user_config_file: Optional[Path] = USER_CONFIG_FILE) -> ScanPolicy:
    # loads the merged configuration and resolves an optional named profile on top of it.
    merged = load_and_merge_configs(search_dir, user_config_file)
    profiles = merged.pop("profiles", {})
    policy = policy_from_mapping(merged)

    if profile and profile.upper() != "DEFAULT":
        if not isinstance(profiles, dict) or profile not in profiles:
            raise ConfigError(f"profile {profile!r} not found in configuration")
        if not isinstance(profiles[profile], Mapping):
            raise ConfigError(f"profile {profile!r} must be a table, got {profiles[profile]!r}")
        policy = policy_from_mapping(profiles[profile], base=policy)
        log.debug("profile_applied", profile=profile)

    log.debug("scan_policy_loaded", profile=profile or "DEFAULT", policy=repr(policy))
    return policy

def policy_to_mapping(policy: ScanPolicy) -> Dict[str, bool]:
    # only the flags that differ from the "all" preset.
    defaults = ScanPolicy.all()
    values = {
        "skip_hidden": (policy.exclude_hidden, defaults.exclude_hidden),
        "skip_dirs": (not policy.admit_dirs, not defaults.admit_dirs),
        "skip_files": (not policy.admit_files, not defaults.admit_files),
        "skip_symlinks": (policy.exclude_symlinks, defaults.exclude_symlinks),
        "skip_backup": (policy.exclude_backup, defaults.exclude_backup),
    }
    return {key: value for key, (value, default) in values.items() if value != default}

def save_policy_profile(policy: ScanPolicy, profile_name: str, target_dir: Optional[Path] = None) -> bool:
    base = target_dir if target_dir is not None else Path.cwd()
    target_toml_path = base / ".dirscan.toml"
    if not target_toml_path.exists():
        alt_path = base / "dirscan.toml"
        if alt_path.exists():
            target_toml_path = alt_path
    log.debug("attempting_to_save_profile", profile=profile_name, path=str(target_toml_path))

    profile_data = policy_to_mapping(policy)
    if not profile_data:
        log.debug("no_options_to_save_for_profile", profile=profile_name)
        return False

    existing_data: Dict[str, Any] = {}
    if target_toml_path.exists():
        try:
            existing_data = toml.load(target_toml_path)
        except toml.TomlDecodeError as e:
            raise ConfigError(f"could not read existing TOML {target_toml_path} to save profile: {e}")

    if profile_name.upper() == "DEFAULT":
        profiles_bak = existing_data.pop("profiles", None)
        for key in FLAG_KEYS + ("preset",):
            existing_data.pop(key, None)
        existing_data.update(profile_data)
        if profiles_bak is not None:
            existing_data["profiles"] = profiles_bak
    else:
        existing_data.setdefault("profiles", {})[profile_name] = dict(profile_data, preset="all")

    try:
        with target_toml_path.open("w", encoding="utf-8") as f:
            toml.dump(existing_data, f)
    except OSError as e:
        raise ConfigError(f"error writing profile {profile_name!r} to {target_toml_path}: {e}")
    log.info("profile_saved_successfully", profile=profile_name, path=str(target_toml_path))
    return True
