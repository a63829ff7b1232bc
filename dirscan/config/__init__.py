from .settings import Preset, ScanPolicy
from .loader import load_policy, policy_from_mapping, save_policy_profile

__all__ = ["Preset", "ScanPolicy", "load_policy", "policy_from_mapping", "save_policy_profile"]
