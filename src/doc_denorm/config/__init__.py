"""Configuration management: store profiles, directives, and TOML loading.

Usage:
    >>> from doc_denorm.config import load_denorm_config, StoreProfile, DenormConfig
"""

from doc_denorm.config.loader import load_denorm_config
from doc_denorm.config.models import DenormConfig, StoreProfile

__all__ = ["load_denorm_config", "DenormConfig", "StoreProfile"]
