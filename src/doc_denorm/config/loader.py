"""TOML configuration loader for doc-denorm."""

import tomllib
from pathlib import Path

from doc_denorm.config.models import DenormConfig, StoreProfile
from doc_denorm.denormalize.directive import DirectiveOptions


def load_denorm_config(config_path: Path | None = None) -> DenormConfig:
    """Load store profiles and directives from a TOML file.

    Expected layout::

        [store]
        default_profile = "local"
        strict_inverses = false

        [profiles.local]
        provider = "memory"

        [[directives.Child]]
        fields = ["name"]
        from = "parent"

    Args:
        config_path: Path to denorm.toml (default: ``Path.cwd() / "denorm.toml"``)

    Returns:
        DenormConfig with all profiles and directives

    Raises:
        FileNotFoundError: If config file doesn't exist
        pydantic.ValidationError: If a profile or directive is malformed
    """
    if config_path is None:
        config_path = Path.cwd() / "denorm.toml"

    if not config_path.exists():
        raise FileNotFoundError(
            f"Denormalization config not found: {config_path}\n"
            f"Create denorm.toml with [profiles.<name>] and [[directives.<Schema>]] tables."
        )

    with open(config_path, "rb") as f:
        data = tomllib.load(f)

    # Parse profiles
    profiles = {}
    for name, profile_data in data.get("profiles", {}).items():
        profiles[name] = StoreProfile(**profile_data)

    # Parse directives, keyed by dependent schema name
    directives: dict[str, list[DirectiveOptions]] = {}
    for schema_name, entries in data.get("directives", {}).items():
        if isinstance(entries, dict):
            entries = [entries]
        directives[schema_name] = [DirectiveOptions.model_validate(e) for e in entries]

    # Parse store settings
    store_settings = data.get("store", {})

    return DenormConfig(
        profiles=profiles,
        directives=directives,
        default_profile=store_settings.get("default_profile"),
        strict_inverses=store_settings.get("strict_inverses", False),
    )
