"""Store and engine factory.

Builds a ``DocumentStore`` from a denorm.toml profile (or a direct URL)
and a ``SyncEngine`` with the configured directives registered.

Profile resolution priority:
1. Explicit ``profile_name`` argument
2. ``{env_prefix}DENORM_PROFILE`` environment variable
3. ``[store] default_profile`` in denorm.toml
"""

import logging
import os
from collections.abc import Mapping
from urllib.parse import quote

from doc_denorm.adapters.base import DocumentStore
from doc_denorm.adapters.memory import InMemoryDocumentStore
from doc_denorm.adapters.postgres import PostgresDocumentStore
from doc_denorm.config.loader import load_denorm_config
from doc_denorm.config.models import DenormConfig, StoreProfile
from doc_denorm.denormalize.engine import SyncEngine
from doc_denorm.documents.lifecycle import HookRegistry
from doc_denorm.schema.builder import SchemaBuilder, SchemaCatalog

logger = logging.getLogger(__name__)


class ProfileNotFoundError(Exception):
    """Raised when no store profile is configured."""

    pass


# ============================================================================
# Profile Resolution
# ============================================================================


def get_active_profile_name(config: DenormConfig, env_prefix: str = "") -> str:
    """Get active profile name from env var or config default.

    Args:
        config: Loaded configuration.
        env_prefix: Prefix for the environment variable
            (``"MYAPP_"`` reads ``MYAPP_DENORM_PROFILE``).

    Raises:
        ProfileNotFoundError: If no profile is configured
    """
    env_profile = os.environ.get(f"{env_prefix}DENORM_PROFILE")
    if env_profile:
        return env_profile

    if config.default_profile:
        return config.default_profile

    raise ProfileNotFoundError(
        "No doc-denorm store profile configured.\n"
        f"Set {env_prefix}DENORM_PROFILE=<name> or [store] default_profile in denorm.toml.\n"
        f"Available profiles: {', '.join(config.profiles) or '(none)'}"
    )


def resolve_url(profile: StoreProfile) -> str:
    """Resolve profile URL with password substitution.

    Args:
        profile: Store profile from config

    Returns:
        Connection URL with password substituted
    """
    url = profile.url
    if profile.db_password and "[YOUR-PASSWORD]" in url:
        url = url.replace("[YOUR-PASSWORD]", quote(profile.db_password, safe=""))
    return url


# ============================================================================
# Factories
# ============================================================================


def get_store(
    profile_name: str | None = None,
    database_url: str | None = None,
    config: DenormConfig | None = None,
    env_prefix: str = "",
) -> DocumentStore:
    """Create a document store.  No caching: every call builds a new store.

    Args:
        profile_name: Profile from denorm.toml.
        database_url: PostgreSQL URL; when given, profiles are ignored.
        config: Configuration (loaded from ``denorm.toml`` when omitted).
        env_prefix: Prefix for the profile environment variable.

    Raises:
        ProfileNotFoundError: If no profile is configured or the named
            profile does not exist.

    Example:
        >>> store = get_store(database_url="postgresql://localhost/app")
    """
    if database_url:
        return PostgresDocumentStore(database_url=database_url)

    if config is None:
        config = load_denorm_config()
    if profile_name is None:
        profile_name = get_active_profile_name(config, env_prefix=env_prefix)

    if profile_name not in config.profiles:
        raise ProfileNotFoundError(
            f"Profile '{profile_name}' not found in denorm.toml.\n"
            f"Available profiles: {', '.join(config.profiles) or '(none)'}"
        )
    profile = config.profiles[profile_name]

    logger.debug("Using store profile '%s' (%s)", profile_name, profile.provider)
    if profile.provider == "memory":
        return InMemoryDocumentStore()
    return PostgresDocumentStore(database_url=resolve_url(profile), table=profile.table)


def build_engine(
    catalog: SchemaCatalog,
    store: DocumentStore,
    config: DenormConfig | None = None,
    builders: Mapping[str, SchemaBuilder] | None = None,
    hooks: HookRegistry | None = None,
) -> SyncEngine:
    """Create a ``SyncEngine`` and register the configured directives.

    Args:
        catalog: Catalog holding the source schemas.
        store: Store the hooks read from and write to.
        config: Configuration providing ``strict_inverses`` and directives.
        builders: Dependent schema builders, keyed by schema name; needed
            when *config* declares directives.
        hooks: Hook registry to register into.
    """
    strict = config.strict_inverses if config is not None else False
    engine = SyncEngine(catalog, store, hooks=hooks, strict=strict)
    if config is not None and config.directives:
        engine.register_all(builders or {}, config.directives)
    return engine
