from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from simpleid.core.auth.otp import OtpDeviceVerifier
from simpleid.core.auth.otp_client import OtpClientFactory, http_client_factory
from simpleid.core.auth.static import StaticPasswordVerifier
from simpleid.core.auth.verifier import CredentialVerifier
from simpleid.core.config.manager import ConfigManager
from simpleid.core.config.models import AppConfig
from simpleid.core.config.paths import ConfigFsPaths, StoreFsPaths
from simpleid.core.logger import setup_logging
from simpleid.core.store.identity import IdentityStore
from simpleid.core.store.index import IdentityIndex
from simpleid.core.store.lookup_cache import LookupCache
from simpleid.core.store.settings_cache import SettingsCache


@dataclass
class Components:
    config: AppConfig
    paths: StoreFsPaths
    identities: IdentityStore
    settings: SettingsCache
    index: IdentityIndex
    verifier: CredentialVerifier


def build_components(
    config_manager: ConfigManager,
    *,
    otp_client_factory: Optional[OtpClientFactory] = None,
    logger: Optional[logging.Logger] = None,
) -> Components:
    """
    Wire the stores, caches and credential verifier from loaded configuration.
    """
    cfg = config_manager.get()
    log = logger or logging.getLogger("simpleid")
    paths = StoreFsPaths.from_config(cfg.store, config_manager.fs)

    identities = IdentityStore(paths, logger=log.getChild("store"))
    settings = SettingsCache(paths, logger=log.getChild("store"))
    index = IdentityIndex(identities, LookupCache(ttl_seconds=cfg.index.ttl_seconds), logger=log.getChild("store"))

    factory = otp_client_factory or http_client_factory(default_urls=cfg.otp.default_urls, timeout_seconds=cfg.otp.timeout_seconds)
    auth_log = log.getChild("auth")
    verifier = CredentialVerifier(
        store=identities,
        static=StaticPasswordVerifier(allow_legacy_login=cfg.auth.allow_legacy_login, logger=auth_log),
        otp=OtpDeviceVerifier(client_factory=factory, logger=auth_log),
        logger=auth_log,
    )
    return Components(config=cfg, paths=paths, identities=identities, settings=settings, index=index, verifier=verifier)


def start(
    root: str = ".",
    *,
    otp_client_factory: Optional[OtpClientFactory] = None,
    level: int = logging.INFO,
) -> Components:
    """
    Load config/simpleid.json under `root`, start file logging in the
    configured log_dir and wire the components.
    """
    fs = ConfigFsPaths(root)
    config_manager = ConfigManager(fs=fs)
    cfg = config_manager.load()
    logger = setup_logging(fs.resolve(cfg.log_dir), level=level)
    logger.info("simpleid started (config version %s).", cfg.config_version)
    return build_components(config_manager, otp_client_factory=otp_client_factory, logger=logger)
