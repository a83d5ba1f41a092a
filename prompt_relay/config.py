import logging

from hydra import compose, initialize
from omegaconf import OmegaConf

logger = logging.getLogger(__name__)


class ConfigManager:
    """
    Hydra access to the relay's capture settings and similarity strategy.

    ``configs/config.yaml`` holds the ``capture`` section (log root, dedup
    switch, dedup threshold, prompt cap) and picks one file from
    ``configs/similarity/strategy/`` as ``cfg.similarity.strategy``, which
    ``build_strategy`` instantiates through its ``_target_``.

    Usage:
        config = ConfigManager()
        log = ConversationLog.from_config(config.cfg)
        # score with the exact-match strategy and a looser threshold instead
        cfg = config.reload(overrides=["similarity/strategy=exact_match", "capture.dedup_threshold=0.8"])
    """
    def __init__(self, config_name="config", config_path="./configs", overrides=None, version_base="1.3"):
        self.config_name = config_name
        self.config_path = config_path
        self.overrides = overrides or []
        self.version_base = version_base
        self._cfg = None

    def load(self, overrides=None, verbose=False):
        """Load configuration using Hydra"""
        with initialize(version_base=self.version_base, config_path=self.config_path):
            self._cfg = compose(config_name=self.config_name, overrides=overrides or self.overrides)
            if verbose:
                logger.info(f"Loaded config:\n{OmegaConf.to_yaml(self._cfg)}")
            return self._cfg

    def reload(self, overrides=None, verbose=False):
        """Reload configuration using Hydra"""
        return self.load(overrides=overrides, verbose=verbose)

    @property
    def cfg(self):
        """Get the current config object (load if not loaded)"""
        if self._cfg is None:
            return self.load()
        return self._cfg
