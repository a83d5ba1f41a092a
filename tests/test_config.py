"""
Unit tests for the Hydra config tree.
"""

import tempfile
import unittest

from prompt_relay.config import ConfigManager
from prompt_relay.core.strategy import (ExactMatchStrategy,
                                        MultiMetricStrategy,
                                        PositionalOverlapStrategy,
                                        build_strategy)
from prompt_relay.data import ConversationLog


class TestConfigManager(unittest.TestCase):
    """Test ConfigManager functionality"""

    def setUp(self):
        """Set up a fresh manager"""
        self.config = ConfigManager()

    def test_defaults(self):
        """Test the default config selects the multi-metric strategy"""
        cfg = self.config.load()
        self.assertTrue(cfg.capture.dedup)
        self.assertEqual(cfg.capture.dedup_threshold, 0.9)
        self.assertEqual(cfg.capture.max_prompt_chars, 100000)
        self.assertEqual(cfg.similarity.strategy._target_, "prompt_relay.core.strategy.MultiMetricStrategy")

        strategy = build_strategy(cfg)
        self.assertIsInstance(strategy, MultiMetricStrategy)
        self.assertEqual(strategy.weights, {"jaccard": 0.3, "cosine": 0.4, "structural": 0.3})
        self.assertEqual(strategy.precision, 3)

    def test_cfg_property_loads_lazily(self):
        self.assertIsNone(self.config._cfg)
        cfg = self.config.cfg
        self.assertIs(self.config.cfg, cfg)

    def test_reload_with_strategy_override(self):
        """Test switching strategies through Hydra overrides"""
        self.config.load()
        cfg = self.config.reload(overrides=["similarity/strategy=exact_match"])
        strategy = build_strategy(cfg)
        self.assertIsInstance(strategy, ExactMatchStrategy)
        self.assertTrue(strategy.empty_prompts_match)

        cfg = self.config.reload(overrides=[
            "similarity/strategy=exact_match",
            "similarity.strategy.empty_prompts_match=false",
        ])
        self.assertFalse(build_strategy(cfg).empty_prompts_match)

        cfg = self.config.reload(overrides=["similarity/strategy=positional_overlap"])
        self.assertIsInstance(build_strategy(cfg), PositionalOverlapStrategy)

    def test_capture_overrides(self):
        cfg = self.config.load(overrides=["capture.dedup_threshold=0.75", "capture.dedup=false"])
        self.assertEqual(cfg.capture.dedup_threshold, 0.75)
        self.assertFalse(cfg.capture.dedup)

    def test_conversation_log_from_config(self):
        cfg = self.config.load()
        with tempfile.TemporaryDirectory() as root_dir:
            log = ConversationLog.from_config(cfg, root_dir=root_dir)
            self.assertEqual(str(log.root_dir), root_dir)
            self.assertIsInstance(log.strategy, MultiMetricStrategy)
            self.assertEqual(log.dedup_threshold, 0.9)
            self.assertTrue(log.dedup)


if __name__ == '__main__':
    unittest.main()
