"""Tests for agent registry: config loading, merging, caching, fail-fast."""

import os
import sys
import tempfile
from pathlib import Path
from unittest import TestCase, main
from unittest.mock import patch

os.environ.setdefault("OPENAI_API_KEY", "test-key")
# Allow importing formulab when running from project root
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

import formulab.agents.registry as reg
from formulab.models.formulation import Formulation


class TestAgentRegistry(TestCase):
    """Tests for agent registry config loading, merging, caching, fail-fast."""

    def tearDown(self):
        reg._config = None
        reg._agent_cache.clear()

    def _with_config_path(self, path: Path):
        orig = os.environ.get("AGENTS_CONFIG_PATH")
        os.environ["AGENTS_CONFIG_PATH"] = str(path)
        reg._config = None

        def restore():
            if orig is not None:
                os.environ["AGENTS_CONFIG_PATH"] = orig
            else:
                os.environ.pop("AGENTS_CONFIG_PATH", None)
            reg._config = None

        self.addCleanup(restore)

    def test_fail_fast_missing_config(self):
        """When agents config file is missing, registry raises FileNotFoundError."""
        self._with_config_path(Path("/nonexistent/agents.yaml"))
        with self.assertRaises(FileNotFoundError) as ctx:
            reg._load_config()
        self.assertIn("not found", str(ctx.exception).lower())

    def test_invalid_agent_config_rejected(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "agents.yaml"
            path.write_text("agents:\n  formulation:\n    temperature: hot\n", encoding="utf-8")
            self._with_config_path(path)
            with self.assertRaises(ValueError) as ctx:
                reg._load_config()
            self.assertIn("system_prompt", str(ctx.exception))

    def test_non_numeric_sampling_rejected(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "agents.yaml"
            path.write_text(
                "agents:\n  formulation:\n    system_prompt: hi\n    top_p: high\n",
                encoding="utf-8",
            )
            self._with_config_path(path)
            with self.assertRaises(ValueError) as ctx:
                reg._load_config()
            self.assertIn("top_p", str(ctx.exception))

    def test_load_config_returns_structure(self):
        config = reg.get_all_config()
        self.assertIn("defaults", config)
        self.assertIn("formulation", config["agents"])

    def test_get_agent_config_merges_defaults(self):
        cfg = reg.get_agent_config("formulation")
        self.assertEqual(cfg["model"], "openai:gpt-4o-mini")
        self.assertEqual(cfg["retries"], 0)
        self.assertEqual(cfg["temperature"], 0.7)
        self.assertEqual(cfg["top_p"], 0.95)
        self.assertIn("system_prompt", cfg)

    def test_unknown_agent_raises(self):
        with self.assertRaises(ValueError) as ctx:
            reg.get_agent_config("nope")
        self.assertIn("Unknown agent", str(ctx.exception))

    def test_model_settings_include_json_mode_for_openai(self):
        with patch.object(reg, "FORMULATION_MODEL", ""):
            settings = reg.build_model_settings("formulation")
        self.assertEqual(settings["temperature"], 0.7)
        self.assertEqual(settings["top_p"], 0.95)
        self.assertEqual(settings["extra_body"], {"response_format": {"type": "json_object"}})

    def test_env_model_override(self):
        with patch.object(reg, "FORMULATION_MODEL", "google-gla:gemini-2.5-flash"):
            self.assertEqual(reg.resolve_model_name("formulation"), "google-gla:gemini-2.5-flash")
            settings = reg.build_model_settings("formulation")
        self.assertNotIn("extra_body", settings)
        self.assertEqual(settings["temperature"], 0.7)
        self.assertEqual(settings["top_p"], 0.95)

    def test_get_agent_caches(self):
        with patch.object(reg, "FORMULATION_MODEL", ""):
            agent1 = reg.get_agent("formulation")
            agent2 = reg.get_agent("formulation")
        self.assertIs(agent1, agent2)

    def test_get_agent_cache_distinguishes_arguments(self):
        """Different instructions or output types never return a previously cached agent."""
        with patch.object(reg, "FORMULATION_MODEL", ""):
            plain = reg.get_agent("formulation")
            with_schema = reg.get_agent("formulation", extra_instructions="JSON only")
            with_other = reg.get_agent("formulation", extra_instructions="YAML only")
            typed = reg.get_agent("formulation", output_type=Formulation)
            again = reg.get_agent("formulation", extra_instructions="JSON only")
        self.assertIsNot(plain, with_schema)
        self.assertIsNot(with_schema, with_other)
        self.assertIsNot(plain, typed)
        self.assertIs(with_schema, again)

    def test_reload_config_clears_cache(self):
        with patch.object(reg, "FORMULATION_MODEL", ""):
            agent_before = reg.get_agent("formulation")
            config_before = reg.get_agent_config("formulation")
            reg.reload_config()
            config_after = reg.get_agent_config("formulation")
            agent_after = reg.get_agent("formulation")
        self.assertEqual(config_before["system_prompt"], config_after["system_prompt"])
        self.assertIsNot(agent_before, agent_after)


if __name__ == "__main__":
    main()
