"""Tests for the blnverify configuration system."""

import json
import tempfile
import unittest
from pathlib import Path

from blnverify.core.config import (
    ConfigConstants,
    SymmetryPolicy,
    VerifierConfiguration,
)


class TestConfiguration(unittest.TestCase):

    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.user_dir = Path(self._tmp.name)
        self.options_file = self.user_dir / ConfigConstants.OPTIONS_FILENAME

    def tearDown(self):
        self._tmp.cleanup()

    def _write(self, text):
        self.options_file.write_text(text, encoding="utf-8")

    def test_defaults_when_missing(self):
        config = VerifierConfiguration(user_dir=self.user_dir)
        self.assertEqual(config.config_file, self.options_file)
        self.assertIs(config.symmetry_policy, SymmetryPolicy.INFORMATIONAL)
        self.assertEqual(config.solver_timeout_ms, 0)
        self.assertEqual(config.log_dir, self.user_dir / "logs")
        self.assertEqual(config.user_dir, self.user_dir)

    def test_load_values(self):
        self._write(
            json.dumps(
                {
                    "symmetry_policy": "REJECT",
                    "solver_timeout_ms": 250,
                    "log_dir": "/var/log/bln",
                }
            )
        )
        config = VerifierConfiguration(self.options_file)
        self.assertIs(config.symmetry_policy, SymmetryPolicy.REJECT)
        self.assertEqual(config.solver_timeout_ms, 250)
        self.assertEqual(config.log_dir, Path("/var/log/bln"))
        self.assertEqual(config["solver_timeout_ms"], 250)
        self.assertEqual(config.get("missing", "dflt"), "dflt")

    def test_invalid_json(self):
        self._write("{not json")
        config = VerifierConfiguration(self.options_file)
        self.assertIs(config.symmetry_policy, SymmetryPolicy.INFORMATIONAL)

    def test_non_object_json(self):
        self._write("[1, 2, 3]")
        config = VerifierConfiguration(self.options_file)
        self.assertIsNone(config.get("symmetry_policy"))
        with self.assertRaises(KeyError):
            config["symmetry_policy"]

    def test_unknown_policy(self):
        self._write('{"symmetry_policy": "sometimes"}')
        config = VerifierConfiguration(self.options_file)
        with self.assertLogs("blnverify.core.config", level="WARNING"):
            policy = config.symmetry_policy
        self.assertEqual(policy, SymmetryPolicy.INFORMATIONAL)

    def test_invalid_timeout(self):
        config = VerifierConfiguration(self.options_file)
        config["solver_timeout_ms"] = "soon"
        self.assertEqual(config.solver_timeout_ms, 0)
        config.set("solver_timeout_ms", -5)
        self.assertEqual(config.solver_timeout_ms, 0)

    def test_save_round_trip(self):
        nested = self.user_dir / "a" / "b" / "options.json"
        config = VerifierConfiguration(nested)
        config.set("symmetry_policy", "reject")
        config.save()
        self.assertTrue(nested.exists())
        reloaded = VerifierConfiguration(nested)
        self.assertIs(reloaded.symmetry_policy, SymmetryPolicy.REJECT)


class TestSymmetryPolicy(unittest.TestCase):
    def test_parse(self):
        self.assertIs(SymmetryPolicy.parse("informational"), SymmetryPolicy.INFORMATIONAL)
        self.assertIs(SymmetryPolicy.parse("Reject"), SymmetryPolicy.REJECT)
        self.assertIs(SymmetryPolicy.parse(SymmetryPolicy.REJECT), SymmetryPolicy.REJECT)

    def test_parse_unknown(self):
        with self.assertRaises(ValueError):
            SymmetryPolicy.parse("never")


if __name__ == "__main__":
    unittest.main()
