"""Tests for the ``bln`` command line interface."""

import json

import pytest

from blnverify.cli import build_parser, main
from blnverify.core.logging import getLogger

XOR3_CHAIN = ["D = 0110 a b", "E = 0110 c D"]
XOR3_WRONG_GATE = ["D = 0110 a b", "E = 1110 c D"]
MAJ3_CHAIN_B_FIRST = ["D = 1000 b c", "E = 1110 b c", "F = 1000 a E", "G = 1110 D F"]


@pytest.fixture
def run(tmp_path, isolated_logging):
    """Run ``bln`` with a private configuration file and log directory."""

    def _run(*argv, config=None):
        config_path = tmp_path / "options.json"
        if config is not None:
            config_path.write_text(json.dumps(config), encoding="utf-8")
        return main(
            [
                "--config",
                str(config_path),
                "--log-dir",
                str(tmp_path / "logs"),
                *argv,
            ]
        )

    return _run


class TestVerifyCommand:
    def test_summary(self, run, chain_dir, capsys):
        path = chain_dir("96", 2, 2, [XOR3_CHAIN, XOR3_WRONG_GATE])
        assert run("verify", "3", "96", "2", "2", "-d", str(path.parent)) == 0
        out = capsys.readouterr().out.splitlines()
        assert out == ["[i] violations = 1", "[i] solutions = 2", "[i] points = 1"]

    def test_log_file_written(self, run, chain_dir, tmp_path):
        path = chain_dir("96", 2, 2, [XOR3_CHAIN])
        run("verify", "3", "96", "2", "2", "-d", str(path.parent))
        assert (tmp_path / "logs" / "blnverify.log").exists()

    def test_json(self, run, chain_dir, capsys):
        path = chain_dir("96", 2, 2, [XOR3_WRONG_GATE, XOR3_CHAIN])
        assert run("verify", "3", "96", "2", "2", "-d", str(path.parent), "--json") == 0
        data = json.loads(capsys.readouterr().out)
        assert data["solutions"] == 2
        assert data["violations"] == 1
        assert data["points"] == 1.0
        assert data["failures"] == {"FunctionMismatch": 1}
        assert data["rejected"] == [
            {
                "block": 1,
                "line": 1,
                "category": "FunctionalError",
                "kind": "FunctionMismatch",
                "message": "chain does not compute the target function (2 of 8 bits differ)",
            }
        ]

    def test_symmetry_policy_option(self, run, chain_dir, capsys):
        path = chain_dir("e8", 2, 4, [MAJ3_CHAIN_B_FIRST])
        args = ("verify", "3", "e8", "2", "4", "-d", str(path.parent))

        assert run(*args) == 0
        out = capsys.readouterr().out
        assert "[i] violations = 0" in out
        assert "symmetry property violated in 0 and 1" in out

        assert run(*args, "--symmetry-policy", "reject") == 0
        assert "[i] violations = 1" in capsys.readouterr().out

    def test_symmetry_policy_from_config(self, run, chain_dir, capsys):
        path = chain_dir("e8", 2, 4, [MAJ3_CHAIN_B_FIRST])
        code = run(
            "verify", "3", "e8", "2", "4", "-d", str(path.parent),
            config={"symmetry_policy": "reject"},
        )
        assert code == 0
        assert "[i] violations = 1" in capsys.readouterr().out

    def test_unknown_symmetry_policy_in_config(self, run, chain_dir, capsys):
        path = chain_dir("e8", 2, 4, [MAJ3_CHAIN_B_FIRST])
        code = run(
            "verify", "3", "e8", "2", "4", "-d", str(path.parent),
            config={"symmetry_policy": "sometimes"},
        )
        assert code == 0
        captured = capsys.readouterr()
        assert "[i] violations = 0" in captured.out
        assert "Ignoring symmetry_policy" in captured.err

    def test_verbose_prints_summary_once(self, run, chain_dir, tmp_path, capsys):
        path = chain_dir("96", 2, 2, [XOR3_CHAIN, XOR3_WRONG_GATE])
        assert run("-v", "verify", "3", "96", "2", "2", "-d", str(path.parent)) == 0
        captured = capsys.readouterr()
        assert captured.out.count("solutions = 2") == 1
        assert "solutions =" not in captured.err
        # the rejection reason still reaches the console
        assert "target function" in captured.err
        log_text = (tmp_path / "logs" / "blnverify.log").read_text(encoding="utf-8")
        assert "solutions = 2" in log_text

    def test_log_level_option(self, run, chain_dir, capsys):
        path = chain_dir("96", 2, 2, [XOR3_CHAIN])
        code = run(
            "--log-level", "BLN.threshold=debug",
            "verify", "3", "96", "2", "2", "-d", str(path.parent),
        )
        assert code == 0
        assert getLogger("BLN.threshold").debug_on

    @pytest.mark.parametrize("value", ["BLN.threshold", "BLN=LOUD", "=DEBUG"])
    def test_log_level_usage_errors(self, value):
        with pytest.raises(SystemExit) as exc:
            build_parser().parse_args(["--log-level", value, "threshold", "2", "6"])
        assert exc.value.code == 2

    def test_missing_file(self, run, tmp_path, capsys):
        assert run("verify", "3", "96", "2", "2", "-d", str(tmp_path)) == 2
        assert "chain file not found" in capsys.readouterr().err

    def test_bad_hex(self, run, capsys):
        assert run("verify", "3", "xyz", "2", "2") == 2
        assert "[e]" in capsys.readouterr().err

    @pytest.mark.parametrize("argv", [["verify", "0", "96", "2", "2"], ["verify", "3", "96"]])
    def test_usage_errors(self, argv):
        with pytest.raises(SystemExit) as exc:
            build_parser().parse_args(argv)
        assert exc.value.code == 2


class TestThresholdCommand:
    def test_binate_function(self, run, capsys):
        assert run("threshold", "2", "6") == 0
        assert capsys.readouterr().out.strip() == "not a threshold function"

    @pytest.mark.solver
    def test_majority(self, run, capsys):
        pytest.importorskip("z3")
        assert run("threshold", "3", "e8") == 0
        assert capsys.readouterr().out.strip() == "[1, 1, 1; 2]"
