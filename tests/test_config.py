"""Tests for BasefoldConfig loading and validation, and the demo entry point."""

import json
from pathlib import Path

import pytest

from basefold_spec import BasefoldConfig, ConfigurationError, build_code_family, build_t_vectors
from basefold_spec.__main__ import main
from basefold_spec.primitives.reed_muller import ReedMullerCode


class TestBasefoldConfig:

    def test_defaults(self) -> None:
        config = BasefoldConfig.default()
        assert (config.variables, config.degree, config.security_parameter, config.modulus) == (4, 2, 40, 97)
        assert config.seed is None

    def test_from_dict(self) -> None:
        config = BasefoldConfig.from_dict({"variables": 3, "degree": 1, "seed": 9})
        assert config.variables == 3
        assert config.modulus == 97

    def test_unknown_keys_rejected(self) -> None:
        with pytest.raises(ConfigurationError):
            BasefoldConfig.from_dict({"variables": 3, "rate": 2})

    def test_from_json(self, tmp_path: Path) -> None:
        path = tmp_path / "basefold.json"
        path.write_text(json.dumps({"variables": 3, "degree": 2, "security_parameter": 10, "modulus": 101}))
        config = BasefoldConfig.from_json(str(path))
        assert config.to_dict() == {
            "variables": 3,
            "degree": 2,
            "security_parameter": 10,
            "modulus": 101,
            "seed": None,
            "max_workers": None,
        }

    def test_from_json_requires_object(self, tmp_path: Path) -> None:
        path = tmp_path / "basefold.json"
        path.write_text("[1, 2]")
        with pytest.raises(ConfigurationError):
            BasefoldConfig.from_json(str(path))

    @pytest.mark.parametrize("text", ["{\"variables\": 3,", "not json", ""])
    def test_from_json_rejects_invalid_json(self, tmp_path: Path, text: str) -> None:
        path = tmp_path / "basefold.json"
        path.write_text(text)
        with pytest.raises(ConfigurationError):
            BasefoldConfig.from_json(str(path))

    @pytest.mark.parametrize("overrides", [
        {"variables": 0},
        {"degree": -1},
        {"security_parameter": 0},
        {"modulus": 91},
        {"modulus": 1},
        {"variables": 7},  # 2^7 > 97
        {"max_workers": 0},
        {"variables": "4"},
    ])
    def test_validation(self, overrides: dict) -> None:
        with pytest.raises(ConfigurationError):
            BasefoldConfig.from_dict(overrides)

    def test_seeded_rng_repeats(self) -> None:
        config = BasefoldConfig(seed=3)
        assert config.rng().integers(0, 1000, size=5).tolist() == config.rng().integers(0, 1000, size=5).tolist()


class TestCodeFamily:

    @pytest.mark.parametrize("variables,degree", [(1, 0), (1, 1), (2, 1), (3, 2), (4, 2), (5, 3)])
    def test_chain(self, variables: int, degree: int) -> None:
        family = build_code_family(BasefoldConfig(variables=variables, degree=degree))
        assert len(family) == variables
        assert family[0].degree == degree
        for code, nxt in zip(family, family[1:]):
            assert code.n // 2 == nxt.k

    def test_t_vectors(self) -> None:
        family = build_code_family(BasefoldConfig(variables=3, degree=1))
        vectors = build_t_vectors(family)
        assert [[int(x) for x in t] for t in vectors] == [list(range(8)), list(range(4)), list(range(2))]

    def test_t_vectors_need_room_in_field(self) -> None:
        with pytest.raises(ConfigurationError):
            build_t_vectors([ReedMullerCode(1, 3, 5)])


class TestDemo:

    def test_honest_run(self, capsys: pytest.CaptureFixture) -> None:
        code = main(["--variables", "2", "--degree", "1", "--lambda", "8", "--seed", "3", "--trials", "10"])
        out = capsys.readouterr().out
        assert code == 0
        assert "Honest transcript accepted: True" in out
        assert "Empirical rejection rate over 10 trials" in out

    def test_config_file(self, tmp_path: Path, capsys: pytest.CaptureFixture) -> None:
        path = tmp_path / "basefold.json"
        path.write_text(json.dumps({"variables": 3, "degree": 1, "security_parameter": 4, "seed": 1}))
        assert main(["--config", str(path), "--trials", "0"]) == 0
        assert "variables=3" in capsys.readouterr().out

    def test_invalid_parameters(self) -> None:
        assert main(["--modulus", "91"]) == 1

    def test_missing_config_file(self, tmp_path: Path) -> None:
        assert main(["--config", str(tmp_path / "absent.json")]) == 1

    def test_invalid_json_config(self, tmp_path: Path) -> None:
        path = tmp_path / "basefold.json"
        path.write_text("{\"variables\": 3,")
        assert main(["--config", str(path)]) == 1
