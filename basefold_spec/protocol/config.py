"""Basefold run configuration and the standard code family builder."""

import json
from dataclasses import asdict, dataclass, fields
from typing import Any, Dict, List, Optional

import galois
import numpy as np

from ..errors import ConfigurationError
from ..primitives.field import FieldArray, prime_field
from ..primitives.reed_muller import ReedMullerCode


@dataclass
class BasefoldConfig:
    """Parameters supplied by a caller of the protocol.

    Fields:
        variables: Hypercube dimension of the first code (m)
        degree: Degree bound of the first code (r)
        security_parameter: Number of query checks (lambda)
        modulus: Prime field modulus
        seed: Seed for the query sampler; None draws fresh OS entropy
        max_workers: Thread pool size for query checks; None uses the executor default
    """
    variables: int = 4
    degree: int = 2
    security_parameter: int = 40
    modulus: int = 97
    seed: Optional[int] = None
    max_workers: Optional[int] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "BasefoldConfig":
        """Build from a mapping; unknown keys are rejected, absent keys take defaults."""
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ConfigurationError(f"unknown config keys: {unknown}")
        config = cls(**data)
        config.validate()
        return config

    @classmethod
    def from_json(cls, path: str) -> "BasefoldConfig":
        """Load from a JSON file.

        Example JSON structure:
        {
          "variables": 4,
          "degree": 2,
          "security_parameter": 40,
          "modulus": 97,
          "seed": 7
        }
        """
        with open(path, "r") as f:
            try:
                data = json.load(f)
            except ValueError as exc:
                # JSONDecodeError and UnicodeDecodeError
                raise ConfigurationError(f"{path}: not valid JSON: {exc}") from exc
        if not isinstance(data, dict):
            raise ConfigurationError(f"{path}: expected a JSON object")
        return cls.from_dict(data)

    @classmethod
    def default(cls) -> "BasefoldConfig":
        return cls()

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    def validate(self) -> None:
        """Raise ConfigurationError on any unusable parameter."""
        for name in ("variables", "degree", "security_parameter", "modulus"):
            if not isinstance(getattr(self, name), int):
                raise ConfigurationError(f"{name} must be an integer")
        if self.variables < 1:
            raise ConfigurationError(f"variables must be >= 1, got {self.variables}")
        if self.degree < 0:
            raise ConfigurationError(f"degree must be >= 0, got {self.degree}")
        if self.security_parameter < 1:
            raise ConfigurationError(
                f"security_parameter must be >= 1, got {self.security_parameter}"
            )
        if self.modulus <= 1 or not galois.is_prime(self.modulus):
            raise ConfigurationError(f"modulus {self.modulus} is not prime")
        if self.modulus <= 1 << self.variables:
            raise ConfigurationError(
                f"modulus {self.modulus} must exceed 2^variables = {1 << self.variables} "
                f"so the t-vector points are distinct"
            )
        if self.max_workers is not None and self.max_workers < 1:
            raise ConfigurationError(f"max_workers must be >= 1, got {self.max_workers}")

    def rng(self) -> np.random.Generator:
        return np.random.default_rng(self.seed)


# --- Code Family ---

def build_code_family(config: BasefoldConfig) -> List[ReedMullerCode]:
    """RM(degree, variables) followed by full-rate RM(m, m) for m = variables-1 .. 1.

    The full-rate tail makes every round's folded output (2^(m-1) values) a
    valid message for the next code.
    """
    family = [ReedMullerCode(config.degree, config.variables, config.modulus)]
    for m in range(config.variables - 1, 0, -1):
        family.append(ReedMullerCode(m, m, config.modulus))
    return family


def build_t_vectors(code_family: List[ReedMullerCode]) -> List[FieldArray]:
    """t_j = j for every round."""
    vectors = []
    for code in code_family:
        GF = prime_field(code.modulus)
        if code.n > code.modulus:
            raise ConfigurationError(
                f"code length {code.n} exceeds modulus {code.modulus}; t-vector points would repeat"
            )
        vectors.append(GF(np.arange(code.n, dtype=np.int64)))
    return vectors
