"""
Basefold reference implementation

A reference implementation of the Basefold code commitment: a message is
repeatedly encoded with a shrinking family of Reed-Muller codes, each
codeword is committed with a Merkle tree and folded in half under a
Fiat-Shamir challenge, and a verifier replays randomly sampled fold paths.

Usage:
    from basefold_spec import BasefoldConfig, BasefoldProtocol

    protocol = BasefoldProtocol.from_config(BasefoldConfig(variables=2, degree=1, seed=1))
    oracles, table = protocol.commit([3, 1, 4])
    assert protocol.query(oracles, table, n_queries=5)
"""

from .errors import (
    BasefoldError,
    BasefoldSystemError,
    ConfigurationError,
    DecodingError,
    DivisionByZeroError,
    EncodingError,
    FieldError,
    InvalidModulusError,
    ModulusMismatchError,
    ProofError,
    ValueExceedsModulusError,
)
from .primitives import (
    FieldElement,
    MerkleProof,
    MerkleTree,
    ReedMullerCode,
    Transcript,
    prime_field,
    verify_merkle_proof,
)
from .protocol import (
    BasefoldConfig,
    BasefoldProtocol,
    RoundOpening,
    RoundProofTable,
    build_code_family,
    build_t_vectors,
)

__version__ = "0.1.0"
__all__ = [
    # Field
    "FieldElement",
    "prime_field",
    # Codes
    "ReedMullerCode",
    # Merkle
    "MerkleTree",
    "MerkleProof",
    "verify_merkle_proof",
    # Transcript
    "Transcript",
    # Protocol
    "BasefoldProtocol",
    "BasefoldConfig",
    "RoundOpening",
    "RoundProofTable",
    "build_code_family",
    "build_t_vectors",
    # Errors
    "BasefoldError",
    "BasefoldSystemError",
    "ConfigurationError",
    "FieldError",
    "InvalidModulusError",
    "ValueExceedsModulusError",
    "ModulusMismatchError",
    "DivisionByZeroError",
    "EncodingError",
    "DecodingError",
    "ProofError",
]
