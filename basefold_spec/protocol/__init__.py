"""Protocol - Basefold commit/fold/query."""

from .config import BasefoldConfig, build_code_family, build_t_vectors
from .fold import Fold
from .pcs import BasefoldProtocol
from .proof import Oracles, RoundOpening, RoundProofTable
from .verifier import QueryVerifier

__all__ = [
    "BasefoldProtocol",
    "BasefoldConfig",
    "build_code_family",
    "build_t_vectors",
    "Fold",
    "Oracles",
    "RoundOpening",
    "RoundProofTable",
    "QueryVerifier",
]
