"""Primitives - field arithmetic, Reed-Muller codes, Merkle trees, transcript."""

from .field import (
    FieldArray,
    FieldElement,
    byte_length,
    element_bytes,
    from_field_array,
    prime_field,
    to_field_array,
)
from .merkle_tree import (
    HASH_SIZE,
    MerkleProof,
    MerkleRoot,
    MerkleTree,
    verify_merkle_proof,
)
from .reed_muller import AffineSubspace, ReedMullerCode, code_dimension
from .transcript import Transcript

__all__ = [
    # Field
    "FieldElement",
    "FieldArray",
    "prime_field",
    "to_field_array",
    "from_field_array",
    "byte_length",
    "element_bytes",
    # Reed-Muller
    "ReedMullerCode",
    "AffineSubspace",
    "code_dimension",
    # Merkle Tree
    "MerkleTree",
    "MerkleProof",
    "MerkleRoot",
    "HASH_SIZE",
    "verify_merkle_proof",
    # Transcript
    "Transcript",
]
