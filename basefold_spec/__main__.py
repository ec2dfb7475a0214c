"""Basefold demonstration: commit to a random message, query it honestly,
then tamper with one coordinate of oracle[0] and report how often the
query rejects.

Run: python -m basefold_spec --variables 4 --degree 2 --lambda 40
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from .errors import BasefoldError
from .primitives.field import FieldElement
from .protocol.config import BasefoldConfig
from .protocol.pcs import BasefoldProtocol
from .protocol.proof import Oracles

logger = logging.getLogger("basefold_spec")


def _parse_args(argv: Optional[List[str]]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="basefold-demo",
        description="Commit to a random message and check honest and tampered transcripts",
    )
    parser.add_argument('--config', type=Path, help='JSON config file (see BasefoldConfig.from_json)')
    parser.add_argument('--variables', type=int, help='Hypercube dimension of the first code')
    parser.add_argument('--degree', type=int, help='Degree bound of the first code')
    parser.add_argument('--lambda', dest='security_parameter', type=int,
                        help='Number of query checks per verification')
    parser.add_argument('--modulus', type=int, help='Prime field modulus')
    parser.add_argument('--seed', type=int, help='Seed for message, tamper and query sampling')
    parser.add_argument('--trials', type=int, default=100,
                        help='Tampered verifications used for the rejection rate (default: 100)')
    parser.add_argument('--verbose', '-v', action='count', default=0,
                        help='-v for INFO, -vv for DEBUG logging')
    return parser.parse_args(argv)


def _load_config(args: argparse.Namespace) -> BasefoldConfig:
    if args.config is not None:
        if not args.config.exists():
            raise BasefoldError(f"config file not found: {args.config}")
        config = BasefoldConfig.from_json(str(args.config))
    else:
        config = BasefoldConfig.default()

    for name in ("variables", "degree", "security_parameter", "modulus", "seed"):
        value = getattr(args, name)
        if value is not None:
            setattr(config, name, value)
    config.validate()
    return config


def _tamper(oracles: Oracles, coordinate: int, delta: int) -> Oracles:
    """Copy of the transcript with oracles[0][coordinate] shifted by delta (non-zero)."""
    tampered = [o.copy() for o in oracles]
    field = type(tampered[0])
    tampered[0][coordinate] = tampered[0][coordinate] + field(delta)
    return tampered


def main(argv: Optional[List[str]] = None) -> int:
    args = _parse_args(argv)
    level = logging.WARNING if args.verbose == 0 else logging.INFO if args.verbose == 1 else logging.DEBUG
    logging.basicConfig(level=level, format="%(asctime)s [%(levelname)s] %(name)s: %(message)s")

    try:
        config = _load_config(args)
        rng = config.rng()
        protocol = BasefoldProtocol.from_config(config, rng=rng)

        message = [FieldElement.random(config.modulus, rng) for _ in range(protocol.message_length)]
        oracles, table = protocol.commit(message)

        honest = protocol.query(oracles, table, config.security_parameter)
        print(f"Parameters: variables={config.variables} degree={config.degree} "
              f"lambda={config.security_parameter} modulus={config.modulus}")
        print(f"Message length k={protocol.message_length}, rounds={protocol.n_rounds}")
        print(f"Honest transcript accepted: {honest}")

        coordinate = int(rng.integers(0, protocol.message_length))
        delta = int(rng.integers(1, config.modulus))
        tampered = _tamper(oracles, coordinate, delta)

        verdict = protocol.query(tampered, table, config.security_parameter)
        print(f"Tampered transcript (oracle[0][{coordinate}] += {delta}) rejected: {not verdict}")

        if args.trials > 0:
            rejections = sum(
                not protocol.query(tampered, table, config.security_parameter)
                for _ in range(args.trials)
            )
            print(f"Empirical rejection rate over {args.trials} trials: "
                  f"{rejections / args.trials:.3f}")
    except BasefoldError as exc:
        logger.error("%s", exc)
        return 1

    return 0 if honest else 1


if __name__ == "__main__":
    sys.exit(main())
