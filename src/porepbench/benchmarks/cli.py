"""
Command-line entry points.

Usage:
    porepbench vanilla  --size KB [--m 6] [--challenges 1] [--hasher pedersen]
    porepbench encoding --size KB [--m 5] [--expansion 6] [--layers 10] [--profile]

    drgporep-vanilla-disk --size KB ...   # same as `porepbench vanilla`
    porep-encoding        --size KB ...   # same as `porepbench encoding`
"""

from pathlib import Path
from typing import List, Optional
import argparse
import logging

from .base import Benchmark
from .profiling import profiler_for
from .runner_encoding import (
    DEFAULT_EXPANSION_DEGREE,
    DEFAULT_LAYERS,
    DEFAULT_M as ENCODING_DEFAULT_M,
    EncodingBenchmark,
    EncodingConfig,
)
from .runner_vanilla import (
    DEFAULT_CHALLENGES,
    DEFAULT_M as VANILLA_DEFAULT_M,
    SAMPLES,
    VanillaBenchmark,
    VanillaConfig,
)
from ..errors import PoRepBenchError
from ..log import init_timed
from ..porep.hasher import DEFAULT_HASHER, HASHERS

logger = logging.getLogger(__name__)

KIB = 1024


def positive_int(value: str) -> int:
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"not an integer: {value!r}") from None
    if number <= 0:
        raise argparse.ArgumentTypeError(f"must be positive: {value!r}")
    return number


def _add_common_arguments(parser: argparse.ArgumentParser):
    parser.add_argument('--size', type=positive_int, required=True,
                        help='The data size in KB')
    parser.add_argument('--output', '-o', type=Path,
                        help='Write the result as JSON to this file')
    parser.add_argument('--quiet', '-q', action='store_true',
                        help='Only log warnings and errors')


def add_vanilla_arguments(parser: argparse.ArgumentParser):
    _add_common_arguments(parser)
    parser.add_argument('--m', type=positive_int, default=VANILLA_DEFAULT_M,
                        help=f'The size of m (default: {VANILLA_DEFAULT_M})')
    parser.add_argument('--challenges', type=positive_int, default=DEFAULT_CHALLENGES,
                        help=f'How many challenges to execute (default: {DEFAULT_CHALLENGES})')
    parser.add_argument('--hasher', choices=sorted(HASHERS), default=DEFAULT_HASHER,
                        help=f'Which hasher should be used (default: {DEFAULT_HASHER})')
    parser.add_argument('--samples', type=positive_int, default=SAMPLES,
                        help=f'Prove/verify trials (default: {SAMPLES})')
    parser.set_defaults(build=build_vanilla)


def add_encoding_arguments(parser: argparse.ArgumentParser):
    _add_common_arguments(parser)
    parser.add_argument('--m', type=positive_int, default=ENCODING_DEFAULT_M,
                        help=f'The size of m (default: {ENCODING_DEFAULT_M})')
    parser.add_argument('--expansion', type=positive_int, default=DEFAULT_EXPANSION_DEGREE,
                        help=f'Expansion degree (default: {DEFAULT_EXPANSION_DEGREE})')
    parser.add_argument('--layers', type=positive_int, default=DEFAULT_LAYERS,
                        help=f'How many layers to use (default: {DEFAULT_LAYERS})')
    parser.add_argument('--profile', action='store_true',
                        help='Write a CPU profile of the setup and encode stages')
    parser.set_defaults(build=build_encoding)


def build_vanilla(args: argparse.Namespace) -> Benchmark:
    config = VanillaConfig(
        data_size=args.size * KIB,
        m=args.m,
        challenge_count=args.challenges,
        hasher=args.hasher,
        samples=args.samples,
    )
    return VanillaBenchmark(config)


def build_encoding(args: argparse.Namespace) -> Benchmark:
    config = EncodingConfig(
        data_size=args.size * KIB,
        m=args.m,
        expansion_degree=args.expansion,
        layers=args.layers,
    )
    return EncodingBenchmark(config, profiler_for(args.profile))


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='porepbench',
        description='Proof-of-Replication benchmarks',
    )
    subparsers = parser.add_subparsers(dest='command', required=True)
    add_vanilla_arguments(subparsers.add_parser(
        'vanilla', help='DRG-PoRep replicate/prove/verify bench'))
    add_encoding_arguments(subparsers.add_parser(
        'encoding', help='Delay-encoding throughput bench'))
    return parser


def run(args: argparse.Namespace) -> int:
    """Build and run the selected benchmark. Returns the exit status."""
    try:
        init_timed('warning' if args.quiet else None)
        bench = args.build(args)
        result = bench.timed_run()
    except PoRepBenchError as e:
        logger.error("fatal: %s", e)
        return 1

    if args.output:
        result.save(args.output)
        logger.info("result saved to: %s", args.output)

    return 0


def main(argv: Optional[List[str]] = None) -> int:
    return run(build_parser().parse_args(argv))


def vanilla_main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(prog='drgporep-vanilla-disk',
                                     description='DrgPoRep Vanilla Bench')
    add_vanilla_arguments(parser)
    return run(parser.parse_args(argv))


def encoding_main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(prog='porep-encoding',
                                     description='Delay-encoding Bench')
    add_encoding_arguments(parser)
    return run(parser.parse_args(argv))


if __name__ == '__main__':
    exit(main())
