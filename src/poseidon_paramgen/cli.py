"""
poseidon-paramgen: derive a parameter set and print it as JSON.

Usage:
    poseidon-paramgen --rate 2
    poseidon-paramgen --width 5 --security-level 128 --output params.json
    poseidon-paramgen --rate 1 --fingerprint
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

from .errors import ParamgenError
from .field import Fq
from .input import InputParameters
from .instances import INSTANCES, rate_parameters
from .parameters import generate_parameters

log = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='poseidon-paramgen',
        description='Derive Poseidon permutation parameters over the BLS12-377 scalar field',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    poseidon-paramgen --rate 2                 # Named rate-2 instance (t = 3)
    poseidon-paramgen --width 4 --allow-inverse
    poseidon-paramgen --rate 7 -o rate7.json
        """
    )

    target = parser.add_mutually_exclusive_group(required=True)
    target.add_argument(
        '--rate',
        type=int,
        choices=sorted(INSTANCES),
        help='Named instance by rate (state width = rate + 1)'
    )
    target.add_argument(
        '--width', '-t',
        type=int,
        help='Custom state width t'
    )

    parser.add_argument(
        '--security-level', '-M',
        type=int,
        default=128,
        help='Security target in bits for --width (default: 128)'
    )

    parser.add_argument(
        '--allow-inverse',
        action='store_true',
        help='Permit the inverse S-box for --width'
    )

    parser.add_argument(
        '--output', '-o',
        type=Path,
        help='Write JSON to this file instead of stdout'
    )

    parser.add_argument(
        '--fingerprint',
        action='store_true',
        help='Print only the parameter set fingerprint'
    )

    parser.add_argument(
        '--verbose', '-v',
        action='store_true',
        help='Debug logging'
    )

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Run from the command line; returns the process exit code."""
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format='%(asctime)s %(levelname)s %(name)s: %(message)s',
    )

    try:
        if args.rate is not None:
            parameter_set = rate_parameters(args.rate)
        else:
            input = InputParameters(
                security_level=args.security_level,
                t=args.width,
                field=Fq,
                allow_inverse=args.allow_inverse,
            )
            parameter_set = generate_parameters(input)
    except ParamgenError as e:
        log.error("parameter generation failed: %s", e)
        print(json.dumps(e.to_dict(), indent=2), file=sys.stderr)
        return 1
    except ValueError as e:
        log.error("invalid arguments: %s", e)
        return 2

    if args.fingerprint:
        text = parameter_set.fingerprint()
    else:
        text = json.dumps(parameter_set.to_dict(), indent=2)

    if args.output:
        args.output.write_text(text + '\n')
        print(f"Parameters written to: {args.output}")
    else:
        print(text)

    return 0


if __name__ == '__main__':
    sys.exit(main())
