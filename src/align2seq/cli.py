"""
Command-line interface for align2seq.

    align2seq align-n ACGT ACGA
    align2seq align-p MKV MRV
    align2seq n2p ATGGCC --frame 0
"""
import sys
import argparse
from dataclasses import dataclass
from typing import Optional, Sequence

from align2seq.api import align_nucleotide, align_protein, translate
from align2seq.utils import Config
from align2seq.utils.resources import RESOURCES, Align2SeqError


# Classes --------------------------------------------------------------------------------------------------------------
@dataclass
class CliConfig(Config):
    frame: int = 0
    max_cells: Optional[int] = None


# Argparse types -------------------------------------------------------------------------------------------------------
def non_negative_int_type(value: str) -> int:
    """
    Argparse type for integers >= 0.

    Raises:
        ArgumentTypeError: If not a non-negative integer
    """
    try:
        ivalue = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"Must be an integer, got {value}") from None
    if ivalue < 0: raise argparse.ArgumentTypeError(f"Must be non-negative, got {value}")
    return ivalue


def positive_int_type(value: str) -> int:
    """Argparse type for integers > 0."""
    if (ivalue := non_negative_int_type(value)) == 0: raise argparse.ArgumentTypeError(f"Must be positive, got {value}")
    return ivalue


# Functions ------------------------------------------------------------------------------------------------------------
def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="align2seq",
        description="Score nucleotide or protein sequence similarity, or translate codons",
    )
    parser.add_argument(
        "--max-cells",
        type=positive_int_type,
        default=None,
        help="Largest len1 * len2 an alignment may allocate (default: $ALIGN2SEQ_MAX_CELLS or 2^31 - 1)",
    )
    subparsers = parser.add_subparsers(dest="command", required=True, help="Available commands")

    for name, molecule in (("align-n", "nucleotide"), ("align-p", "protein")):
        sub = subparsers.add_parser(name, help=f"Print the similarity score of two {molecule} sequences")
        sub.add_argument("seq1", help=f"First {molecule} sequence")
        sub.add_argument("seq2", help=f"Second {molecule} sequence")

    n2p_parser = subparsers.add_parser("n2p", help="Translate a nucleotide sequence to amino acids")
    n2p_parser.add_argument("seq", help="Nucleotide sequence")
    n2p_parser.add_argument(
        "--frame", "-f",
        type=non_negative_int_type,
        default=0,
        help="Number of leading bases to skip (default: 0)",
    )
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Main CLI entrypoint."""
    args = build_parser().parse_args(argv)
    config = CliConfig.from_args(args)
    if config.max_cells is not None: RESOURCES.max_cells = config.max_cells

    try:
        if args.command == "align-n":
            print(align_nucleotide(args.seq1, args.seq2))
        elif args.command == "align-p":
            print(align_protein(args.seq1, args.seq2))
        else:
            print(translate(args.seq, config.frame).decode('ascii'))
    except Align2SeqError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
