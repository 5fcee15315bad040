"""starcat command: convert a binary star catalog to CSV or a C header.

Usage: starcat [option(s)] <input-file>
"""
import argparse
import logging
import sys

from starcat.catalog import ReadOptions, read_catalog, read_header
from starcat.decoder import ByteOrder
from starcat.errors import CatalogError
from starcat.header import Epoch
from starcat.output import OutputConfig, OutputFormat, SortKey, format_info, render

VERSION = "0.1.0"

logger = logging.getLogger("starcat")


def _emit(text: str) -> None:
    # Text fields were decoded latin-1, so this gives back the catalog bytes.
    # Only the file name in a C header comment can fall outside latin-1.
    sys.stdout.flush()
    sys.stdout.buffer.write(text.encode("latin-1", errors="replace"))
    sys.stdout.buffer.flush()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="starcat",
        description="Convert Yale Bright Star style binary catalogs to CSV or a C header.",
    )
    parser.add_argument("input", help="binary catalog file")
    parser.add_argument("-a", dest="magnitude_index", type=int, metavar="<0-9>",
                        help="magnitude column to use, if multiple exist (default: last)")
    parser.add_argument("-f", dest="max_magnitude", type=float, metavar="<mag>",
                        help="filter out magnitudes weaker than specified")
    parser.add_argument("-B1950", dest="epoch", action="store_const", const=Epoch.B1950,
                        help="expect B1950 epoch")
    parser.add_argument("-J2000", dest="epoch", action="store_const", const=Epoch.J2000,
                        help="expect J2000 epoch")
    parser.add_argument("-le", dest="byte_order", action="store_const", const=ByteOrder.LITTLE,
                        help="expect little-endian format (default: detect)")
    parser.add_argument("-be", dest="byte_order", action="store_const", const=ByteOrder.BIG,
                        help="expect big-endian format")
    parser.add_argument("-c", dest="format", action="store_const",
                        const=OutputFormat.C_HEADER, default=OutputFormat.CSV,
                        help="output a C header instead of CSV text")
    parser.add_argument("-s", dest="single_precision", action="store_true",
                        help="output single-precision floating point")
    parser.add_argument("-i", dest="info", action="store_true",
                        help="output only information from the catalog header")
    parser.add_argument("-m", dest="sort", action="store_const", const=SortKey.MAGNITUDE,
                        default=SortKey.INDEX, help="sort output by magnitude, brightest first")
    parser.add_argument("-r", dest="sort", action="store_const", const=SortKey.RIGHT_ASCENSION,
                        help="sort output by increasing right ascension")
    parser.add_argument("-n", dest="include_name", action="store_true",
                        help="output star names")
    parser.add_argument("-p", dest="include_type", action="store_true",
                        help="output spectral class")
    parser.add_argument("-v", "--version", action="version", version=f"%(prog)s {VERSION}")
    parser.add_argument("--verbose", action="store_true", help="log progress to stderr")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format="%(name)s: %(message)s",
    )

    options = ReadOptions(
        byte_order=args.byte_order,
        epoch=args.epoch,
        magnitude_index=args.magnitude_index,
        max_magnitude=args.max_magnitude,
    )
    config = OutputConfig(
        format=args.format,
        sort=args.sort,
        single_precision=args.single_precision,
        include_name=args.include_name,
        include_type=args.include_type,
    )

    try:
        if args.info:
            _emit(format_info(read_header(args.input, options)))
            return 0
        catalog = read_catalog(args.input, options)
    except CatalogError as e:
        logger.error(f"{args.input}: {e}")
        return 1

    _emit(render(catalog, args.input, config))
    return 0


if __name__ == "__main__":
    sys.exit(main())
