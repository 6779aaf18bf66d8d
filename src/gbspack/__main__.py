import argparse
import logging
import sys
from typing import List, Optional

from . import (
    __version__,
    build_report,
    cart_size,
    max_bank,
    pack_files,
    parse_reserve,
    read_input_list,
    write_patches,
    write_report,
)

logger = logging.getLogger("gbspack")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="gbspack",
        description="Packs object files created by GB Studio into banks.",
    )
    parser.add_argument("inputs", nargs="*", metavar="INPUT", help="Input .o files")
    parser.add_argument(
        "-b",
        "--bank",
        type=int,
        default=1,
        metavar="NN",
        help="Sets the first bank to use (default 1)",
    )
    parser.add_argument(
        "-f",
        "--filter",
        type=int,
        default=0,
        metavar="NN",
        help="Only repack areas from the specified bank (default repack all banks)",
    )
    parser.add_argument(
        "--mbc1",
        action="store_true",
        help="Use MBC1 hardware (skip banks 0x20, 0x40 and 0x60)",
    )
    parser.add_argument(
        "-r",
        "--reserve",
        default="",
        metavar="LIST",
        help="Reserve bytes per bank, e.g. 1:7F3,2:00F (bank:hex-size)",
    )
    parser.add_argument(
        "-o",
        "--output",
        default="",
        help="Set the output path (default updates in-place)",
    )
    parser.add_argument(
        "-e", "--ext", default="o", help="Replace the file extension for output files"
    )
    parser.add_argument(
        "-i",
        "--input-list",
        metavar="FILE",
        help="Read additional input files from FILE, one per line",
    )
    parser.add_argument(
        "-p", "--print-max", action="store_true", help="Output the max bank number used"
    )
    parser.add_argument(
        "-c",
        "--print-cart",
        action="store_true",
        help="Output the minimum cartridge size required",
    )
    parser.add_argument(
        "--report", metavar="FILE", help="Write a JSON report of the bank assignment"
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Sets the level of verbosity"
    )
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}"
    )
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format="%(message)s",
        stream=sys.stderr,
    )

    try:
        inputs = list(args.inputs)
        if args.input_list:
            inputs.extend(read_input_list(args.input_list))

        if not inputs:
            parser.error("at least one input file is required")

        reserve_table = parse_reserve(args.reserve)

        logger.info("Starting at bank=%d", args.bank)
        logger.info("Processing %d files", len(inputs))
        logger.info("Using extension .%s", args.ext)
        if args.output:
            logger.info("Output path=%s", args.output)
        if args.mbc1:
            logger.info("Using MBC1 hardware")

        patches = pack_files(inputs, args.filter, args.bank, args.mbc1, reserve_table)
        output_names = write_patches(patches, args.output, args.ext)

        if args.report:
            write_report(build_report(patches, output_names), args.report)

    except (OSError, ValueError) as e:
        print(f"gbspack: {e}", file=sys.stderr)
        return 1

    logger.info("Done")

    highest = max_bank(patches)
    if args.print_cart:
        print(cart_size(highest))
    elif args.print_max:
        print(highest)

    return 0


if __name__ == "__main__":
    sys.exit(main())
