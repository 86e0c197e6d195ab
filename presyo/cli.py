# ==============================================================================
# COMMAND LINE ENTRY POINT
# ==============================================================================
#
# Usage:
#   presyo-parse da                       # every bulletin under pdf/DA
#   presyo-parse doe pdf/DOE/luzon/x.pdf  # one file
#   presyo-parse dti --debug              # print extracted text and matches
#
# ==============================================================================

import argparse
import json
import sys
from pathlib import Path
from typing import List, Optional

from presyo import config
from presyo.errors import NoBulletinsFound
from presyo.orchestrator import (
    AGENCIES,
    BatchResult,
    bulletin_from_path,
    discover,
    parse_batch,
    write_batch,
)


def build_arg_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="presyo-parse",
        description="Parse DA / DOE / DTI price bulletins into JSON artifacts.",
    )
    p.add_argument("agency", type=str.upper, choices=AGENCIES, help="Bulletin source agency")
    p.add_argument("path", nargs="?", default=None,
                   help="Single bulletin to parse (default: discover every bulletin)")
    p.add_argument("--debug", action="store_true",
                   help="Print extracted text and per-line match diagnostics")
    p.add_argument("--pdf-dir", default=None, help="Root of pdf/<AGENCY>/... (default: $PRESYO_PDF_DIR or pdf)")
    p.add_argument("--output-dir", default=None, help="Artifact directory (default: $PRESYO_OUTPUT_DIR or output)")
    p.add_argument("--workers", type=int, default=None, help="Parse files concurrently")
    p.add_argument("--timeout", type=float, default=None,
                   help="Seconds allowed per bulletin (default: $PRESYO_PARSE_TIMEOUT or 60). "
                        "A timed-out file is marked failed, but its extraction thread keeps "
                        "running and the process waits for it before exiting")
    return p


def print_summary(result: BatchResult) -> None:
    print("\nParsing completed!")
    print(f"Total price entries found: {len(result.prices)}")
    print(f"Total price range entries found: {len(result.ranges)}")

    regions = result.by_region()
    if regions:
        print("\nResults by region:")
        for region, output in regions.items():
            print(f"  {region}: {len(output.prices)} prices, {len(output.ranges)} ranges")

    if result.prices:
        print("\nFirst 10 price entries:")
        print(json.dumps([r.to_json_dict() for r in result.prices[:10]], indent=2, ensure_ascii=False))
    if result.ranges:
        print("\nFirst 5 price range entries:")
        print(json.dumps([r.to_json_dict() for r in result.ranges[:5]], indent=2, ensure_ascii=False))

    if result.failures:
        print(f"\nFailed files: {len(result.failures)}")
        for failure in result.failures:
            print(f"   - {failure.filename}: {failure.error}")


def run(args: argparse.Namespace) -> int:
    pdf_root = Path(args.pdf_dir) if args.pdf_dir else config.pdf_dir()
    output_dir = Path(args.output_dir) if args.output_dir else config.output_dir()
    workers = args.workers if args.workers is not None else config.worker_count()

    if args.path:
        path = Path(args.path)
        if not path.is_file():
            raise NoBulletinsFound(f"No bulletin file at {path}")
        bulletins = [bulletin_from_path(path, args.agency)]
        print(f"\nProcessing specific file: {path}")
    else:
        bulletins = discover(pdf_root, args.agency)
        if not bulletins:
            raise NoBulletinsFound(f"No bulletins found in {pdf_root / args.agency}")
        print(f"Found {len(bulletins)} bulletin files to process")

    result = parse_batch(bulletins, args.agency, debug=args.debug, workers=workers,
                         timeout=args.timeout)
    print_summary(result)

    if args.path and result.failures:
        return 1

    if not result.prices and not result.ranges:
        print("No entries found. Try running with --debug to see extraction details.")
        print(f"Usage: presyo-parse {args.agency.lower()} [path-to-pdf] [--debug]")
        return 0

    write_batch(result, output_dir)
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    args = build_arg_parser().parse_args(argv)
    config.configure_logging(args.debug)
    try:
        return run(args)
    except NoBulletinsFound as e:
        print(f"Error: {e}", file=sys.stderr)
        print("Usage: presyo-parse <da|doe|dti> [path-to-pdf] [--debug]", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
