# ==============================================================================
# PARSER ORCHESTRATOR
# ==============================================================================
#
# Flow:
#   1. Discover bulletins under pdf/<AGENCY>/[<subpath>/]<region-dir>/
#   2. Extract text (pypdf / BeautifulSoup) and normalize it into lines
#   3. Run the region parser with a fresh ParseState per bulletin
#   4. Aggregate into combined and per-region buffers
#   5. Write latest_prices_* / latest_price_ranges_* artifacts
#
# A bulletin that cannot be read or decoded is logged and left out of the
# aggregates; the rest of the batch continues.
#
# ==============================================================================

import logging
from concurrent.futures import ThreadPoolExecutor, TimeoutError as FutureTimeout
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Dict, List, Optional, Union

from presyo import config
from presyo.artifacts import PRICES, RANGES, artifact_path, write_records
from presyo.dates import resolve_date
from presyo.errors import ExtractionTimeout, PresyoError
from presyo.extract import BULLETIN_SUFFIXES, read_bulletin
from presyo.lexicon import region_from_directory
from presyo.models import PriceRangeRecord, PriceRecord
from presyo.parsers import ParseOutput, parser_for
from presyo.text import normalize

logger = logging.getLogger(__name__)

AGENCIES = ('DA', 'DOE', 'DTI')

TextReader = Callable[[Path], str]


# ==============================================================================
# DATA STRUCTURES
# ==============================================================================

@dataclass(frozen=True)
class BulletinFile:
    """One bulletin plus the metadata needed to parse it"""
    path: Path
    agency: str
    region: str
    region_dir: Optional[str] = None

    @property
    def filename(self) -> str:
        return self.path.name


@dataclass
class FileFailure:
    filename: str
    region: str
    error: str


@dataclass
class BatchResult:
    agency: str
    prices: List[PriceRecord] = field(default_factory=list)
    ranges: List[PriceRangeRecord] = field(default_factory=list)
    failures: List[FileFailure] = field(default_factory=list)
    files_parsed: int = 0

    def add(self, output: ParseOutput) -> None:
        self.prices.extend(output.prices)
        self.ranges.extend(output.ranges)
        self.files_parsed += 1

    def by_region(self) -> Dict[str, ParseOutput]:
        """Per-region buffers in first-seen order"""
        grouped: Dict[str, ParseOutput] = {}
        for record in self.prices:
            grouped.setdefault(record.region, ParseOutput()).prices.append(record)
        for record in self.ranges:
            grouped.setdefault(record.region, ParseOutput()).ranges.append(record)
        return grouped

    def summary(self) -> dict:
        return {
            "agency": self.agency,
            "files_parsed": self.files_parsed,
            "prices": len(self.prices),
            "ranges": len(self.ranges),
            "regions": {
                region: {"prices": len(out.prices), "ranges": len(out.ranges)}
                for region, out in self.by_region().items()
            },
            "failures": [
                {"filename": f.filename, "region": f.region, "error": f.error}
                for f in self.failures
            ],
        }


# ==============================================================================
# DISCOVERY
# ==============================================================================

def _region_for(path: Path, agency: str) -> BulletinFile:
    parent = path.parent
    if parent.name.upper() == agency:
        return BulletinFile(path, agency, config.DEFAULT_REGIONS[agency])
    return BulletinFile(path, agency, region_from_directory(parent.name), parent.name)


def discover(root: Union[str, Path], agency: str) -> List[BulletinFile]:
    """All bulletins for one agency, sorted by path for a stable batch order"""
    agency = agency.upper()
    agency_dir = Path(root) / agency
    if not agency_dir.is_dir():
        return []

    bulletins = []
    for path in sorted(agency_dir.rglob("*")):
        if path.is_file() and path.suffix.lower() in BULLETIN_SUFFIXES:
            bulletins.append(_region_for(path, agency))
    return bulletins


def bulletin_from_path(path: Union[str, Path], agency: str) -> BulletinFile:
    """Metadata for a single file given on the command line"""
    return _region_for(Path(path), agency.upper())


# ==============================================================================
# PARSING
# ==============================================================================

def parse_bulletin(
    bulletin: BulletinFile,
    debug: bool = False,
    reader: TextReader = read_bulletin,
) -> ParseOutput:
    """Extract, normalize and parse one bulletin. Raises PresyoError subclasses."""
    raw_text = reader(bulletin.path)

    if debug:
        print("\n=== EXTRACTED TEXT (first 500 chars) ===")
        print(raw_text[:500])
        print("=== END EXTRACTED TEXT ===")

    parser = parser_for(bulletin.agency, bulletin.region)
    date = resolve_date(bulletin.filename, parser.default_date)
    return parser.parse(normalize(raw_text), bulletin.region, date, debug=debug,
                        filename=bulletin.filename)


def _run_with_timeout(fn: Callable[[], ParseOutput], timeout: float) -> ParseOutput:
    # A fresh single-thread executor per file, so a stuck decoder cannot
    # starve the bulletins queued after it.
    executor = ThreadPoolExecutor(max_workers=1)
    try:
        future = executor.submit(fn)
        return future.result(timeout=timeout)
    finally:
        executor.shutdown(wait=False)


def parse_batch(
    bulletins: List[BulletinFile],
    agency: str,
    debug: bool = False,
    workers: int = 1,
    timeout: Optional[float] = None,
    reader: TextReader = read_bulletin,
) -> BatchResult:
    """
    Parse every bulletin, isolating failures per file.

    With workers > 1 files are parsed on a thread pool; results are still
    reduced in discovery order so the output is order-stable.
    """
    timeout = config.parse_timeout() if timeout is None else timeout
    result = BatchResult(agency=agency.upper())

    logger.info("Starting %s parsing: %d files to process", result.agency, len(bulletins))

    def _task(bulletin: BulletinFile) -> Callable[[], ParseOutput]:
        return lambda: parse_bulletin(bulletin, debug=debug, reader=reader)

    def _collect(bulletin: BulletinFile, get_output: Callable[[], ParseOutput]) -> None:
        try:
            output = get_output()
        except FutureTimeout:
            error = ExtractionTimeout(f"Timed out after {timeout:g}s")
            _record_failure(result, bulletin, error)
            return
        except PresyoError as e:
            _record_failure(result, bulletin, e)
            return
        except Exception as e:
            # Never fatal to the batch; keep the traceback for this file
            logger.exception("Unexpected error processing %s (%s)", bulletin.filename, bulletin.region)
            result.failures.append(FileFailure(bulletin.filename, bulletin.region, f"{type(e).__name__}: {e}"))
            return
        logger.info("Processed %s (%s): %d price entries, %d price range entries",
                    bulletin.filename, bulletin.region, len(output.prices), len(output.ranges))
        result.add(output)

    if workers <= 1:
        for bulletin in bulletins:
            _collect(bulletin, lambda b=bulletin: _run_with_timeout(_task(b), timeout))
        return result

    executor = ThreadPoolExecutor(max_workers=workers)
    try:
        futures = [(b, executor.submit(_task(b))) for b in bulletins]
        for bulletin, future in futures:
            _collect(bulletin, lambda f=future: f.result(timeout=timeout))
    finally:
        executor.shutdown(wait=False, cancel_futures=True)
    return result


def _record_failure(result: BatchResult, bulletin: BulletinFile, error: Exception) -> None:
    logger.error("Error processing %s (%s): %s", bulletin.filename, bulletin.region, error)
    result.failures.append(FileFailure(bulletin.filename, bulletin.region, str(error)))


def discover_and_parse(
    root: Union[str, Path],
    agency: str,
    debug: bool = False,
    workers: Optional[int] = None,
    timeout: Optional[float] = None,
    reader: TextReader = read_bulletin,
) -> BatchResult:
    bulletins = discover(root, agency)
    workers = config.worker_count() if workers is None else workers
    return parse_batch(bulletins, agency, debug=debug, workers=workers,
                       timeout=timeout, reader=reader)


# ==============================================================================
# OUTPUT
# ==============================================================================

def write_batch(result: BatchResult, output_dir: Union[str, Path]) -> List[Path]:
    """Combined and per-region artifacts for both record kinds"""
    output_dir = Path(output_dir)
    written = []

    for kind, records in ((PRICES, result.prices), (RANGES, result.ranges)):
        path = artifact_path(output_dir, result.agency, kind)
        write_records(path, records)
        written.append(path)

    for region, output in result.by_region().items():
        for kind, records in ((PRICES, output.prices), (RANGES, output.ranges)):
            path = artifact_path(output_dir, result.agency, kind, region)
            write_records(path, records)
            written.append(path)

    return written
