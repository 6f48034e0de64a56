import sys
import time
import uuid
from datetime import date
from typing import List, Optional, Union

from pydantic import ValidationError

from pathtraffic.core.config import settings
from pathtraffic.core.errors import InputDecodeError, OptionsError
from pathtraffic.core.logging import get_logger
from pathtraffic.models.schemas import AggregateOptions, AggregateResponse, PathDaySummary
from pathtraffic.services.log_pipeline import run_pipeline

logger = get_logger(__name__)


class PipelineTimings:
    """Track timing metrics for pipeline stages."""

    def __init__(self):
        self.start_time = time.time()
        self.decode_ms: float = 0
        self.parse_ms: float = 0
        self.filter_ms: float = 0
        self.group_ms: float = 0
        self.rank_ms: float = 0
        self.total_ms: float = 0

    def log_summary(self, request_id: str):
        self.total_ms = (time.time() - self.start_time) * 1000
        logger.info(
            f"[{request_id}] Pipeline completed - "
            f"decode: {self.decode_ms:.1f}ms, "
            f"parse: {self.parse_ms:.1f}ms, "
            f"filter: {self.filter_ms:.1f}ms, "
            f"group: {self.group_ms:.1f}ms, "
            f"rank: {self.rank_ms:.1f}ms, "
            f"total: {self.total_ms:.1f}ms"
        )

    def record(self, stage: str, elapsed_ms: float):
        setattr(self, f"{stage}_ms", elapsed_ms)


def build_options(
    date_from: Union[str, date],
    date_to: Union[str, date],
    tz: Optional[str] = None,
    top: Union[int, str, None] = None,
) -> AggregateOptions:
    """
    Resolve caller options against settings defaults and validate them.
    Raises OptionsError with a readable message on any configuration defect.
    """
    try:
        return AggregateOptions(
            date_from=date_from,
            date_to=date_to,
            tz=tz if tz is not None else settings.default_tz,
            top=top if top is not None else settings.default_top,
        )
    except ValidationError as e:
        problems = "; ".join(
            f"{'.'.join(str(p) for p in err['loc']) or 'options'}: {err['msg']}"
            for err in e.errors()
        )
        raise OptionsError(f"Invalid options - {problems}") from e


def analyze_log_file(file_bytes: bytes, filename: str, options: AggregateOptions) -> AggregateResponse:
    """
    Main pipeline orchestration for one uploaded export.

    Stages:
    1. Decode and split lines
    2. Parse, filter, group and rank (run_pipeline, timed per stage)
    3. Return response
    """
    request_id = str(uuid.uuid4())[:8]
    timings = PipelineTimings()

    logger.info(
        f"[{request_id}] Starting aggregation for {filename} "
        f"({options.date_from}..{options.date_to}, tz={options.tz.value}, top={options.top})")

    try:
        # Stage 1: Decode and split
        t0 = time.time()
        lines = split_lines(_decode_file(file_bytes))
        timings.decode_ms = (time.time() - t0) * 1000

        # Stage 2: Core pipeline
        run = run_pipeline(lines, options, on_stage=timings.record)

        logger.info(
            f"[{request_id}] Parsed {len(run.records)} records from {len(lines)} raw lines, "
            f"{len(run.in_range)} in range, {len(run.groups)} (date, path) groups")

        timings.log_summary(request_id)

        # Stage 3: Build response
        return AggregateResponse(
            request_id=request_id,
            filename=filename,
            num_lines=len(lines),
            num_records=len(run.records),
            num_groups=len(run.groups),
            items=[
                PathDaySummary(
                    date=s.date,
                    path=s.path,
                    count=s.count,
                    avg_latency=s.avg_latency
                )
                for s in run.ranked
            ]
        )

    except Exception as e:
        logger.error(f"[{request_id}] Pipeline failed: {e}", exc_info=True)
        raise


def split_lines(raw_text: str) -> List[str]:
    """Split decoded text into lines; a trailing newline does not add an empty line."""
    lines = raw_text.split('\n')
    if lines and lines[-1] == '':
        lines.pop()
    return lines


def read_lines(path: str) -> List[str]:
    """Read a whole export from a file path, or stdin for '-'."""
    try:
        if path == '-':
            file_bytes = sys.stdin.buffer.read()
        else:
            with open(path, 'rb') as f:
                file_bytes = f.read()
    except OSError as e:
        raise InputDecodeError(f"Cannot read {path}: {e.strerror or e}") from e

    logger.info(f"Read {len(file_bytes)} bytes from {path}")
    return split_lines(_decode_file(file_bytes))


def _decode_file(file_bytes: bytes) -> str:
    """Decode file bytes to string with fallback encodings."""
    for encoding in ('utf-8-sig', 'cp1252'):
        try:
            return file_bytes.decode(encoding)
        except UnicodeDecodeError:
            continue

    # latin-1 maps every byte, so this cannot fail
    return file_bytes.decode('latin-1')
