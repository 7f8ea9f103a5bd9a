"""Pipeline runners.

- process_stream: byte source -> rune source -> stages -> UTF-8 sink
- process_path: input file -> byte sink
- process_to_path / process_file: same, writing to a path atomically (the
  target is replaced only when the stream ended cleanly)
- build_batch: run every job of a batch config, with a progress bar

Runners never raise for data or I/O failures; they return the terminal Status.
Configuration problems raise ConfigurationError before any input is read.
"""

from __future__ import annotations
from typing import Any, BinaryIO, Dict, List, Optional, Sequence, Tuple
import glob
import logging
import os
import re
import stat
import tempfile

from tqdm import tqdm

from ..config.loader import JobSpec, Settings, load_chains, load_jobs
from ..errors import ConfigurationError, UpstreamIOError
from ..sources.runes import read_runes
from ..stages.base import Stage
from ..stages.registry import make_catalog, make_stages
from ..writers.utf8 import write_runes
from .chain import Chain
from .context import Status

log = logging.getLogger("clean_text.build")

_GLOB_MAGIC = re.compile(r"[*?[]")


def process_stream(
    byte_in: BinaryIO,
    byte_out: BinaryIO,
    stages: Sequence[Stage],
    settings: Optional[Settings] = None,
) -> Status:
    settings = settings or Settings()
    pipeline = Chain(stages, name="pipeline")
    log.debug(pipeline.doc)
    stream = pipeline(read_runes(byte_in, chunk_size=settings.chunk_size))
    try:
        return write_runes(stream, byte_out, buffer_size=settings.write_buffer)
    except UpstreamIOError as e:
        return Status.failed(e)


def _target_mode(path: str) -> int:
    """Permission bits for a replaced file: the existing target's, or the umask default."""
    try:
        return stat.S_IMODE(os.stat(path).st_mode)
    except FileNotFoundError:
        umask = os.umask(0)
        os.umask(umask)
        return 0o666 & ~umask


def process_to_path(
    byte_in: BinaryIO,
    out_path: str,
    stages: Sequence[Stage],
    settings: Optional[Settings] = None,
) -> Status:
    out_dir = os.path.dirname(os.path.abspath(out_path))
    tmp_path = None
    try:
        os.makedirs(out_dir, exist_ok=True)
        fd, tmp_path = tempfile.mkstemp(prefix=".clean-text-", dir=out_dir)
        with os.fdopen(fd, "wb") as fout:
            status = process_stream(byte_in, fout, stages, settings)
        if status.ok:
            os.chmod(tmp_path, _target_mode(out_path))
            os.replace(tmp_path, out_path)
        return status
    except OSError as e:
        return Status.failed(UpstreamIOError(f"cannot write {out_path}", e))
    finally:
        if tmp_path is not None and os.path.exists(tmp_path):
            os.remove(tmp_path)


def process_path(
    in_path: str,
    byte_out: BinaryIO,
    stages: Sequence[Stage],
    settings: Optional[Settings] = None,
) -> Status:
    try:
        fin = open(in_path, "rb")
    except OSError as e:
        return Status.failed(UpstreamIOError(f"cannot open {in_path}", e))
    with fin:
        return process_stream(fin, byte_out, stages, settings)


def process_file(
    in_path: str,
    out_path: str,
    stages: Sequence[Stage],
    settings: Optional[Settings] = None,
) -> Status:
    try:
        fin = open(in_path, "rb")
    except OSError as e:
        return Status.failed(UpstreamIOError(f"cannot open {in_path}", e))
    with fin:
        return process_to_path(fin, out_path, stages, settings)


def glob_root(pattern: str) -> str:
    """Leading directory of ``pattern`` that holds no wildcard."""
    if not _GLOB_MAGIC.search(pattern):
        return os.path.dirname(pattern) or os.curdir
    parts = []
    for part in pattern.split(os.sep):
        if _GLOB_MAGIC.search(part):
            break
        parts.append(part)
    if parts == [""]:
        return os.sep
    return os.sep.join(parts) or os.curdir


def expand_job(job: JobSpec) -> List[Tuple[str, str]]:
    """(input, output) pairs for a job.

    `output_dir` jobs glob their input; each match keeps its path relative to
    the pattern's wildcard-free root, so `src/**/x.txt` maps `src/a/x.txt` to
    `<output_dir>/a/x.txt`.
    """
    if job.output is not None:
        return [(job.input, job.output)]
    matches = sorted(p for p in glob.glob(job.input, recursive=True) if os.path.isfile(p))
    if not matches:
        log.warning(f"Job input {job.input} matched no files")
    root = glob_root(job.input)
    return [(path, os.path.join(job.output_dir, os.path.relpath(path, root))) for path in matches]


def build_batch(cfg: Dict[str, Any], settings: Optional[Settings] = None) -> int:
    """Run every job in ``cfg``. Returns the number of failed files."""
    settings = settings or Settings.from_config(cfg, default_log_level="INFO")
    catalog = make_catalog(load_chains(cfg))

    # resolve everything up front: configuration errors abort before any input is read
    plan = []
    writers: Dict[str, int] = {}
    for i, job in enumerate(load_jobs(cfg)):
        try:
            stages = make_stages(job.transformers, catalog)
        except ConfigurationError as e:
            raise ConfigurationError(f"jobs[{i}]: {e}") from e
        for in_path, out_path in expand_job(job):
            target = os.path.abspath(out_path)
            if target in writers:
                raise ConfigurationError(
                    f"jobs[{i}]: output {out_path} is already written by jobs[{writers[target]}]"
                )
            writers[target] = i
            plan.append((in_path, out_path, stages))

    log.info(f"Batch: {len(plan)} file(s)")
    failed = 0
    for in_path, out_path, stages in tqdm(plan, desc="clean-text", unit="file", disable=not settings.progress):
        status = process_file(in_path, out_path, stages, settings)
        if status.ok:
            log.info(f"{in_path} -> {out_path}: ok")
            continue
        failed += 1
        log.error(f"{in_path}: {status}")
        if settings.fail_fast:
            log.error("Stopping at first failure (run.fail_fast)")
            break

    log.info(f"Batch done: {len(plan)} file(s), {failed} failed")
    return failed
