"""Configuration loader.

Settings live in YAML so runs are reviewable and versionable:

    run:
      chunk_size: 65536     # bytes per read from the input
      write_buffer: 65536   # characters buffered per write to the output
      log_level: WARNING
      log_file: null
      progress: true        # batch runner only
      fail_fast: false      # batch runner only
    chains:
      tidy: [lf, trail]
    jobs:                   # batch runner only
      - input: notes.txt
        output: out/notes.txt
        transformers: [norm]
      - input: "docs/*.md"  # glob, one output per match
        output_dir: out/docs
        transformers: [tidy, sortpi]

CLEAN_TEXT_LOG_LEVEL in the environment overrides run.log_level.
"""

from __future__ import annotations
import os
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

import yaml

from ..errors import ConfigurationError
from ..sources.runes import DEFAULT_CHUNK_SIZE
from ..writers.utf8 import DEFAULT_WRITE_BUFFER

ENV_LOG_LEVEL = "CLEAN_TEXT_LOG_LEVEL"
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def load_yaml(path: str) -> Dict[str, Any]:
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except OSError as e:
        raise ConfigurationError(f"cannot read config {path}: {e}") from e
    except yaml.YAMLError as e:
        raise ConfigurationError(f"invalid YAML in {path}: {e}") from e
    if not isinstance(data, dict):
        raise ConfigurationError(f"{path}: top level must be a mapping")
    return data


def _section(cfg: Dict[str, Any], name: str) -> Dict[str, Any]:
    value = cfg.get(name) or {}
    if not isinstance(value, dict):
        raise ConfigurationError(f"{name}: expected a mapping, got {value!r}")
    return value


def _positive_int(run: Dict[str, Any], key: str, default: int) -> int:
    value = run.get(key, default)
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        raise ConfigurationError(f"run.{key}: expected a positive integer, got {value!r}")
    return value


@dataclass
class Settings:
    chunk_size: int = DEFAULT_CHUNK_SIZE
    write_buffer: int = DEFAULT_WRITE_BUFFER
    log_level: str = "WARNING"
    log_file: Optional[str] = None
    progress: bool = True
    fail_fast: bool = False

    @classmethod
    def from_config(cls, cfg: Dict[str, Any], *, default_log_level: str = "WARNING") -> "Settings":
        run = _section(cfg, "run")
        level = os.environ.get(ENV_LOG_LEVEL) or run.get("log_level") or default_log_level
        level = str(level).upper()
        if level not in LOG_LEVELS:
            raise ConfigurationError(f"unknown log level {level!r}, expected one of {', '.join(LOG_LEVELS)}")
        return cls(
            chunk_size=_positive_int(run, "chunk_size", DEFAULT_CHUNK_SIZE),
            write_buffer=_positive_int(run, "write_buffer", DEFAULT_WRITE_BUFFER),
            log_level=level,
            log_file=run.get("log_file"),
            progress=bool(run.get("progress", True)),
            fail_fast=bool(run.get("fail_fast", False)),
        )


def load_chains(cfg: Dict[str, Any]) -> Dict[str, List[str]]:
    chains = _section(cfg, "chains")
    for key, keys in chains.items():
        if not isinstance(keys, list) or not all(isinstance(k, str) for k in keys):
            raise ConfigurationError(f"chains.{key}: expected a list of transformer keys, got {keys!r}")
    return chains


@dataclass
class JobSpec:
    input: str
    output: Optional[str] = None
    output_dir: Optional[str] = None
    transformers: List[str] = field(default_factory=list)


def load_jobs(cfg: Dict[str, Any]) -> List[JobSpec]:
    raw_jobs = cfg.get("jobs") or []
    if not isinstance(raw_jobs, list):
        raise ConfigurationError("jobs: expected a list")
    jobs = []
    for i, raw in enumerate(raw_jobs):
        if not isinstance(raw, dict):
            raise ConfigurationError(f"jobs[{i}]: expected a mapping, got {raw!r}")
        try:
            job = JobSpec(**raw)
        except TypeError as e:
            raise ConfigurationError(f"jobs[{i}]: {e}") from e
        if not job.input:
            raise ConfigurationError(f"jobs[{i}]: input is required")
        if (job.output is None) == (job.output_dir is None):
            raise ConfigurationError(f"jobs[{i}]: set exactly one of output, output_dir")
        if not isinstance(job.transformers, list) or not all(isinstance(k, str) for k in job.transformers):
            raise ConfigurationError(
                f"jobs[{i}].transformers: expected a list of transformer keys, got {job.transformers!r}"
            )
        jobs.append(job)
    return jobs
