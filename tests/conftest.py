import pytest

from clean_text.sources.runes import read_runes_from_bytes


def _run(stage, data):
    """Feed text (str) or raw bytes through ``stage``; return (output, status)."""
    if isinstance(data, str):
        data = data.encode("utf-8")
    items, status = stage(read_runes_from_bytes(data, chunk_size=3)).drain()
    return items, status


@pytest.fixture
def run_stage():
    def run(stage, data):
        items, status = _run(stage, data)
        return "".join(items), status
    return run


@pytest.fixture
def run_tokens():
    return _run
