import pytest

from clean_text.errors import ConfigurationError, InvalidEncoding
from clean_text.pipeline.chain import Chain
from clean_text.pipeline.context import Stream
from clean_text.sources.runes import read_runes_from_bytes
from clean_text.stages.base import Stage
from clean_text.stages.final_newline import EnsureFinalLFIfNonEmpty
from clean_text.stages.line_terminators import ConvertLineTerminators
from clean_text.stages.registry import describe_catalog, make_catalog, make_stages
from clean_text.stages.sort import SortTokensI
from clean_text.stages.tokenize import LineContent


def test_catalog_keys_and_docs():
    catalog = make_catalog()
    assert set(catalog) == {"lf", "trail", "trimlf", "nelf", "sortli", "sortpi", "norm"}
    assert catalog["norm"].doc == "Normalize: lf trail trimlf nelf"
    assert [s.name for s in catalog["norm"].stages] == ["lf", "trail", "trimlf", "nelf"]
    keys = [key for key, _ in describe_catalog(catalog)]
    assert keys == sorted(keys)
    assert all(doc for _, doc in describe_catalog(catalog))


def test_make_stages_in_order():
    catalog = make_catalog()
    stages = make_stages(["nelf", "lf"], catalog)
    assert stages == [catalog["nelf"], catalog["lf"]]
    assert make_stages([]) == []


def test_make_stages_unknown_key():
    with pytest.raises(ConfigurationError, match="unknown transformer: nope"):
        make_stages(["lf", "nope"])


def test_extra_chains(run_stage):
    catalog = make_catalog({"tidy": ["lf", "trail"], "tidier": ["tidy", "nelf"]})
    out, status = run_stage(catalog["tidy"], "a \r\nb")
    assert (out, status.ok) == ("a\nb", True)
    out, _ = run_stage(catalog["tidier"], "a \r\nb")
    assert out == "a\nb\n"
    assert catalog["tidier"].doc == "Chain: tidy nelf"


def test_extra_chain_errors():
    with pytest.raises(ConfigurationError, match="existing transformer"):
        make_catalog({"norm": ["lf"]})
    with pytest.raises(ConfigurationError, match="unknown transformer: later"):
        make_catalog({"first": ["later"], "later": ["lf"]})
    with pytest.raises(ConfigurationError, match="expected a list"):
        make_catalog({"tidy": "lf"})


def test_empty_chain_is_identity(run_stage):
    out, status = run_stage(Chain([]), "x\r \n")
    assert out == "x\r \n"
    assert status.ok


def test_chain_matches_sequential_application(run_stage):
    lf, nelf = ConvertLineTerminators(), EnsureFinalLFIfNonEmpty()
    for sample in ("", "a\r", "a\r\nb", b"a\r\xff"):
        chained = run_stage(Chain([lf, nelf]), sample)
        out, status = chained
        step, step_status = run_stage(lf, sample)
        want, want_status = run_stage(nelf, step)
        if step_status.ok:
            assert (out, status.ok) == (want, want_status.ok)
        else:
            assert out == step
            assert type(status.error) is type(step_status.error)


def test_chain_run_is_a_stage_generator():
    chain = Chain([ConvertLineTerminators(), EnsureFinalLFIfNonEmpty()])
    src = read_runes_from_bytes(b"a\r\nb")
    stream = Stream(chain.run(src), upstream=src)
    assert stream.read_text() == "a\nb\n"
    assert stream.status.ok

    src = read_runes_from_bytes(b"a\r\n\xff")
    stream = Stream(chain.run(src), upstream=src)
    assert "".join(stream) == "a\n"
    assert isinstance(stream.status.error, InvalidEncoding)


def test_stage_and_sort_bases_are_abstract():
    with pytest.raises(TypeError):
        Stage()

    class NoRender(SortTokensI):
        pass

    with pytest.raises(TypeError):
        NoRender(LineContent())
