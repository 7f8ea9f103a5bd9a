"""Stage registry (the transformer catalog).

Transformers are referenced by short keys on the command line and in batch
job files. Primitives are constructed first; composites are then built from
the already-constructed instances, so no entry refers to one defined later.

User-defined composites come from the `chains:` section of the YAML config,
e.g. `tidy: [lf, trail]`. They may reference built-ins and earlier chains.
"""

from __future__ import annotations
from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

from ..errors import ConfigurationError
from ..pipeline.chain import Chain
from .base import Stage
from .empty_lines import TrimLeadingEmptyLFLines, TrimTrailingEmptyLFLines
from .final_newline import EnsureFinalLFIfNonEmpty
from .line_terminators import ConvertLineTerminators
from .sort import SortLFLinesI, SortLFParagraphsI
from .whitespace import TrimTrailingWhiteSpace

NORM_CHAIN = ("lf", "trail", "trimlf", "nelf")


def make_catalog(extra_chains: Optional[Mapping[str, Sequence[str]]] = None) -> Dict[str, Stage]:
    catalog: Dict[str, Stage] = {
        "lf": ConvertLineTerminators(),
        "trail": TrimTrailingWhiteSpace(),
        "trimlf": Chain(
            [TrimLeadingEmptyLFLines(), TrimTrailingEmptyLFLines()],
            name="trimlf",
            doc="Trim leading and trailing empty lines (LF end of line)",
        ),
        "nelf": EnsureFinalLFIfNonEmpty(),
        "sortli": SortLFLinesI(),
        "sortpi": SortLFParagraphsI(),
    }
    catalog["norm"] = Chain(
        [catalog[k] for k in NORM_CHAIN],
        name="norm",
        doc="Normalize: " + " ".join(NORM_CHAIN),
    )

    for key, keys in (extra_chains or {}).items():
        if key in catalog:
            raise ConfigurationError(f"chain {key!r} would replace an existing transformer")
        if not isinstance(keys, (list, tuple)):
            raise ConfigurationError(f"chain {key!r}: expected a list of transformer keys, got {keys!r}")
        catalog[key] = Chain(
            _resolve(keys, catalog, context=f"chain {key!r}"),
            name=key,
            doc="Chain: " + " ".join(keys),
        )
    return catalog


def make_stages(keys: Iterable[str], catalog: Optional[Mapping[str, Stage]] = None) -> List[Stage]:
    """Resolve catalog keys, in order. Unknown keys raise ConfigurationError."""
    if catalog is None:
        catalog = make_catalog()
    return _resolve(keys, catalog)


def describe_catalog(catalog: Mapping[str, Stage]) -> List[Tuple[str, str]]:
    return [(key, catalog[key].doc) for key in sorted(catalog)]


def _resolve(keys: Iterable[str], catalog: Mapping[str, Stage], context: str = "") -> List[Stage]:
    stages = []
    for key in keys:
        if key not in catalog:
            where = f"{context}: " if context else ""
            raise ConfigurationError(
                f"{where}unknown transformer: {key}. Available: {', '.join(sorted(catalog))}"
            )
        stages.append(catalog[key])
    return stages
