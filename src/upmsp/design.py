# src/upmsp/design.py
from __future__ import annotations
from dataclasses import dataclass, field
from typing import Mapping, Optional, Sequence

@dataclass(frozen=True)
class AlgorithmDesign:
    key: str
    identifier: str
    objective: str
    heuristic: str
    wrapper: Optional[str] = None
    parameters: Mapping[str, str] = field(default_factory=dict)
    notes: Sequence[str] = field(default_factory=tuple)

_ILS_PARAMS = {
    "rna_max": "Non-improving iterations of the inner heuristic per round.",
    "iters_p": "Non-improving rounds before the perturbation level grows.",
    "p0":      "Initial perturbation level (number of random moves) and its increment.",
    "p_max":   "Level ceiling as a multiple of p0; beyond it the level wraps to p0.",
}
_LAHC_PARAMS = {"list_size": "Length of the late acceptance cost history."}
_SA_PARAMS = {
    "alpha":  "Cooling rate applied every sa_max iterations.",
    "t0":     "Initial (and re-heating) temperature.",
    "sa_max": "Iterations per temperature.",
}
_SCHC_PARAMS = {"step_size": "Iterations between refreshes of the cost bound."}

DESIGNS: Mapping[str, AlgorithmDesign] = {
    "ils": AlgorithmDesign(
        key="ils",
        identifier="ILS + Descent",
        objective="Iterated local search; random descent (sideways moves allowed) as the local search phase.",
        heuristic="descent",
        wrapper="ils",
        parameters=_ILS_PARAMS,
        notes=("Perturbation = p random applicable moves, always accepted.",),
    ),
    "lahc": AlgorithmDesign(
        key="lahc",
        identifier="LAHC",
        objective="Late acceptance hill climbing over all enabled neighborhoods.",
        heuristic="lahc",
        parameters=_LAHC_PARAMS,
        notes=("History reset to the starting cost when the non-improvement cap is hit.",),
    ),
    "lahc-ils": AlgorithmDesign(
        key="lahc-ils",
        identifier="ILS + LAHC",
        objective="Iterated local search with LAHC as the local search phase.",
        heuristic="lahc",
        wrapper="ils",
        parameters={**_ILS_PARAMS, **_LAHC_PARAMS},
    ),
    "sa": AlgorithmDesign(
        key="sa",
        identifier="SA",
        objective="Simulated annealing with geometric cooling and re-heating.",
        heuristic="sa",
        parameters=_SA_PARAMS,
        notes=("Temperature reset to t0 once it drops below 1e-6.",),
    ),
    "sa-ils": AlgorithmDesign(
        key="sa-ils",
        identifier="ILS + SA",
        objective="Iterated local search with simulated annealing as the local search phase.",
        heuristic="sa",
        wrapper="ils",
        parameters={**_ILS_PARAMS, **_SA_PARAMS},
    ),
    "schc": AlgorithmDesign(
        key="schc",
        identifier="SCHC",
        objective="Step counting hill climbing over all enabled neighborhoods.",
        heuristic="schc",
        parameters=_SCHC_PARAMS,
        notes=("Cost bound reset to the starting cost when the non-improvement cap is hit.",),
    ),
    "schc-ils": AlgorithmDesign(
        key="schc-ils",
        identifier="ILS + SCHC",
        objective="Iterated local search with SCHC as the local search phase.",
        heuristic="schc",
        wrapper="ils",
        parameters={**_ILS_PARAMS, **_SCHC_PARAMS},
    ),
}

def get_design(key: str) -> AlgorithmDesign:
    if key not in DESIGNS:
        raise KeyError(f"Unknown algorithm '{key}'. Available: {', '.join(sorted(DESIGNS))}")
    return DESIGNS[key]

def describe_design(key: str) -> str:
    d = get_design(key)
    lines = [f"{d.identifier} ({d.key})", d.objective, f"Heuristic: {d.heuristic}"]
    if d.wrapper:
        lines.append(f"Wrapped by: {d.wrapper}")
    if d.parameters:
        lines.append("Parameters:")
        for k, v in d.parameters.items():
            lines.append(f"  - {k}: {v}")
    if d.notes:
        lines.append("Notes:")
        for t in d.notes:
            lines.append(f"  - {t}")
    return "\n".join(lines)
