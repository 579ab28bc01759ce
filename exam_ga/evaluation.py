# exam_ga/evaluation.py
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import List, Set

import numpy as np

from .config import GAConfig
from .domains import ConstraintModel
from .model import Chromosome


@dataclass(frozen=True)
class EvaluationResult:
    fitness: float
    section_conflicts: int   # H1
    room_conflicts: int      # H2
    assigned: int
    unassigned: int
    spread: float

    @property
    def violations(self) -> int:
        return self.section_conflicts + self.room_conflicts


def _pair_conflicts(keys: np.ndarray) -> int:
    """Cantidad de pares de genes que comparten la misma fila de `keys`."""
    if len(keys) < 2:
        return 0
    _, counts = np.unique(keys, axis=0, return_counts=True)
    return int((counts * (counts - 1) // 2).sum())


def _spread(date_idx: np.ndarray, n_dates: int) -> float:
    # Con una sola fecha o sin exámenes no hay distribución que premiar
    if n_dates < 2 or len(date_idx) == 0:
        return 0.0
    per_date = np.bincount(date_idx, minlength=n_dates)
    return float(1.0 / (1.0 + per_date.var()))


def violation_unit(n_genes: int, cfg: GAConfig) -> float:
    """Peso de una violación: siempre supera todo lo que aportan asignación y distribución."""
    return max(cfg.weight_violation, cfg.weight_assigned * n_genes + cfg.weight_spread + 1.0)


def _assigned_matrix(chromosome: Chromosome, model: ConstraintModel) -> np.ndarray:
    sec_idx = model.section_index()
    rows = [
        (sec_idx[g.section], g.date_idx, g.timeslot_idx, g.room_idx)
        for g in chromosome.genes
        if g.assigned
    ]
    return np.array(rows, dtype=int).reshape(-1, 4)


def evaluate(chromosome: Chromosome, model: ConstraintModel, cfg: GAConfig) -> EvaluationResult:
    """Función pura: el mismo cromosoma y modelo producen siempre el mismo puntaje."""
    occ = _assigned_matrix(chromosome, model)
    assigned = len(occ)
    unassigned = len(chromosome.genes) - assigned

    hi = _pair_conflicts(occ[:, [0, 1, 2]])   # sección, fecha, bloque
    ai = _pair_conflicts(occ[:, [3, 1, 2]])   # aula, fecha, bloque
    spread = _spread(occ[:, 1], model.n_dates)

    fitness = (
        cfg.weight_assigned * assigned
        + cfg.weight_spread * spread
        - violation_unit(len(chromosome.genes), cfg) * (hi + ai)
    )
    return EvaluationResult(
        fitness=float(fitness),
        section_conflicts=hi,
        room_conflicts=ai,
        assigned=assigned,
        unassigned=unassigned,
        spread=spread,
    )


def evaluate_population(
    population: List[Chromosome],
    model: ConstraintModel,
    cfg: GAConfig,
    workers: int = 1,
) -> List[EvaluationResult]:
    # Cada evaluación sólo lee el modelo compartido; se puede repartir entre hilos
    if workers <= 1 or len(population) < 2:
        return [evaluate(ch, model, cfg) for ch in population]
    with ThreadPoolExecutor(max_workers=workers) as pool:
        return list(pool.map(lambda ch: evaluate(ch, model, cfg), population))


def conflicting_gene_indices(chromosome: Chromosome) -> Set[int]:
    """Índices de los genes que participan en algún choque H1 o H2."""
    by_section = {}
    by_room = {}
    for idx, g in enumerate(chromosome.genes):
        if not g.assigned:
            continue
        by_section.setdefault((g.section, g.date_idx, g.timeslot_idx), []).append(idx)
        by_room.setdefault((g.room_idx, g.date_idx, g.timeslot_idx), []).append(idx)
    out: Set[int] = set()
    for group in list(by_section.values()) + list(by_room.values()):
        if len(group) > 1:
            out.update(group)
    return out
