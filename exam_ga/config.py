"""
Configuración del algoritmo genético de exámenes.

Los parámetros se cargan desde YAML (o JSON, que YAML también acepta) para
que cada corrida sea reproducible y configurable sin tocar el código.
"""
from dataclasses import dataclass, field, asdict
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml


SELECTION_SCHEMES = ("tournament", "roulette")

# Numeración de datetime.weekday(): 0=lunes ... 6=domingo
DEFAULT_EXCLUDED_WEEKDAYS: List[int] = [6]


@dataclass
class GAConfig:
    # Algoritmo genético
    population_size: int = 100
    max_generations: int = 200
    stall_limit: int = 40
    elite_size: int = 2
    mutation_rate: float = 0.05   # por gen
    swap_rate: float = 0.2        # por cromosoma
    crossover_rate: float = 0.9
    selection: str = "tournament"
    tournament_size: int = 3
    fitness_sigma: float = 2.0    # escalamiento sigma para la ruleta
    seed: Optional[int] = None
    workers: int = 1
    time_limit: Optional[float] = None  # segundos

    # Pesos del fitness
    weight_violation: float = 1000.0
    weight_assigned: float = 10.0
    weight_spread: float = 1.0

    # Calendario
    excluded_weekdays: List[int] = field(default_factory=lambda: list(DEFAULT_EXCLUDED_WEEKDAYS))
    slot_minutes: int = 90

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "GAConfig":
        merged = asdict(cls())
        for k, v in data.items():
            if k in merged:
                merged[k] = v
        return cls(**merged)

    def __post_init__(self):
        if self.population_size < 2:
            raise ValueError("population_size debe ser al menos 2")
        if self.max_generations < 1:
            raise ValueError("max_generations debe ser positivo")
        if self.stall_limit < 1:
            raise ValueError("stall_limit debe ser positivo")
        # Sin élite el mejor de cada generación puede empeorar
        if not 1 <= self.elite_size < self.population_size:
            raise ValueError("elite_size debe estar en [1, population_size)")
        for name in ("mutation_rate", "swap_rate", "crossover_rate"):
            value = getattr(self, name)
            if not 0.0 <= value <= 1.0:
                raise ValueError(f"{name} debe estar en [0, 1]")
        if self.selection not in SELECTION_SCHEMES:
            raise ValueError(f"selection desconocida: {self.selection!r}")
        if self.tournament_size < 1:
            raise ValueError("tournament_size debe ser positivo")
        if self.workers < 1:
            raise ValueError("workers debe ser positivo")
        if self.time_limit is not None and self.time_limit <= 0:
            raise ValueError("time_limit debe ser positivo")
        if self.slot_minutes <= 0:
            raise ValueError("slot_minutes debe ser positivo")
        if any(not 0 <= int(d) <= 6 for d in self.excluded_weekdays):
            raise ValueError("excluded_weekdays usa la numeración 0 (lunes) .. 6 (domingo)")
        self.excluded_weekdays = sorted({int(d) for d in self.excluded_weekdays})
        # Completitud por encima de la distribución
        if self.weight_spread >= self.weight_assigned:
            raise ValueError("weight_spread debe ser menor que weight_assigned")


def _load_yaml(path: Path) -> Dict[str, Any]:
    if not path.exists():
        return {}
    text = path.read_text(encoding="utf-8")
    return yaml.safe_load(text) or {}


def load_config(path: str = "config.yaml") -> GAConfig:
    data = _load_yaml(Path(path))
    if not isinstance(data, dict):
        raise ValueError("config.yaml debe contener un objeto mapeo")
    return GAConfig.from_dict(data)
