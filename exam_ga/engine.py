"""
Punto de entrada del motor: solicitud -> modelo -> AG -> horario por sección.

Los errores de entrada (EmptyInput, InvalidRange) se lanzan antes de crear
la población; la infactibilidad se informa en la respuesta, no como error.
"""
import random
from typing import Any, Dict, Optional, Tuple, Union

from .assembler import assemble_schedule
from .config import GAConfig
from .data_loader import SchedulingRequest
from .domains import ConstraintModel, build_constraint_model
from .ga import GeneticSolver, OptimizationResult

RequestLike = Union[SchedulingRequest, Dict[str, Any]]


def _as_request(request: RequestLike) -> SchedulingRequest:
    if isinstance(request, SchedulingRequest):
        return request
    return SchedulingRequest.from_dict(request)


def solve(
    request: RequestLike,
    cfg: Optional[GAConfig] = None,
    rng: Optional[random.Random] = None,
) -> Tuple[ConstraintModel, OptimizationResult]:
    cfg = cfg or GAConfig()
    model = build_constraint_model(_as_request(request), cfg)
    solver = GeneticSolver(model, cfg, rng)
    return model, solver.evolve()


def generate_schedule(
    request: RequestLike,
    cfg: Optional[GAConfig] = None,
    rng: Optional[random.Random] = None,
) -> Dict[str, Any]:
    model, result = solve(request, cfg, rng)
    return assemble_schedule(result, model)
