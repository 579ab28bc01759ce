# exam_ga/domains.py
import logging
from dataclasses import dataclass, field
from datetime import date
from types import MappingProxyType
from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

from .config import GAConfig
from .errors import EmptyInput, InvalidRange, SchedulingError
from .timeframe import Timeslot, derive_dates, derive_timeslots, parse_date, parse_timeslot

logger = logging.getLogger(__name__)


@dataclass(frozen=True, eq=False)
class ConstraintModel:
    """
    Definición inmutable del problema para una corrida.

    `pairs` fija el orden de los genes: secciones en el orden recibido y,
    dentro de cada una, sus cursos. Reglas duras:
      H1: una sección no rinde dos exámenes en la misma (fecha, bloque).
      H2: un aula no aloja dos exámenes en la misma (fecha, bloque).
    """
    courses: Tuple[str, ...]
    sections: Tuple[str, ...]
    rooms: Tuple[str, ...]
    dates: Tuple[date, ...]
    timeslots: Tuple[Timeslot, ...]
    section_courses: Mapping[str, Tuple[str, ...]] = field(default_factory=dict)

    pairs: Tuple[Tuple[str, str], ...] = field(init=False)
    capacity: int = field(init=False)
    surplus: int = field(init=False)

    def __post_init__(self):
        mapping = {s: tuple(self.section_courses.get(s, self.courses)) for s in self.sections}
        object.__setattr__(self, "section_courses", MappingProxyType(mapping))
        pairs = tuple((s, c) for s in self.sections for c in mapping[s])
        object.__setattr__(self, "pairs", pairs)

        # Máximo de exámenes ubicables sin romper H1 ni H2
        n_slots = self.n_dates * self.n_timeslots
        by_section = sum(min(len(mapping[s]), n_slots) for s in self.sections)
        by_room = n_slots * min(len(self.rooms), len(self.sections))
        capacity = min(len(pairs), by_section, by_room)
        object.__setattr__(self, "capacity", capacity)
        object.__setattr__(self, "surplus", len(pairs) - capacity)

    @property
    def n_dates(self) -> int:
        return len(self.dates)

    @property
    def n_timeslots(self) -> int:
        return len(self.timeslots)

    @property
    def n_rooms(self) -> int:
        return len(self.rooms)

    def section_index(self) -> Dict[str, int]:
        return {s: i for i, s in enumerate(self.sections)}


def _clean(values: Optional[Iterable[str]], what: str) -> Tuple[str, ...]:
    seen: List[str] = []
    for raw in values or []:
        name = str(raw).strip()
        if not name:
            continue
        if name in seen:
            logger.warning("Se ignora %s duplicado: %s", what, name)
            continue
        seen.append(name)
    if not seen:
        raise EmptyInput(f"La lista de {what} está vacía")
    return tuple(seen)


def _resolve_dates(request, cfg: GAConfig) -> Tuple[date, ...]:
    if request.dates is not None:
        dates = sorted({parse_date(d) for d in request.dates})
        if not dates:
            raise InvalidRange("La lista de fechas está vacía")
        return tuple(dates)
    if request.start_date is None or request.end_date is None:
        raise InvalidRange("Falta el rango de fechas (start_date, end_date)")
    dates = derive_dates(request.start_date, request.end_date, cfg.excluded_weekdays)
    if not dates:
        raise InvalidRange(
            f"No hay fechas hábiles entre {request.start_date} y {request.end_date}"
        )
    return tuple(dates)


def _resolve_timeslots(request, cfg: GAConfig) -> Tuple[Timeslot, ...]:
    if request.timeslots is not None:
        unique: Dict[Tuple, Timeslot] = {}
        for label in request.timeslots:
            ts = parse_timeslot(label)
            unique.setdefault((ts.start, ts.end), ts)
        if not unique:
            raise InvalidRange("La lista de horarios está vacía")
        return tuple(sorted(unique.values()))
    return tuple(derive_timeslots(request.start_time, request.end_time, cfg.slot_minutes))


def _resolve_section_courses(
    mapping: Optional[Mapping[str, Sequence[str]]],
    sections: Tuple[str, ...],
    courses: Tuple[str, ...],
) -> Dict[str, Tuple[str, ...]]:
    if not mapping:
        return {}
    out: Dict[str, Tuple[str, ...]] = {}
    for section, section_list in mapping.items():
        section = str(section).strip()
        if section not in sections:
            raise SchedulingError(f"Sección desconocida en section_courses: {section}")
        cleaned = _clean(section_list, f"cursos de la sección {section}")
        unknown = [c for c in cleaned if c not in courses]
        if unknown:
            raise SchedulingError(f"La sección {section} referencia cursos desconocidos: {unknown}")
        out[section] = cleaned
    return out


def build_constraint_model(request, cfg: GAConfig) -> ConstraintModel:
    """Normaliza la solicitud y construye el modelo; falla antes de optimizar."""
    courses = _clean(request.courses, "cursos")
    sections = _clean(request.sections, "secciones")
    rooms = _clean(request.rooms, "aulas")
    section_courses = _resolve_section_courses(request.section_courses, sections, courses)
    dates = _resolve_dates(request, cfg)
    timeslots = _resolve_timeslots(request, cfg)

    model = ConstraintModel(
        courses=courses,
        sections=sections,
        rooms=rooms,
        dates=dates,
        timeslots=timeslots,
        section_courses=section_courses,
    )
    logger.info(
        "Modelo: %d exámenes, %d fechas x %d bloques x %d aulas (capacidad %d)",
        len(model.pairs), model.n_dates, model.n_timeslots, model.n_rooms, model.capacity,
    )
    return model
