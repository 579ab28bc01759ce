"""
Derivación del calendario de exámenes.

Expande un rango de fechas en la secuencia de días hábiles (excluyendo los
días de descanso) y un rango horario en bloques de duración fija. También
interpreta las fechas y etiquetas de horario explícitas que envía el cliente.
"""
import re
from dataclasses import dataclass, field
from datetime import date, datetime, time, timedelta
from typing import Iterable, List, Union

from .errors import InvalidRange

DateLike = Union[date, str]
TimeLike = Union[time, str]

# Horas de un dígito sin AM/PM menores a esta se leen como de tarde
AFTERNOON_BEFORE = 7

_TIMESLOT_RE = re.compile(
    r"^\s*(\d{1,2}):(\d{2})\s*([AaPp][Mm])?\s*[-–]\s*(\d{1,2}):(\d{2})\s*([AaPp][Mm])?\s*$"
)


@dataclass(frozen=True, order=True)
class Timeslot:
    start: time
    end: time
    label: str = field(default="", compare=False)

    def __post_init__(self):
        if not self.label:
            object.__setattr__(self, "label", f"{self.start:%H:%M}-{self.end:%H:%M}")

    @property
    def minutes(self) -> int:
        delta = datetime.combine(date.min, self.end) - datetime.combine(date.min, self.start)
        return int(delta.total_seconds() // 60)


def parse_date(value: DateLike) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(str(value).strip())
    except ValueError as exc:
        raise InvalidRange(f"Fecha inválida: {value!r}") from exc


def parse_time(value: TimeLike) -> time:
    if isinstance(value, time):
        return value
    try:
        return time.fromisoformat(str(value).strip().zfill(5))
    except ValueError as exc:
        raise InvalidRange(f"Hora inválida: {value!r}") from exc


def _clock(hour: str, minute: str, meridiem: str) -> time:
    h, m = int(hour), int(minute)
    if meridiem:
        if not 1 <= h <= 12:
            raise ValueError("hora fuera de rango en formato de 12 horas")
        h = h % 12 + (12 if meridiem.upper() == "PM" else 0)
    elif len(hour) == 1 and 1 <= h < AFTERNOON_BEFORE:
        # "1:00-3:00" sin AM/PM es de tarde; "01:00" se respeta como 24 h
        h += 12
    return time(h, m)


def parse_timeslot(label: Union[str, Timeslot]) -> Timeslot:
    """
    Acepta "08:00-09:30", "8:00 - 10:00", "1:00-3:00" (tarde) y "08:00 AM - 09:30 AM".
    Conserva la etiqueta original para devolverla tal cual en la respuesta.
    """
    if isinstance(label, Timeslot):
        return label
    text = str(label)
    m = _TIMESLOT_RE.match(text)
    if not m:
        raise InvalidRange(f"Horario inválido: {label!r}")
    try:
        start = _clock(m.group(1), m.group(2), m.group(3) or "")
        end = _clock(m.group(4), m.group(5), m.group(6) or "")
    except ValueError as exc:
        raise InvalidRange(f"Horario inválido: {label!r}") from exc
    if start >= end:
        raise InvalidRange(f"El horario {label!r} termina antes de empezar")
    return Timeslot(start=start, end=end, label=text.strip())


def derive_dates(
    start: DateLike,
    end: DateLike,
    excluded_weekdays: Iterable[int] = (6,),
) -> List[date]:
    """Fechas de start a end (inclusive) sin los días excluidos (por defecto domingo)."""
    d0, d1 = parse_date(start), parse_date(end)
    if d0 > d1:
        raise InvalidRange(f"La fecha inicial {d0} es posterior a la final {d1}")
    excluded = set(excluded_weekdays)
    out = []
    current = d0
    while current <= d1:
        if current.weekday() not in excluded:
            out.append(current)
        current += timedelta(days=1)
    return out


def derive_timeslots(start: TimeLike, end: TimeLike, minutes: int = 90) -> List[Timeslot]:
    """Bloques consecutivos de `minutes` minutos; se descarta el bloque parcial final."""
    t0, t1 = parse_time(start), parse_time(end)
    if t0 >= t1:
        raise InvalidRange(f"La hora inicial {t0:%H:%M} no es anterior a la final {t1:%H:%M}")
    if minutes <= 0:
        raise InvalidRange("La duración del bloque debe ser positiva")

    step = timedelta(minutes=minutes)
    limit = datetime.combine(date.min, t1)
    current = datetime.combine(date.min, t0)
    slots: List[Timeslot] = []
    while current + step <= limit:
        slots.append(Timeslot(start=current.time(), end=(current + step).time()))
        current += step

    if not slots:
        raise InvalidRange(
            f"No cabe ningún bloque de {minutes} min entre {t0:%H:%M} y {t1:%H:%M}"
        )
    return slots
