# exam_ga/data_loader.py
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Dict, List, Optional

import pandas as pd
import yaml


@dataclass
class SchedulingRequest:
    courses: List[str]
    sections: List[str]
    rooms: List[str]
    # Listas explícitas (tienen prioridad) o rangos a derivar
    dates: Optional[List[Any]] = None
    timeslots: Optional[List[str]] = None
    start_date: Optional[Any] = None
    end_date: Optional[Any] = None
    start_time: Any = "07:00"
    end_time: Any = "20:00"
    section_courses: Optional[Dict[str, List[str]]] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SchedulingRequest":
        known = {f.name for f in fields(cls)}
        kwargs = {k: v for k, v in data.items() if k in known and v is not None}
        for key in ("courses", "sections", "rooms"):
            kwargs.setdefault(key, [])
        return cls(**kwargs)


def load_request(path: str) -> SchedulingRequest:
    """Lee una solicitud en YAML o JSON (el mismo cuerpo que envía el cliente web)."""
    text = Path(path).read_text(encoding="utf-8")
    data = yaml.safe_load(text) or {}
    if not isinstance(data, dict):
        raise ValueError(f"{path} debe contener un objeto mapeo")
    return SchedulingRequest.from_dict(data)


def _column(df: pd.DataFrame, name: str) -> List[str]:
    col = df[name] if name in df.columns else df.iloc[:, 0]
    return [str(v).strip() for v in col.dropna().tolist()]


def load_request_dir(data_dir: str, **overrides: Any) -> SchedulingRequest:
    """
    Arma la solicitud desde CSVs: courses.csv, sections.csv, rooms.csv
    (columna `name`) y opcionalmente dates.csv, timeslots.csv y
    section_courses.csv (columnas `section`, `course`).
    """
    base = Path(data_dir)
    data: Dict[str, Any] = {
        "courses": _column(pd.read_csv(base / "courses.csv", dtype=str), "name"),
        "sections": _column(pd.read_csv(base / "sections.csv", dtype=str), "name"),
        "rooms": _column(pd.read_csv(base / "rooms.csv", dtype=str), "name"),
    }
    if (base / "dates.csv").exists():
        data["dates"] = _column(pd.read_csv(base / "dates.csv", dtype=str), "date")
    if (base / "timeslots.csv").exists():
        data["timeslots"] = _column(pd.read_csv(base / "timeslots.csv", dtype=str), "timeslot")
    if (base / "section_courses.csv").exists():
        sc = pd.read_csv(base / "section_courses.csv", dtype=str)
        mapping: Dict[str, List[str]] = {}
        for r in sc.itertuples(index=False):
            mapping.setdefault(str(r.section).strip(), []).append(str(r.course).strip())
        data["section_courses"] = mapping

    data.update({k: v for k, v in overrides.items() if v is not None})
    return SchedulingRequest.from_dict(data)
