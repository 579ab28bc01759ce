"""
Armado de la respuesta a partir del mejor cromosoma.

La forma canónica agrupa por sección; cada examen queda ordenado por fecha y
luego por hora de inicio del bloque, que es el orden que muestra el cliente.
"""
import json
from typing import Any, Dict, List

import pandas as pd

from .domains import ConstraintModel
from .ga import OptimizationResult
from .model import Chromosome
from .timeframe import parse_timeslot

SCHEDULE_COLUMNS = ["section", "course", "room", "date", "timeslot"]


def _exam_rows(best: Chromosome, model: ConstraintModel) -> Dict[str, List[tuple]]:
    rows: Dict[str, List[tuple]] = {s: [] for s in model.sections}
    for g in best.genes:
        if not g.assigned:
            continue
        ts = model.timeslots[g.timeslot_idx]
        key = (model.dates[g.date_idx], ts.start, ts.end, g.course, model.rooms[g.room_idx])
        rows[g.section].append((key, g))
    for exams in rows.values():
        exams.sort(key=lambda item: item[0])
    return rows


def assemble_schedule(result: OptimizationResult, model: ConstraintModel) -> Dict[str, Any]:
    sections: Dict[str, List[Dict[str, str]]] = {}
    for section, exams in _exam_rows(result.best, model).items():
        sections[section] = [
            {
                "course": g.course,
                "room": model.rooms[g.room_idx],
                "date": model.dates[g.date_idx].isoformat(),
                "timeslot": model.timeslots[g.timeslot_idx].label,
            }
            for _, g in exams
        ]

    unassigned = [{"section": g.section, "course": g.course} for g in result.best.genes if not g.assigned]
    return {
        "sections": sections,
        "unassigned": unassigned,
        "total_courses": len(model.courses),
        "unassigned_courses": len(unassigned),
        "violations": result.violations,
        "fitness_score": round(result.fitness, 4),
        "generation": result.generation,
    }


def group_by_date(response: Dict[str, Any]) -> Dict[str, Dict[str, List[Dict[str, Any]]]]:
    """Forma alternativa: fecha -> bloque -> examen con sus secciones y aulas."""
    grouped: Dict[str, Dict[str, Dict[str, Dict[str, list]]]] = {}
    for section, exams in response["sections"].items():
        for exam in exams:
            by_slot = grouped.setdefault(exam["date"], {}).setdefault(exam["timeslot"], {})
            entry = by_slot.setdefault(exam["course"], {"sections": [], "rooms": []})
            entry["sections"].append(section)
            if exam["room"] not in entry["rooms"]:
                entry["rooms"].append(exam["room"])

    out: Dict[str, Dict[str, List[Dict[str, Any]]]] = {}
    for day in sorted(grouped):
        out[day] = {}
        for slot in sorted(grouped[day], key=parse_timeslot):
            courses = grouped[day][slot]
            out[day][slot] = [
                {"course": course, "sections": info["sections"], "rooms": info["rooms"]}
                for course, info in sorted(courses.items())
            ]
    return out


def schedule_to_dataframe(response: Dict[str, Any]) -> pd.DataFrame:
    data = [
        {"section": section, **exam}
        for section, exams in response["sections"].items()
        for exam in exams
    ]
    return pd.DataFrame(data, columns=SCHEDULE_COLUMNS)


def section_frames(response: Dict[str, Any]) -> Dict[str, pd.DataFrame]:
    """Una tabla por sección, incluidas las que quedaron sin exámenes."""
    return {
        section: pd.DataFrame(exams, columns=SCHEDULE_COLUMNS[1:])
        for section, exams in response["sections"].items()
    }


def schedule_to_json(response: Dict[str, Any]) -> str:
    return json.dumps(response, ensure_ascii=False, indent=2)
