import argparse
import logging
import time
from pathlib import Path
from typing import Any, Dict

import pandas as pd

from exam_ga.assembler import assemble_schedule, schedule_to_dataframe, schedule_to_json
from exam_ga.config import GAConfig, load_config
from exam_ga.data_loader import SchedulingRequest, load_request, load_request_dir
from exam_ga.engine import solve
from exam_ga.errors import SchedulingError
from exam_ga.ga import OptimizationResult


RANGE_ARGS = ("start_date", "end_date", "start_time", "end_time")


def build_request(args: argparse.Namespace) -> SchedulingRequest:
    overrides = {k: getattr(args, k) for k in RANGE_ARGS}
    if args.request:
        req = load_request(args.request)
        for k, v in overrides.items():
            if v is not None:
                setattr(req, k, v)
        return req
    return load_request_dir(args.data_dir, **overrides)


def print_schedule(response: Dict[str, Any]):
    print("\n" + "=" * 72)
    print("HORARIO DE EXÁMENES POR SECCIÓN")
    print("=" * 72)
    for section, exams in response["sections"].items():
        print(f"\nSección {section}")
        for exam in exams:
            print(f"  {exam['date']}  {exam['timeslot']:<22} {exam['course']:<24} {exam['room']}")
    for item in response["unassigned"]:
        print(f"  SIN ASIGNAR: {item['section']} / {item['course']}")
    print("=" * 72 + "\n")


def export_outputs(response: Dict[str, Any], result: OptimizationResult, elapsed: float, out_dir: Path):
    out_dir.mkdir(parents=True, exist_ok=True)
    schedule_to_dataframe(response).to_csv(out_dir / "schedule.csv", index=False)
    (out_dir / "schedule.json").write_text(schedule_to_json(response), encoding="utf-8")
    if result.history:
        pd.DataFrame(result.history).to_csv(out_dir / "history.csv", index=False)
    metrics = {
        "fitness": result.fitness,
        "generation": result.generation,
        "generations_run": result.generations_run,
        "stop_reason": result.stop_reason,
        "unassigned": result.unassigned,
        "violations": result.violations,
        "spread": result.evaluation.spread,
        "time_sec": elapsed,
    }
    pd.DataFrame([metrics]).to_csv(out_dir / "metrics.csv", index=False)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Generación de horarios de exámenes con AG")
    parser.add_argument("--config", default="config.yaml", help="Ruta al archivo de configuración")
    parser.add_argument("--request", help="Solicitud en YAML/JSON (cursos, secciones, aulas, fechas)")
    parser.add_argument("--data_dir", default="data", help="Directorio con los CSV de entrada")
    parser.add_argument("--start_date", help="Fecha inicial (AAAA-MM-DD)")
    parser.add_argument("--end_date", help="Fecha final (AAAA-MM-DD)")
    parser.add_argument("--start_time", help="Hora inicial del rango diario (HH:MM)")
    parser.add_argument("--end_time", help="Hora final del rango diario (HH:MM)")
    parser.add_argument("--seed", type=int, help="Semilla para reproducir la corrida")
    parser.add_argument("--out", default="outputs", help="Directorio de salida")
    return parser


def main():
    parser = build_parser()
    args = parser.parse_args()

    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    cfg = load_config(args.config)
    if args.seed is not None:
        cfg = GAConfig.from_dict({**vars(cfg), "seed": args.seed})

    try:
        request = build_request(args)
        print(f"Población: {cfg.population_size} | Generaciones máx.: {cfg.max_generations}")
        start = time.perf_counter()
        model, result = solve(request, cfg)
        elapsed = time.perf_counter() - start
    except SchedulingError as exc:
        parser.exit(2, f"Error en la solicitud: {exc}\n")

    response = assemble_schedule(result, model)

    print("\n--- MEJOR SOLUCIÓN ---")
    print(
        f"Fitness: {result.fitness:.4f} | Generación: {result.generation} | "
        f"Corte: {result.stop_reason} | Tiempo: {elapsed:.2f}s"
    )
    print(f"Sin asignar={result.unassigned} Choques={result.violations} Distribución={result.evaluation.spread:.4f}")
    print_schedule(response)

    out_dir = Path(args.out)
    export_outputs(response, result, elapsed, out_dir)
    print(f"Se guardaron resultados en {out_dir}/schedule.csv y {out_dir}/schedule.json")


if __name__ == "__main__":
    main()
