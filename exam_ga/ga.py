import logging
import random
import time
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from .config import GAConfig
from .domains import ConstraintModel
from .evaluation import EvaluationResult, evaluate, evaluate_population
from .initial_population import build_initial_population
from .model import Chromosome
from .operators import breed, roulette_select, sigma_scale, tournament_select

logger = logging.getLogger(__name__)

STOP_MAX_GENERATIONS = "max_generations"
STOP_STALL = "stall"
STOP_TIME_LIMIT = "time_limit"


@dataclass
class OptimizationResult:
    best: Chromosome
    evaluation: EvaluationResult
    generation: int          # generación en que apareció el mejor por primera vez
    generations_run: int
    stop_reason: str
    history: List[Dict] = field(default_factory=list)

    @property
    def fitness(self) -> float:
        return self.evaluation.fitness

    @property
    def unassigned(self) -> int:
        return self.evaluation.unassigned

    @property
    def violations(self) -> int:
        return self.evaluation.violations


class GeneticSolver:
    def __init__(self, model: ConstraintModel, cfg: GAConfig, rng: Optional[random.Random] = None):
        self.model = model
        self.cfg = cfg
        self.rng = rng if rng is not None else random.Random(cfg.seed)
        self.history: List[Dict] = []

    def _select(self, population: List[Chromosome], scores: List[float], weights) -> Chromosome:
        if self.cfg.selection == "roulette":
            return roulette_select(population, weights, self.rng)
        return tournament_select(population, scores, self.cfg.tournament_size, self.rng)

    def _next_population(self, population: List[Chromosome], scores: List[float]) -> List[Chromosome]:
        ranked = sorted(range(len(population)), key=lambda i: scores[i], reverse=True)
        # Elitismo: copias, nunca referencias a la generación anterior
        new_pop = [population[i].copy() for i in ranked[: self.cfg.elite_size]]

        weights = sigma_scale(scores, self.cfg.fitness_sigma) if self.cfg.selection == "roulette" else None
        while len(new_pop) < self.cfg.population_size:
            p1 = self._select(population, scores, weights)
            p2 = self._select(population, scores, weights)
            for child in breed(p1, p2, self.model, self.cfg, self.rng):
                if len(new_pop) < self.cfg.population_size:
                    new_pop.append(child)
        return new_pop

    def evolve(self, population: Optional[List[Chromosome]] = None) -> OptimizationResult:
        cfg = self.cfg
        self.history = []
        if population is None:
            population = build_initial_population(self.model, cfg.population_size, self.rng)

        best: Optional[Chromosome] = None
        best_fitness = float("-inf")
        best_gen = 0
        stagnation = 0
        stop_reason = STOP_MAX_GENERATIONS
        started = time.perf_counter()
        gen = 0

        for gen in range(cfg.max_generations):
            evaluations = evaluate_population(population, self.model, cfg, cfg.workers)
            scores = [ev.fitness for ev in evaluations]
            top = max(range(len(population)), key=lambda i: scores[i])

            if scores[top] > best_fitness:
                best_fitness = scores[top]
                best = population[top].copy()
                best_gen = gen
                stagnation = 0
            else:
                stagnation += 1

            avg = sum(scores) / len(scores)
            self.history.append(
                {
                    "gen": gen,
                    "best_fitness": scores[top],
                    "avg_fitness": avg,
                    "best_ever": best_fitness,
                    "violations": evaluations[top].violations,
                }
            )
            if gen % 10 == 0:
                logger.info("Gen %d: mejor=%.3f promedio=%.3f choques=%d",
                            gen, best_fitness, avg, evaluations[top].violations)

            if stagnation >= cfg.stall_limit:
                stop_reason = STOP_STALL
                break
            if cfg.time_limit is not None and time.perf_counter() - started >= cfg.time_limit:
                stop_reason = STOP_TIME_LIMIT
                break
            if gen == cfg.max_generations - 1:
                break

            population = self._next_population(population, scores)

        best_eval = evaluate(best, self.model, cfg)
        logger.info(
            "Fin (%s) tras %d generaciones: fitness=%.3f en gen %d, sin asignar=%d, choques=%d",
            stop_reason, gen + 1, best_eval.fitness, best_gen, best_eval.unassigned, best_eval.violations,
        )
        return OptimizationResult(
            best=best,
            evaluation=best_eval,
            generation=best_gen,
            generations_run=gen + 1,
            stop_reason=stop_reason,
            history=self.history,
        )
