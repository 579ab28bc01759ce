# exam_ga/initial_population.py
import random
from typing import List

from .domains import ConstraintModel
from .model import Chromosome, Gene


def random_placement(model: ConstraintModel, rng: random.Random) -> tuple:
    return (
        rng.randrange(model.n_dates),
        rng.randrange(model.n_timeslots),
        rng.randrange(model.n_rooms),
    )


def random_gene(model: ConstraintModel, section: str, course: str, rng: random.Random) -> Gene:
    d, t, r = random_placement(model, rng)
    return Gene(section=section, course=course, date_idx=d, timeslot_idx=t, room_idx=r)


def build_random_chromosome(model: ConstraintModel, rng: random.Random) -> Chromosome:
    # Sin rechazo por conflictos: la selección se encarga de repararlos
    genes: List[Gene] = [random_gene(model, s, c, rng) for s, c in model.pairs]
    # Sólo quedan sin asignar los exámenes que no caben en el espacio de bloques
    for idx in rng.sample(range(len(genes)), model.surplus):
        genes[idx] = genes[idx].unassign()
    return Chromosome(genes=genes)


def build_initial_population(
    model: ConstraintModel,
    pop_size: int,
    rng: random.Random,
) -> List[Chromosome]:
    return [build_random_chromosome(model, rng) for _ in range(pop_size)]
