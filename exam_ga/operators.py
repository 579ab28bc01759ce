import random
from typing import List, Sequence, Tuple

from .config import GAConfig
from .domains import ConstraintModel
from .evaluation import conflicting_gene_indices
from .initial_population import random_placement
from .model import Chromosome


def tournament_select(
    population: Sequence[Chromosome],
    scores: Sequence[float],
    k: int,
    rng: random.Random,
) -> Chromosome:
    contenders = [rng.randrange(len(population)) for _ in range(max(1, k))]
    winner = max(contenders, key=lambda i: scores[i])
    return population[winner]


def sigma_scale(scores: Sequence[float], sigma_factor: float) -> List[float]:
    """
    Escalamiento sigma para evitar super-individuos. Se desplaza al mínimo
    para que los pesos de la ruleta nunca sean negativos.
    """
    n = len(scores)
    mean = sum(scores) / n
    sigma = (sum((s - mean) ** 2 for s in scores) / n) ** 0.5
    if sigma == 0:
        return [1.0] * n
    scaled = [1.0 + (s - mean) / (sigma_factor * sigma) for s in scores]
    low = min(scaled)
    return [s - low for s in scaled]


def roulette_select(
    population: Sequence[Chromosome],
    weights: Sequence[float],
    rng: random.Random,
) -> Chromosome:
    total = sum(weights)
    if total <= 0:
        return rng.choice(population)

    pick = rng.uniform(0, total)
    current = 0.0
    for ch, w in zip(population, weights):
        current += w
        if current > pick:
            return ch
    return population[-1]


def one_point_crossover(
    p1: Chromosome, p2: Chromosome, rng: random.Random
) -> Tuple[Chromosome, Chromosome]:
    """Corte en un punto: cada hijo hereda una mitad de cada padre."""
    n = len(p1.genes)
    if n < 2:
        return p1.copy(), p2.copy()
    cut = rng.randint(1, n - 1)
    c1 = Chromosome(genes=p1.genes[:cut] + p2.genes[cut:])
    c2 = Chromosome(genes=p2.genes[:cut] + p1.genes[cut:])
    return c1, c2


def mutate(chromosome: Chromosome, model: ConstraintModel, rate: float, rng: random.Random) -> None:
    """Reasigna (fecha, bloque, aula) al azar con probabilidad `rate` por gen."""
    for idx, g in enumerate(chromosome.genes):
        if g.assigned and rng.random() < rate:
            chromosome.genes[idx] = g.place(*random_placement(model, rng))


def swap_mutation(chromosome: Chromosome, rng: random.Random) -> None:
    """Intercambia la ubicación (o la falta de ella) entre dos genes."""
    n = len(chromosome.genes)
    if n < 2:
        return
    i, j = rng.sample(range(n), 2)
    gi, gj = chromosome.genes[i], chromosome.genes[j]
    chromosome.genes[i] = gi.place(gj.date_idx, gj.timeslot_idx, gj.room_idx)
    chromosome.genes[j] = gj.place(gi.date_idx, gi.timeslot_idx, gi.room_idx)


def repair_chromosome(chromosome: Chromosome, model: ConstraintModel, rng: random.Random) -> Chromosome:
    """
    Tras el cruce la cantidad de genes sin asignar puede variar; se restablece
    a `model.surplus`. Se liberan primero los genes en conflicto.
    """
    unassigned = [i for i, g in enumerate(chromosome.genes) if not g.assigned]
    missing = model.surplus - len(unassigned)

    if missing > 0:
        assigned = [i for i, g in enumerate(chromosome.genes) if g.assigned]
        conflicts = conflicting_gene_indices(chromosome)
        clashing = sorted(conflicts)
        rng.shuffle(clashing)
        rest = [i for i in assigned if i not in conflicts]
        rng.shuffle(rest)
        for idx in (clashing + rest)[:missing]:
            chromosome.genes[idx] = chromosome.genes[idx].unassign()
    elif missing < 0:
        for idx in rng.sample(unassigned, -missing):
            chromosome.genes[idx] = chromosome.genes[idx].place(*random_placement(model, rng))
    return chromosome


def breed(
    p1: Chromosome,
    p2: Chromosome,
    model: ConstraintModel,
    cfg: GAConfig,
    rng: random.Random,
) -> Tuple[Chromosome, Chromosome]:
    if rng.random() < cfg.crossover_rate:
        children = one_point_crossover(p1, p2, rng)
    else:
        children = (p1.copy(), p2.copy())
    for child in children:
        repair_chromosome(child, model, rng)
        mutate(child, model, cfg.mutation_rate, rng)
        if rng.random() < cfg.swap_rate:
            swap_mutation(child, rng)
    return children
