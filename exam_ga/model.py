# exam_ga/model.py
from dataclasses import dataclass, replace
from typing import List, Optional

DateIdx = int
SlotIdx = int
RoomIdx = int


@dataclass(frozen=True)
class Gene:
    # Un "gen" = examen de un curso para una sección -> (fecha, bloque, aula)
    section: str
    course: str
    date_idx: Optional[DateIdx] = None
    timeslot_idx: Optional[SlotIdx] = None
    room_idx: Optional[RoomIdx] = None

    @property
    def assigned(self) -> bool:
        return self.date_idx is not None

    def place(self, date_idx: DateIdx, timeslot_idx: SlotIdx, room_idx: RoomIdx) -> "Gene":
        return replace(self, date_idx=date_idx, timeslot_idx=timeslot_idx, room_idx=room_idx)

    def unassign(self) -> "Gene":
        return replace(self, date_idx=None, timeslot_idx=None, room_idx=None)


@dataclass
class Chromosome:
    # El puntaje no vive aquí: se recalcula en cada generación
    genes: List[Gene]

    def copy(self) -> "Chromosome":
        # Los genes son inmutables; basta con una lista nueva
        return Chromosome(genes=list(self.genes))

    def unassigned_count(self) -> int:
        return sum(1 for g in self.genes if not g.assigned)

    def __len__(self) -> int:
        return len(self.genes)
