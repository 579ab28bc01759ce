import random
import unittest

from exam_ga.config import GAConfig
from exam_ga.engine import generate_schedule, solve
from exam_ga.errors import EmptyInput, InvalidRange
from exam_ga.timeframe import derive_timeslots, parse_date


def small_config(**overrides):
    params = dict(population_size=40, max_generations=150, stall_limit=40, seed=1)
    params.update(overrides)
    return GAConfig(**params)


class ScenarioTests(unittest.TestCase):
    def test_one_slot_per_day_separates_exams(self):
        request = {
            "courses": ["Math", "Physics"],
            "sections": ["A"],
            "rooms": ["R1"],
            "dates": ["2025-09-15", "2025-09-16"],
            "timeslots": ["08:00-09:30"],
        }
        response = generate_schedule(request, small_config())
        exams = response["sections"]["A"]
        self.assertEqual(response["unassigned_courses"], 0)
        self.assertEqual(response["violations"], 0)
        self.assertEqual(len(exams), 2)
        self.assertEqual(sorted(e["date"] for e in exams), ["2025-09-15", "2025-09-16"])
        self.assertGreater(response["fitness_score"], 0)

    def test_single_slot_for_two_sections_reports_shortfall(self):
        request = {
            "courses": ["Math"],
            "sections": ["A", "B"],
            "rooms": ["R1"],
            "dates": ["2025-09-15"],
            "timeslots": ["08:00-09:30"],
        }
        response = generate_schedule(request, small_config())
        self.assertEqual(response["unassigned_courses"], 1)
        self.assertEqual(response["violations"], 0)
        placed = sum(len(v) for v in response["sections"].values())
        self.assertEqual(placed, 1)

    def test_ranges_are_derived(self):
        request = {
            "courses": ["Math", "Physics", "Chem", "Bio"],
            "sections": ["A", "B"],
            "rooms": ["R1", "R2"],
            "start_date": "2025-09-13",
            "end_date": "2025-09-20",
            "start_time": "08:00",
            "end_time": "12:30",
        }
        model, result = solve(request, small_config())
        self.assertNotIn(6, [d.weekday() for d in model.dates])
        self.assertEqual([t.label for t in model.timeslots],
                         [t.label for t in derive_timeslots("08:00", "12:30")])
        self.assertEqual(result.violations, 0)
        self.assertEqual(result.unassigned, 0)

        response = generate_schedule(request, small_config())
        for exams in response["sections"].values():
            keys = [(e["date"], e["timeslot"]) for e in exams]
            self.assertEqual(keys, sorted(keys))
            self.assertEqual(len(set(keys)), len(keys))
            for e in exams:
                self.assertNotEqual(parse_date(e["date"]).weekday(), 6)

    def test_seeded_requests_are_identical(self):
        request = {
            "courses": ["Math", "Physics", "Chem"],
            "sections": ["A", "B"],
            "rooms": ["R1"],
            "dates": ["2025-09-15", "2025-09-16"],
            "timeslots": ["08:00 AM - 09:30 AM", "10:00 AM - 11:30 AM"],
        }
        cfg = small_config(seed=None)
        r1 = generate_schedule(request, cfg, random.Random(9))
        r2 = generate_schedule(request, cfg, random.Random(9))
        self.assertEqual(r1, r2)

    def test_time_limit_stops_at_generation_boundary(self):
        request = {
            "courses": ["Math", "Physics"],
            "sections": ["A"],
            "rooms": ["R1"],
            "dates": ["2025-09-15", "2025-09-16"],
            "timeslots": ["08:00-09:30"],
        }
        _, result = solve(request, small_config(time_limit=1e-9))
        self.assertEqual(result.stop_reason, "time_limit")
        self.assertEqual(result.generations_run, 1)


class RequestErrorTests(unittest.TestCase):
    def test_excluded_single_day_is_rejected(self):
        request = {
            "courses": ["Math"],
            "sections": ["A"],
            "rooms": ["R1"],
            "start_date": "2025-09-14",
            "end_date": "2025-09-14",
        }
        with self.assertRaises(InvalidRange):
            generate_schedule(request, small_config())

    def test_empty_courses_are_rejected(self):
        request = {"courses": [], "sections": ["A"], "rooms": ["R1"],
                   "dates": ["2025-09-15"], "timeslots": ["08:00-09:30"]}
        with self.assertRaises(EmptyInput):
            generate_schedule(request, small_config())

    def test_time_range_without_slot_is_rejected(self):
        request = {"courses": ["Math"], "sections": ["A"], "rooms": ["R1"],
                   "start_date": "2025-09-15", "end_date": "2025-09-16",
                   "start_time": "08:00", "end_time": "09:00"}
        with self.assertRaises(InvalidRange):
            generate_schedule(request, small_config())


if __name__ == "__main__":
    unittest.main()
