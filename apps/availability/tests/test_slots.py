# apps/availability/tests/test_slots.py
from datetime import time

from django.test import SimpleTestCase

from apps.availability.schedule import Window
from apps.availability.slots import fits_window, generate_slots, overlaps


def times(*pairs):
    return [time(h, m) for h, m in pairs]


class GenerateSlotsTestCase(SimpleTestCase):
    def setUp(self):
        self.window = Window(time(9, 0), time(18, 0), time(12, 0), time(13, 0))

    def test_steps_around_break(self):
        """30-min service on a 30-min grid skips the lunch break"""
        slots = generate_slots(self.window, 30, 30)

        expected = times(
            (9, 0), (9, 30), (10, 0), (10, 30), (11, 0), (11, 30),
            (13, 0), (13, 30), (14, 0), (14, 30), (15, 0), (15, 30),
            (16, 0), (16, 30), (17, 0), (17, 30),
        )
        self.assertEqual(slots, expected)

    def test_touching_break_boundary_is_allowed(self):
        slots = generate_slots(self.window, 30, 30)

        self.assertIn(time(11, 30), slots)
        self.assertIn(time(13, 0), slots)
        self.assertNotIn(time(12, 0), slots)
        self.assertNotIn(time(12, 30), slots)

    def test_long_service_never_straddles_break(self):
        slots = generate_slots(self.window, 90, 30)

        self.assertIn(time(10, 30), slots)
        self.assertNotIn(time(11, 0), slots)
        self.assertEqual(slots[-1], time(16, 30))

    def test_granularity_defaults_to_duration(self):
        slots = generate_slots(self.window, 60, None)

        self.assertEqual(slots, times((9, 0), (10, 0), (11, 0), (13, 0), (14, 0),
                                      (15, 0), (16, 0), (17, 0)))

    def test_fine_granularity(self):
        window = Window(time(9, 0), time(10, 0))

        self.assertEqual(generate_slots(window, 45, 15), times((9, 0), (9, 15)))

    def test_service_longer_than_window_yields_nothing(self):
        window = Window(time(9, 0), time(10, 0))

        self.assertEqual(generate_slots(window, 90, 30), [])

    def test_every_slot_fits_window(self):
        for duration in (15, 30, 45, 60, 75, 120):
            for slot in generate_slots(self.window, duration, 15):
                self.assertTrue(fits_window(self.window, slot, duration), (duration, slot))

    def test_non_positive_arguments_are_rejected(self):
        with self.assertRaises(ValueError):
            generate_slots(self.window, 0, 30)
        with self.assertRaises(ValueError):
            generate_slots(self.window, 30, -15)

    def test_restartable(self):
        self.assertEqual(generate_slots(self.window, 30, 30), generate_slots(self.window, 30, 30))


class FitsWindowTestCase(SimpleTestCase):
    def setUp(self):
        self.window = Window(time(9, 0), time(18, 0), time(12, 0), time(13, 0))

    def test_inside(self):
        self.assertTrue(fits_window(self.window, time(9, 0), 30))
        self.assertTrue(fits_window(self.window, time(17, 30), 30))

    def test_outside_working_window(self):
        self.assertFalse(fits_window(self.window, time(8, 45), 30))
        self.assertFalse(fits_window(self.window, time(17, 45), 30))

    def test_intersecting_break(self):
        self.assertFalse(fits_window(self.window, time(11, 45), 30))
        self.assertFalse(fits_window(self.window, time(12, 59), 5))

    def test_seconds_count(self):
        self.assertFalse(fits_window(self.window, time(11, 30, 30), 30))

    def test_window_without_break(self):
        window = Window(time(9, 0), time(18, 0))

        self.assertTrue(fits_window(window, time(12, 0), 60))


class OverlapsTestCase(SimpleTestCase):
    def test_half_open_intervals(self):
        self.assertTrue(overlaps(10, 20, 15, 25))
        self.assertTrue(overlaps(10, 20, 12, 18))
        self.assertFalse(overlaps(10, 20, 20, 30))
        self.assertFalse(overlaps(20, 30, 10, 20))
