"""
Test suite for the shape selection service

Run with: python -m pytest src/zenparticles/test_shape_service.py -v
"""

import threading
import unittest
from unittest.mock import MagicMock, patch

import numpy as np

from zenparticles import shape_service
from zenparticles.generation import GenerationFailure
from zenparticles.particles import MorphEngine, ShapeKind
from zenparticles.shape_service import ShapeOrchestrator, ShapeSelection, parse_color


class FakeClient:
    """Generation client whose answer is released by the test."""

    def __init__(self, points=None, error=None, gated=False):
        self.points = points
        self.error = error
        self.release = threading.Event()
        if not gated:
            self.release.set()
        self.prompts = []
        self.closed = False

    def generate_points(self, prompt):
        self.prompts.append(prompt)
        self.release.wait(5.0)
        if self.error is not None:
            raise self.error
        return self.points

    def close(self):
        self.closed = True


class TestParseColor(unittest.TestCase):

    def test_hex(self):
        self.assertEqual(parse_color("#00ffff"), (0, 255, 255))
        self.assertEqual(parse_color("FF8000"), (255, 128, 0))

    def test_tuple(self):
        self.assertEqual(parse_color([10, 20, 30]), (10, 20, 30))

    def test_invalid(self):
        for bad in ("#fff", "#gggggg", (1, 2), (0, 0, 256), (-1, 0, 0)):
            with self.subTest(color=bad):
                with self.assertRaises(ValueError):
                    parse_color(bad)


class TestShapeSelection(unittest.TestCase):
    """Selection commands and target memoisation."""

    def setUp(self):
        self.engine = MorphEngine(50, rng=np.random.default_rng(0))
        self.service = ShapeOrchestrator(self.engine, rng=np.random.default_rng(1))

    def test_defaults(self):
        sel = self.service.selection
        self.assertIs(sel.kind, ShapeKind.HEART)
        self.assertEqual(sel.particle_count, 50)
        self.assertEqual(sel.color, (0, 255, 255))
        self.assertIsNone(sel.custom_points)
        self.assertFalse(self.service.is_generating)

    def test_selection_count_resizes_engine(self):
        engine = MorphEngine(10)
        ShapeOrchestrator(engine, selection=ShapeSelection(particle_count=30))
        self.assertEqual(engine.particle_count, 30)

    def test_sync_is_memoised(self):
        self.assertTrue(self.service.sync())
        target = self.engine.target
        self.assertFalse(self.service.sync())
        self.assertIs(self.engine.target, target)
        self.assertEqual(target.size, 150)

    def test_reselecting_same_kind_resamples(self):
        self.service.sync()
        first = self.engine.target
        self.service.select_shape(ShapeKind.HEART)
        self.assertTrue(self.service.sync())
        self.assertFalse(np.array_equal(first, self.engine.target))

    def test_rapid_reselection_last_write_wins(self):
        self.service.sync()
        with patch.object(shape_service, "generate", wraps=shape_service.generate) as gen:
            self.service.select_shape(ShapeKind.SPHERE)
            self.service.select_shape(ShapeKind.HEART)
            self.service.select_shape(ShapeKind.SPHERE)
            self.service.sync()
        gen.assert_called_once()
        self.assertIs(gen.call_args[0][0], ShapeKind.SPHERE)
        radii = np.linalg.norm(self.engine.target.reshape(-1, 3), axis=1)
        np.testing.assert_allclose(radii, 2.0, atol=1e-5)

    def test_shape_change_does_not_reset_live_positions(self):
        self.service.sync()
        self.engine.positions[:] = 1.0
        self.service.select_shape(ShapeKind.BURST)
        self.service.sync()
        self.assertTrue(np.all(self.engine.positions == 1.0))

    def test_select_clears_custom_points(self):
        self.service.selection.kind = ShapeKind.CUSTOM
        self.service.selection.custom_points = np.ones(150, dtype=np.float32)
        self.service.select_shape(ShapeKind.ROSE)
        self.assertIsNone(self.service.selection.custom_points)

    def test_set_color(self):
        self.service.set_color("#ff00ff")
        self.assertEqual(self.service.selection.color, (255, 0, 255))
        self.service.set_color((1, 2, 3))
        self.assertEqual(self.service.selection.color, (1, 2, 3))

    def test_color_does_not_regenerate(self):
        self.service.sync()
        self.service.set_color("#123456")
        self.assertFalse(self.service.sync())

    def test_set_particle_count(self):
        self.service.sync()
        self.engine.positions[:] = 3.0
        self.service.set_particle_count(20)
        self.assertEqual(self.engine.positions.shape, (60,))
        self.assertTrue(np.all(self.engine.positions == 0.0))
        self.assertTrue(self.service.sync())
        self.assertEqual(self.engine.target.size, 60)

    def test_set_particle_count_zero(self):
        self.service.set_particle_count(0)
        self.service.sync()
        self.assertEqual(self.engine.target.size, 0)

    def test_negative_particle_count(self):
        with self.assertRaises(ValueError):
            self.service.set_particle_count(-1)


class TestGeneration(unittest.TestCase):
    """Background AI generation."""

    def setUp(self):
        self.engine = MorphEngine(2)
        self.failures = []

    def _service(self, client):
        service = ShapeOrchestrator(self.engine, client=client, on_failure=self.failures.append)
        service.sync()
        return service

    def _finish(self, service):
        service.wait_for_generation(5.0)
        return service.poll()

    def test_success_pads_points(self):
        service = self._service(FakeClient(points=[1.0, 2.0, 3.0, 4.0, 5.0]))
        self.assertTrue(service.generate_from_prompt("a tiny thing"))
        self.assertTrue(service.is_generating)

        self.assertTrue(self._finish(service))
        self.assertFalse(service.is_generating)
        self.assertIs(service.selection.kind, ShapeKind.CUSTOM)

        self.assertTrue(service.sync())
        np.testing.assert_array_equal(self.engine.target, [1, 2, 3, 4, 5, 0])
        self.assertEqual(self.failures, [])

    def test_failure_leaves_selection_untouched(self):
        service = self._service(FakeClient(error=GenerationFailure("bad response")))
        before = self.engine.target
        service.generate_from_prompt("a cube")

        self.assertFalse(self._finish(service))
        self.assertFalse(service.is_generating)
        self.assertIs(service.selection.kind, ShapeKind.HEART)
        self.assertIsNone(service.selection.custom_points)
        self.assertEqual(service.last_error, "bad response")
        self.assertEqual(self.failures, ["bad response"])
        self.assertFalse(service.sync())
        self.assertIs(self.engine.target, before)

    def test_unexpected_error_is_reported(self):
        service = self._service(FakeClient(error=RuntimeError("boom")))
        service.generate_from_prompt("a cube")
        self.assertFalse(self._finish(service))
        self.assertEqual(len(self.failures), 1)

    def test_empty_prompt(self):
        client = FakeClient(points=[0.0])
        service = self._service(client)
        self.assertFalse(service.generate_from_prompt("   "))
        self.assertEqual(client.prompts, [])
        self.assertEqual(self.failures, ["Prompt is empty"])

    def test_no_client(self):
        service = self._service(None)
        self.assertFalse(service.generate_from_prompt("a cube"))
        self.assertEqual(len(self.failures), 1)

    def test_second_request_rejected_while_pending(self):
        client = FakeClient(points=[9.0] * 6, gated=True)
        service = self._service(client)
        self.assertTrue(service.generate_from_prompt("first"))
        self.assertFalse(service.generate_from_prompt("second"))

        client.release.set()
        self.assertTrue(self._finish(service))
        self.assertEqual(client.prompts, ["first"])

    def test_previous_target_kept_while_pending(self):
        client = FakeClient(points=[9.0] * 6, gated=True)
        service = self._service(client)
        before = self.engine.target
        service.generate_from_prompt("slow")
        self.assertFalse(service.poll())
        self.assertFalse(service.sync())
        self.assertIs(self.engine.target, before)
        client.release.set()
        service.wait_for_generation(5.0)

    def test_result_dropped_after_close(self):
        client = FakeClient(points=[9.0] * 6, gated=True)
        service = self._service(client)
        service.generate_from_prompt("late")
        service.close()
        self.assertTrue(client.closed)

        client.release.set()
        self.assertFalse(self._finish(service))
        self.assertIs(service.selection.kind, ShapeKind.HEART)
        self.assertFalse(service.generate_from_prompt("after close"))

    def test_context_manager_closes_client(self):
        client = MagicMock()
        with ShapeOrchestrator(self.engine, client=client) as service:
            self.assertIsInstance(service, ShapeOrchestrator)
        client.close.assert_called_once()


if __name__ == '__main__':
    unittest.main(verbosity=2)
