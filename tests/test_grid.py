#!/usr/bin/env python3
"""
Unit tests for grid lookups and the editing operations the viewer uses.
"""

import random
import unittest

from pathviz.core.types import BLOCK, EMPTY, Grid, InvalidCoordinate, Role


class TestGridLookups(unittest.TestCase):

    def setUp(self):
        self.grid = Grid.from_rows([
            "S..",
            ".#.",
            "..E",
        ])

    def test_from_rows(self):
        self.assertEqual((self.grid.rows, self.grid.cols), (3, 3))
        self.assertEqual(self.grid.start, (0, 0))
        self.assertEqual(self.grid.end, (2, 2))
        self.assertEqual(self.grid.cells[1][1], BLOCK)
        self.assertEqual(self.grid.cells[0][1], EMPTY)

    def test_roles_and_passability(self):
        self.assertIs(self.grid.role((0, 0)), Role.START)
        self.assertIs(self.grid.role((2, 2)), Role.END)
        self.assertIs(self.grid.role((0, 1)), Role.NONE)
        self.assertFalse(self.grid.is_passable((1, 1)))
        self.assertTrue(self.grid.is_passable((0, 0)))

    def test_index_round_trip(self):
        self.assertEqual(self.grid.index((2, 1)), 7)
        self.assertEqual(self.grid.cell_at(7), (2, 1))

    def test_out_of_bounds_raises(self):
        for bad in [(3, 0), (0, 3), (-1, 0), (0, -1)]:
            with self.subTest(cell=bad):
                with self.assertRaises(InvalidCoordinate):
                    self.grid.is_block(bad)
        with self.assertRaises(IndexError):
            self.grid.index((5, 5))

    def test_neighbors_are_clipped(self):
        self.assertEqual(self.grid.neighbors4((0, 0)), [(1, 0), (0, 1)])
        self.assertEqual(self.grid.neighbors4((1, 1)), [(0, 1), (2, 1), (1, 0), (1, 2)])
        self.assertEqual(Grid(1, 1).neighbors4((0, 0)), [])

    def test_bad_dimensions(self):
        with self.assertRaises(ValueError):
            Grid(0, 4)

    def test_from_rows_rejects_ragged_or_empty_rows(self):
        for lines in ([], [""], ["S..", "..E."], ["S...", "..E"]):
            with self.subTest(lines=lines):
                with self.assertRaises(ValueError):
                    Grid.from_rows(lines)


class TestGridEditing(unittest.TestCase):

    def setUp(self):
        self.grid = Grid(4, 5)
        self.grid.set_start((0, 0))
        self.grid.set_end((3, 4))

    def test_add_and_remove_obstacle(self):
        self.assertTrue(self.grid.add_obstacle((1, 1)))
        self.assertFalse(self.grid.add_obstacle((1, 1)))
        self.assertTrue(self.grid.is_block((1, 1)))
        self.assertTrue(self.grid.remove_obstacle((1, 1)))
        self.assertFalse(self.grid.remove_obstacle((1, 1)))

    def test_endpoints_cannot_become_obstacles(self):
        self.assertFalse(self.grid.add_obstacle((0, 0)))
        self.assertFalse(self.grid.add_obstacle((3, 4)))
        self.assertTrue(self.grid.is_passable((0, 0)))

    def test_set_start_moves_the_start(self):
        self.grid.set_start((2, 2))
        self.assertEqual(self.grid.start, (2, 2))
        self.assertIs(self.grid.role((0, 0)), Role.NONE)

    def test_set_endpoint_rejects_obstacle_and_other_endpoint(self):
        self.grid.add_obstacle((1, 2))
        with self.assertRaises(ValueError):
            self.grid.set_start((1, 2))
        with self.assertRaises(ValueError):
            self.grid.set_end((0, 0))
        with self.assertRaises(InvalidCoordinate):
            self.grid.set_end((9, 9))
        self.assertEqual(self.grid.start, (0, 0))
        self.assertEqual(self.grid.end, (3, 4))

    def test_random_endpoints_land_on_empty_cells(self):
        rng = random.Random(3)
        self.grid.randomize_obstacles(0.5, rng)
        for _ in range(20):
            start = self.grid.set_start(rng=rng)
            end = self.grid.set_end(rng=rng)
            self.assertNotEqual(start, end)
            self.assertTrue(self.grid.is_passable(start))
            self.assertTrue(self.grid.is_passable(end))

    def test_random_empty_cell_on_full_grid(self):
        self.grid.randomize_obstacles(1.0)
        with self.assertRaises(ValueError):
            self.grid.random_empty_cell()

    def test_randomize_obstacles_spares_endpoints(self):
        added = self.grid.randomize_obstacles(1.0)
        self.assertEqual(added, 4 * 5 - 2)
        self.assertTrue(self.grid.is_passable((0, 0)))
        self.assertTrue(self.grid.is_passable((3, 4)))
        self.assertEqual(Grid(3, 3).randomize_obstacles(0.0), 0)

    def test_randomize_is_seeded(self):
        a, b = Grid(6, 6), Grid(6, 6)
        a.randomize_obstacles(0.3, random.Random(11))
        b.randomize_obstacles(0.3, random.Random(11))
        self.assertEqual(a.cells, b.cells)

    def test_reset(self):
        self.grid.randomize_obstacles(1.0)
        self.grid.reset()
        self.assertIsNone(self.grid.start)
        self.assertIsNone(self.grid.end)
        self.assertTrue(all(v == EMPTY for row in self.grid.cells for v in row))
        self.assertEqual(len(self.grid.cells), 4)


if __name__ == "__main__":
    unittest.main()
