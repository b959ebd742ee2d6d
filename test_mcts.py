#!/usr/bin/env python
"""
Tests for the Monte Carlo Tree Search engine.

Most tree-level checks use a one-pile take-away game (take 1-3 stones,
whoever cannot move loses) because its optimal play is known exactly.
Board-level checks use small NoGo boards.
"""
import json
import math
import os
import random
import tempfile
import unittest
from typing import Optional, Tuple

from nogo_ai.core.actions import Move
from nogo_ai.core.board import Board
from nogo_ai.core.constants import Player
from nogo_ai.core.rules import NoGoRules, RulesOracle
from nogo_ai.mcts.agent import MCTSAgent, MCTSAgentFactory, RandomAgent, create_agent
from nogo_ai.mcts.config import MCTSConfig
from nogo_ai.mcts.node import MCTSNode
from nogo_ai.mcts.search import (
    select_path, expand_node, simulate_game, backpropagate, run_search,
    best_move, decide, mcts_search, count_nodes, get_principal_variation,
    get_action_statistics
)


TakeAwayState = Tuple[int, Player]


class TakeAwayRules(RulesOracle):
    """Move ``i`` takes ``i + 1`` stones from the pile."""

    def apply(self, position: TakeAwayState, move: int) -> Optional[TakeAwayState]:
        remaining, to_move = position
        take = move + 1
        if not 0 <= move < 3 or take > remaining:
            return None
        return remaining - take, to_move.opponent

    def num_moves(self, position: TakeAwayState) -> int:
        return 3

    def current_player(self, position: TakeAwayState) -> Player:
        return position[1]


def walk(node: MCTSNode):
    yield node
    for child in node.children:
        yield from walk(child)


class TestMCTSNode(unittest.TestCase):
    """Test case for node statistics, UCB1 and expansion."""

    def setUp(self):
        self.rules = TakeAwayRules()
        self.rng = random.Random(0)

    def test_root_initialization(self):
        root = MCTSNode((5, Player.BLACK), self.rules)
        self.assertIsNone(root.parent)
        self.assertIsNone(root.move)
        self.assertEqual(root.visits, 0)
        self.assertEqual(root.wins, 0)
        self.assertEqual(root.player_to_move, Player.BLACK)
        self.assertEqual(root.player_just_moved, Player.WHITE)
        self.assertEqual(root.legal_move_count, 3)
        self.assertFalse(root.is_terminal())
        self.assertFalse(root.is_fully_expanded())

    def test_unvisited_child_preferred(self):
        for unvisited_first in (False, True):
            root = MCTSNode((2, Player.BLACK), self.rules)
            if unvisited_first:
                fresh = root.add_child(1, (0, Player.WHITE))
                visited = root.add_child(0, (1, Player.WHITE))
            else:
                visited = root.add_child(0, (1, Player.WHITE))
                fresh = root.add_child(1, (0, Player.WHITE))
            visited.visits, visited.wins = 10, 5
            root.visits = 10

            self.assertTrue(root.is_selectable())
            self.assertEqual(root.ucb_score(fresh), float('inf'))
            for _ in range(5):
                self.assertEqual(select_path(root), [root, fresh])

    def test_ucb_score(self):
        root = MCTSNode((5, Player.BLACK), self.rules)
        child = root.add_child(0, (4, Player.WHITE))
        root.visits = 10
        child.visits, child.wins = 4, 3
        expected = 0.75 + math.sqrt(2) * math.sqrt(math.log(10) / 4)
        self.assertAlmostEqual(root.ucb_score(child), expected)

    def test_ties_go_to_first_child(self):
        root = MCTSNode((5, Player.BLACK), self.rules)
        children = [root.add_child(m, self.rules.apply((5, Player.BLACK), m)) for m in (2, 0, 1)]
        root.visits = 15
        for child in children:
            child.visits, child.wins = 5, 2
        self.assertIs(root.select_child(), children[0])
        self.assertIs(root.best_child(), children[0])
        self.assertEqual(best_move(root), 2)

    def test_select_child_without_children(self):
        root = MCTSNode((5, Player.BLACK), self.rules)
        with self.assertRaises(ValueError):
            root.select_child()

    def test_duplicate_child_rejected(self):
        root = MCTSNode((5, Player.BLACK), self.rules)
        root.add_child(0, (4, Player.WHITE))
        with self.assertRaises(ValueError):
            root.add_child(0, (4, Player.WHITE))

    def test_expand_until_fully_expanded(self):
        root = MCTSNode((5, Player.BLACK), self.rules)
        for _ in range(3):
            child = expand_node(root, self.rng)
            self.assertIsNot(child, root)
            self.assertIs(child.parent, root)
            self.assertEqual((child.visits, child.wins), (0, 0))
        self.assertEqual(sorted(c.move for c in root.children), [0, 1, 2])
        self.assertTrue(all(root.has_child(move) for move in (0, 1, 2)))
        self.assertFalse(root.has_child(3))
        self.assertTrue(root.is_fully_expanded())

        # No unexpanded move left
        self.assertIs(expand_node(root, self.rng), root)
        self.assertEqual(len(root.children), 3)

    def test_expand_skips_illegal_moves(self):
        root = MCTSNode((1, Player.BLACK), self.rules)
        child = expand_node(root, self.rng)
        self.assertEqual(child.move, 0)
        self.assertEqual(child.state, (0, Player.WHITE))
        self.assertIs(expand_node(root, self.rng), root)

    def test_expand_terminal_returns_self(self):
        root = MCTSNode((0, Player.BLACK), self.rules)
        self.assertTrue(root.is_terminal())
        self.assertFalse(root.is_selectable())
        self.assertIs(expand_node(root, self.rng), root)
        self.assertEqual(root.children, [])

    def test_simulate_winner(self):
        # Black must take the last stone; white is then stuck
        winner, steps = simulate_game(MCTSNode((1, Player.BLACK), self.rules), self.rng)
        self.assertEqual((winner, steps), (Player.BLACK, 1))

        winner, steps = simulate_game(MCTSNode((0, Player.BLACK), self.rules), self.rng)
        self.assertEqual((winner, steps), (Player.WHITE, 0))

    def test_backpropagate_credits_player_who_moved(self):
        root = MCTSNode((1, Player.BLACK), self.rules)
        child = root.add_child(0, (0, Player.WHITE))
        self.assertEqual(child.player_just_moved, Player.BLACK)

        backpropagate([root, child], Player.BLACK)
        self.assertEqual((root.visits, root.wins), (1, 0))
        self.assertEqual((child.visits, child.wins), (1, 1))

        backpropagate([root, child], Player.WHITE)
        self.assertEqual((root.visits, root.wins), (2, 1))
        self.assertEqual((child.visits, child.wins), (2, 1))

    def test_str(self):
        root = MCTSNode((5, Player.BLACK), self.rules)
        self.assertIn("visits=0", str(root))


class TestSearch(unittest.TestCase):
    """Test case for the full search loop and move decision."""

    def setUp(self):
        self.rules = NoGoRules()

    def test_statistics_invariants(self):
        root = MCTSNode(Board(size=3), self.rules)
        stats = run_search(root, 100, random.Random(1))

        self.assertEqual(stats["iterations"], 100)
        self.assertEqual(root.visits, 100)
        self.assertEqual(sum(c.visits for c in root.children), 100)
        self.assertEqual(stats["node_count"], count_nodes(root))

        for node in walk(root):
            self.assertGreaterEqual(node.wins, 0)
            self.assertLessEqual(node.wins, node.visits)
            moves = [c.move for c in node.children]
            self.assertEqual(len(moves), len(set(moves)))
            self.assertLessEqual(len(moves), node.legal_move_count)
            for child in node.children:
                self.assertIs(child.parent, node)
                self.assertTrue(node.state.is_legal(child.move))
                self.assertLessEqual(child.visits, node.visits)

    def test_single_iteration_on_empty_board(self):
        root = MCTSNode(Board(size=3), self.rules)
        run_search(root, 1, random.Random(2))
        self.assertEqual(len(root.children), 1)
        self.assertEqual(root.visits, 1)
        self.assertEqual(best_move(root), root.children[0].move)

        move = decide(Board(size=3), self.rules, 1, random.Random(2))
        self.assertEqual(move, root.children[0].move)

    def test_tiny_board(self):
        board = Board(size=2)
        move, stats = mcts_search(board, self.rules, MCTSConfig(iterations=50, seed=3))
        self.assertIn(move, board.legal_moves())
        self.assertEqual(stats["iterations"], 50)
        self.assertEqual(sum(stats["action_visits"].values()), 50)

        root = MCTSNode(board, self.rules)
        run_search(root, 50, random.Random(3))
        self.assertEqual(root.visits, 50)

    def test_same_seed_same_result(self):
        board = Board.from_string("X..../..O../...../.X.../.....")
        config = MCTSConfig(iterations=150)
        first = mcts_search(board, self.rules, config, random.Random(42))
        second = mcts_search(board, self.rules, config, random.Random(42))
        self.assertEqual(first[0], second[0])
        self.assertEqual(first[1]["action_visits"], second[1]["action_visits"])

    def test_moves_are_legal(self):
        positions = [
            Board(size=4),
            Board.from_string("OX./.../..."),
            Board.from_string(".O./O../...", to_move=Player.BLACK),
        ]
        for seed, board in enumerate(positions):
            move = decide(board, self.rules, 40, random.Random(seed))
            self.assertIsNotNone(move)
            self.assertIsNotNone(self.rules.apply(board, move))

    def test_terminal_position_returns_no_move(self):
        board = Board.from_string("XX/.O", to_move=Player.WHITE)
        before = board.clone()
        self.assertIsNone(decide(board, self.rules, 100, random.Random(0)))
        move, stats = mcts_search(board, self.rules, MCTSConfig(iterations=100))
        self.assertIsNone(move)
        self.assertEqual(stats["iterations"], 0)
        self.assertTrue(stats["terminal"])
        self.assertEqual(board, before)
        self.assertEqual(board.move_count, before.move_count)
        self.assertEqual(board.last_move, before.last_move)

    def test_terminal_root_is_visited_each_iteration(self):
        root = MCTSNode(Board(size=1), self.rules)
        run_search(root, 5, random.Random(0))
        self.assertEqual(root.children, [])
        self.assertEqual(root.visits, 5)
        self.assertEqual(root.wins, 5)

    def test_zero_iterations_returns_no_move(self):
        self.assertIsNone(decide(Board(size=3), self.rules, 0, random.Random(0)))

    def test_single_legal_move(self):
        rules = TakeAwayRules()
        for iterations in (1, 5, 50):
            self.assertEqual(decide((1, Player.BLACK), rules, iterations, random.Random(iterations)), 0)

    def test_finds_immediate_win(self):
        # Taking all three stones wins at once
        move = decide((3, Player.BLACK), TakeAwayRules(), 300, random.Random(5))
        self.assertEqual(move, 2)

    def test_finds_winning_reply_for_second_player(self):
        # White should leave a multiple of four
        move = decide((6, Player.WHITE), TakeAwayRules(), 2000, random.Random(6))
        self.assertEqual(move, 1)

    def test_finds_deeper_win(self):
        move = decide((5, Player.BLACK), TakeAwayRules(), 2000, random.Random(7))
        self.assertEqual(move, 0)

    def test_analysis_helpers(self):
        root = MCTSNode((5, Player.BLACK), TakeAwayRules())
        run_search(root, 200, random.Random(8))
        variation = get_principal_variation(root)
        self.assertGreater(len(variation), 0)
        self.assertEqual(variation[0][0], best_move(root))
        action_stats = get_action_statistics(root)
        self.assertEqual(set(action_stats), {0, 1, 2})
        self.assertEqual(sum(s["visits"] for s in action_stats.values()), 200)


class TestMCTSConfig(unittest.TestCase):
    """Test case for configuration validation."""

    def test_defaults(self):
        config = MCTSConfig()
        self.assertEqual(config.iterations, 200)
        self.assertAlmostEqual(config.exploration_weight, math.sqrt(2))
        self.assertIsNone(config.seed)

    def test_validation(self):
        with self.assertRaises(ValueError):
            MCTSConfig(iterations=-1)
        with self.assertRaises(ValueError):
            MCTSConfig(exploration_weight=0)
        with self.assertRaises(ValueError):
            MCTSConfig(seed=-5)
        self.assertEqual(MCTSConfig(iterations=0).iterations, 0)

    def test_presets_and_dicts(self):
        self.assertLess(MCTSConfig.fast().iterations, MCTSConfig.default().iterations)
        self.assertGreater(MCTSConfig.deep().iterations, MCTSConfig.default().iterations)

        config = MCTSConfig.from_dict({"iterations": 10, "seed": 4, "unknown": True})
        self.assertEqual(config.to_dict(), {
            "iterations": 10,
            "exploration_weight": math.sqrt(2),
            "seed": 4,
        })
        self.assertIn("iterations=10", str(config))


class TestAgents(unittest.TestCase):
    """Test case for the MCTS and random agents."""

    def test_invalid_name_and_role(self):
        with self.assertRaises(ValueError):
            MCTSAgent(Player.BLACK, name="bad name")
        with self.assertRaises(ValueError):
            MCTSAgent(Player.BLACK, name="")
        with self.assertRaises(ValueError):
            MCTSAgent("green")
        with self.assertRaises(ValueError):
            RandomAgent(Player.WHITE, name="x(1)")
        self.assertEqual(MCTSAgent("White").role, Player.WHITE)

    def test_wrong_turn(self):
        agent = MCTSAgent(Player.WHITE, config=MCTSConfig(iterations=10, seed=0))
        with self.assertRaises(ValueError):
            agent.select_action(Board(size=3))

    def test_select_action(self):
        agent = MCTSAgent(Player.BLACK, config=MCTSConfig(iterations=60, seed=11))
        board = Board(size=3)
        move = agent.select_action(board)
        self.assertIsInstance(move, Move)
        self.assertEqual(move.player, Player.BLACK)
        self.assertTrue(board.is_legal(move.index))
        self.assertEqual(agent.last_root.visits, 60)
        self.assertEqual(agent.get_last_statistics()["iterations"], 60)
        self.assertGreater(len(agent.get_principal_variation()), 0)
        self.assertEqual(set(agent.get_action_statistics()),
                         {c.move for c in agent.last_root.children})

    def test_seeded_agents_agree(self):
        board = Board(size=4)
        first = MCTSAgent(Player.BLACK, config=MCTSConfig(iterations=80, seed=9))
        second = MCTSAgent(Player.BLACK, config=MCTSConfig(iterations=80, seed=9))
        self.assertEqual(first.select_action(board), second.select_action(board))
        self.assertEqual(first.select_action(board), second.select_action(board))

    def test_forced_move(self):
        agent = MCTSAgent(Player.BLACK, config=MCTSConfig(iterations=50, seed=0),
                          rules=TakeAwayRules())
        move = agent.select_action((1, Player.BLACK))
        self.assertEqual(move, Move(0, Player.BLACK))
        self.assertTrue(agent.last_stats["forced_move"])

    def test_no_move_available(self):
        board = Board.from_string("XX/.O", to_move=Player.WHITE)
        self.assertIsNone(MCTSAgent(Player.WHITE).select_action(board))
        self.assertIsNone(RandomAgent(Player.WHITE, seed=0).select_action(board))

        agent = MCTSAgent(Player.BLACK, config=MCTSConfig(iterations=0))
        self.assertIsNone(agent.select_action(Board(size=3)))

    def test_random_agent(self):
        board = Board.from_string("OX./.../...")
        agent = RandomAgent(Player.BLACK, seed=1)
        for _ in range(10):
            move = agent.select_action(board)
            self.assertTrue(board.is_legal(move.index))

    def test_factory(self):
        self.assertEqual(MCTSAgentFactory.create_fast(Player.BLACK, seed=1).config.seed, 1)
        self.assertEqual(MCTSAgentFactory.create_strong(Player.WHITE).config.iterations,
                         MCTSConfig.deep().iterations)
        self.assertIsInstance(create_agent("random", Player.BLACK), RandomAgent)
        self.assertIsInstance(create_agent("mcts", Player.BLACK, iterations=5), MCTSAgent)
        with self.assertRaises(ValueError):
            create_agent("minimax", Player.BLACK)

    def test_save_statistics(self):
        agent = MCTSAgent(Player.BLACK, config=MCTSConfig(iterations=20, seed=2))
        agent.select_action(Board(size=3))
        with tempfile.TemporaryDirectory() as tmp:
            path = os.path.join(tmp, "stats.json")
            agent.save_statistics(path)
            with open(path) as f:
                data = json.load(f)
        self.assertEqual(data["role"], "black")
        self.assertEqual(data["total_actions"], 1)
        self.assertEqual(data["config"]["iterations"], 20)

        agent.reset_statistics()
        self.assertEqual(agent.action_history, [])
        self.assertEqual(agent.get_principal_variation(), [])


if __name__ == "__main__":
    unittest.main()
