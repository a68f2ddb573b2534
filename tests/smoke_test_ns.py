# tests/smoke_test_ns.py
"""
Quick Smoke Tests for Novelty Search
====================================

Fast validation that core components work.
Run with: python tests/smoke_test_ns.py

Exit codes:
  0 = All tests passed
  1 = Some tests failed
"""

import sys
import math
import traceback

# Add project root
sys.path.insert(0, '.')


def test_result(name, passed, error=None):
    """Print test result."""
    status = "✓ PASS" if passed else "✗ FAIL"
    print(f"  {status}: {name}")
    if error and not passed:
        print(f"       Error: {error}")
    return passed


def run_smoke_tests():
    """Run quick smoke tests on all novelty search components."""
    print("\n" + "="*60)
    print("NOVELTY SEARCH SMOKE TESTS")
    print("="*60 + "\n")

    all_passed = True

    # -------------------------------------------------------------------------
    # Test 1: Novelty engine
    # -------------------------------------------------------------------------
    print("[1] NoveltySearch engine")
    try:
        from novelty.novelty_archive import NoveltySearch
        ns = NoveltySearch(k_nearest=3, archive_threshold=5.0, min_dist_to_archive=2.0)

        all_passed &= test_result("Empty pool scores 0.0", ns.novelty_score([0.5, 0.5], []) == 0.0)

        score = ns.novelty_score([5.0, 5.0], [[0, 0], [10, 10], [3, 3], [7, 7], [1, 1]])
        all_passed &= test_result("k-nearest score in (0, 10)", 0 < score < 10)

        updated = ns.update_archive([[0, 0], [10, 10], [5, 5]], [3.0, 7.0, 6.0])
        all_passed &= test_result("Threshold + separation admission", len(updated.archive) == 2)
        all_passed &= test_result("Receiver unchanged", len(ns.archive) == 0)

    except Exception as e:
        all_passed &= test_result("NoveltySearch import/basic ops", False, str(e))

    # -------------------------------------------------------------------------
    # Test 2: Maze environment
    # -------------------------------------------------------------------------
    print("\n[2] Maze environment")
    try:
        from maze.model import Maze, medium_maze, hard_maze
        from maze.simulator import simulate, behavior_characterization

        for name, m in (("medium", medium_maze()), ("hard", hard_maze())):
            ok = (m.width, m.height, m.start_pos, m.goal_pos) == (20, 12, (1, 10), (18, 10))
            all_passed &= test_result(f"{name} maze layout", ok)

        tiny = Maze.from_string("*****\n*S G*\n*****")
        result = simulate(tiny, lambda s: [0.0, 1.0], max_timesteps=2)
        moved = math.dist(result.final_pos, tiny.start_pos)
        all_passed &= test_result("Robot moves forward", moved > 0.1)
        all_passed &= test_result("Trajectory has initial + 2 positions", len(result.trajectory) == 3)
        all_passed &= test_result("Behavior is final position",
                                  behavior_characterization(result) == list(result.final_pos))

    except Exception as e:
        all_passed &= test_result("Maze import/basic ops", False, str(e))

    # -------------------------------------------------------------------------
    # Test 3: Population evaluation
    # -------------------------------------------------------------------------
    print("\n[3] Population evaluation")
    try:
        from novelty.novelty_archive import NoveltySearch
        from novelty.evaluator import evaluate_population

        ns = NoveltySearch(k_nearest=1, exclude_self=True)
        scores, _ = evaluate_population(ns, [[0.0, 0.0], [3.0, 4.0]], lambda x: x)
        all_passed &= test_result("Scores aligned with population", scores == [5.0, 5.0])

    except Exception as e:
        all_passed &= test_result("evaluate_population", False, str(e))

    # -------------------------------------------------------------------------
    # Test 4: Short maze experiment
    # -------------------------------------------------------------------------
    print("\n[4] Maze experiment")
    try:
        from maze.model import medium_maze
        from novelty.ns_trainer import run_maze_experiment

        result = run_maze_experiment(medium_maze(timesteps=20), generations=2,
                                     population_size=8, verbose=False)
        all_passed &= test_result("History has one row per generation", len(result.history) == 2)
        all_passed &= test_result("Population size kept", len(result.final_population) == 8)

    except Exception as e:
        traceback.print_exc()
        all_passed &= test_result("run_maze_experiment", False, str(e))

    print("\n" + "="*60)
    print("ALL SMOKE TESTS PASSED" if all_passed else "SOME SMOKE TESTS FAILED")
    print("="*60 + "\n")
    return all_passed


if __name__ == "__main__":
    sys.exit(0 if run_smoke_tests() else 1)
