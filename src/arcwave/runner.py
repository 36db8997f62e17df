"""
ARC-AGI Deterministic Runner

End-to-end pipeline for one task:

  1. Parse and validate the task (train pairs, test inputs)
  2. Canonicalize colors: rank symbols of the first training input by
     frequency and recolor every training pair into that ordering
  3. Induce the rule set (union over trainings)
  4. For each test input: recolor into the training ordering, deduce
     (seed → propagate → search → extract), restore the test's own colors
  5. Seal receipts and return

Every stage logs deterministic receipts; double-run must be byte-identical.
"""

import sys
from typing import Dict, List, Optional, Tuple

from .core import Receipts, assert_double_run_equal, blake3_hash, serialize_grid_be_row_major
from .engine import deduce, format_rules, induce_rules, rules_hash
from .kernel import NUM_SYMBOLS, color_ordering, recolor_pair
from .task import Pair, TaskError, parse_task


def solve(
    task_json: dict,
    max_iterations: Optional[int] = None,
    canonicalize: bool = True,
    debug: bool = False
) -> Tuple[List[List[List[Optional[int]]]], Dict]:
    """
    Predict the output of every test input of a task.

    Args:
        task_json: ARC task dict with keys:
            - "train": list of {"input": grid, "output": grid}
            - "test": list of {"input": grid}
        max_iterations: Search budget per test input (default from param_registry).
        canonicalize: If True, remap colors by frequency rank before induction.
        debug: Print deduction counts to stderr.

    Returns:
        Tuple of (predictions, receipts_bundle):
          - predictions: one grid per test input; None marks unresolved cells
          - receipts_bundle: sealed receipts digest

    Raises:
        TaskError (ValueError): On malformed task documents.
    """
    train_pairs, test_pairs = parse_task(task_json)

    receipts = Receipts("arcwave-runner")
    receipts.put("task.train_pairs", len(train_pairs))
    receipts.put("task.test_inputs", len(test_pairs))

    # ========================================================================
    # Step 2: Color canonicalization
    # ========================================================================

    if canonicalize:
        ordering = color_ordering(train_pairs[0].input)
        train_pairs = [recolor_pair(pair, ordering) for pair in train_pairs]
    else:
        ordering = list(range(NUM_SYMBOLS))

    receipts.put("palette.canonicalize", canonicalize)
    receipts.put("palette.train_ordering", ordering)

    # ========================================================================
    # Step 3: Rule induction
    # ========================================================================

    rules = induce_rules(train_pairs)

    receipts.put("rules.count", len(rules))
    receipts.put("rules.by_direction", rules.counts())
    receipts.put("rules.hash", rules_hash(rules))

    if debug:
        print("Rules:", file=sys.stderr)
        for line in format_rules(rules):
            print(f"  {line}", file=sys.stderr)

    # ========================================================================
    # Step 4: Deduction per test input
    # ========================================================================

    predictions = []
    deduce_receipts = []

    for idx, test in enumerate(test_pairs):
        if canonicalize:
            test_ordering = color_ordering(test.input)
            working = recolor_pair(test, ordering)
        else:
            test_ordering = ordering
            working = test

        Y, stats = deduce(working.input, rules, max_iterations=max_iterations, debug=debug)

        if canonicalize:
            Y = recolor_pair(Pair(input=working.input, output=Y), test_ordering).output

        H, W = len(Y), len(Y[0]) if Y else 0
        prediction_hash = blake3_hash(serialize_grid_be_row_major(Y, H, W, NUM_SYMBOLS))

        predictions.append(Y)
        deduce_receipts.append({
            "idx": idx,
            "H": H,
            "W": W,
            "test_ordering": test_ordering,
            **stats,
            "prediction_hash": prediction_hash
        })

    receipts.put("deduce", deduce_receipts)

    return predictions, receipts.digest()


def solve_with_determinism_check(
    task_json: dict,
    max_iterations: Optional[int] = None,
    canonicalize: bool = True
) -> Tuple[List[List[List[Optional[int]]]], Dict]:
    """
    Run solve() twice and verify determinism via assert_double_run_equal.

    Predictions are covered through the per-test prediction_hash receipts.

    Returns:
        Tuple of (predictions, receipts_bundle) with determinism flags added.

    Raises:
        DeterminismError (RuntimeError): At the first receipt key that differs.
    """
    predictions = []

    def run() -> Dict:
        Y, digest = solve(task_json, max_iterations=max_iterations, canonicalize=canonicalize)
        predictions.append(Y)
        return digest

    digest = assert_double_run_equal(run)

    receipts_final = digest.copy()
    receipts_final["determinism.double_run_ok"] = True
    receipts_final["determinism.sections_checked"] = len(digest["payload"])

    return predictions[0], receipts_final


def main(argv: Optional[List[str]] = None) -> int:
    import argparse
    import json

    parser = argparse.ArgumentParser(
        description="ARC-AGI constraint-propagation runner",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Solve a task and print predictions + receipts
  python -m arcwave.runner task.json

  # Larger search budget, list the induced rules on stderr
  python -m arcwave.runner task.json --max-iterations 2000 --show-rules

  # Keep the task's own colors (no frequency canonicalization)
  python -m arcwave.runner task.json --no-canonicalize
        """
    )

    parser.add_argument(
        "task_file",
        type=str,
        help="Path to ARC task JSON file"
    )

    parser.add_argument(
        "--max-iterations",
        type=int,
        default=None,
        help="Search budget per test input. Default: registry max_iterations (500)."
    )

    parser.add_argument(
        "--no-canonicalize",
        action="store_true",
        help="Disable frequency-rank color canonicalization. Default: False."
    )

    parser.add_argument(
        "--determinism-check",
        action="store_true",
        help="Run double-solve determinism check. Default: False (single solve)."
    )

    parser.add_argument(
        "--show-rules",
        action="store_true",
        help="Print induced rules and deduction counts to stderr. Default: False."
    )

    parser.add_argument(
        "--output",
        type=str,
        default=None,
        help="Output file for results JSON. Default: print to stdout."
    )

    args = parser.parse_args(argv)

    if args.max_iterations is not None and args.max_iterations < 0:
        print("Error: --max-iterations must be >= 0", file=sys.stderr)
        return 1

    try:
        with open(args.task_file, 'r') as f:
            task_json = json.load(f)
    except FileNotFoundError:
        print(f"Error: Task file not found: {args.task_file}", file=sys.stderr)
        return 1
    except json.JSONDecodeError as e:
        print(f"Error: Invalid JSON in task file: {e}", file=sys.stderr)
        return 1

    try:
        if args.determinism_check:
            predictions, receipts = solve_with_determinism_check(
                task_json,
                max_iterations=args.max_iterations,
                canonicalize=not args.no_canonicalize
            )
        else:
            predictions, receipts = solve(
                task_json,
                max_iterations=args.max_iterations,
                canonicalize=not args.no_canonicalize,
                debug=args.show_rules
            )
    except TaskError as e:
        print(f"Error: Invalid task: {e}", file=sys.stderr)
        return 1
    except (ValueError, RuntimeError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    result = {
        "predictions": predictions,
        "receipts": receipts
    }

    if args.output:
        with open(args.output, 'w') as f:
            json.dump(result, f, indent=2)
        print(f"Results written to: {args.output}", file=sys.stderr)
    else:
        print(json.dumps(result, indent=2))

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
