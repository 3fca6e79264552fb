"""
LOGO Optimizer Command-Line Interface

Runs any algorithm variant on a benchmark function until the error target
is met or the evaluation budget is spent.
"""

import sys
import argparse
import json
import time

import numpy as np

from . import __version__
from .algorithms import available_algorithms, create_optimizer
from .contract import Options, SplitRule
from .core.result import StopReason
from .errors import ConfigurationError
from .functions import available_functions, get_function


def cmd_run(args):
    """Run an optimizer on a benchmark function."""
    print("=" * 60)
    print("LOGO Optimizer")
    print("=" * 60)

    try:
        fn = get_function(args.function, args.dim)
        options = Options(
            objective=fn,
            dim=args.dim,
            max_observations=args.max_observations,
            num_children=args.children,
            seed=args.seed,
            split_rule=SplitRule(args.split_rule) if args.split_rule else None,
            w_schedule=tuple(args.widths),
            max_slope=args.max_slope,
            subtree_max_depth=args.subtree_depth,
            init_observations=args.init_observations,
            log_frequency=args.log_frequency,
        )
        optimizer = create_optimizer(args.algorithm, options)
    except ConfigurationError as e:
        print(f"Error: {e}")
        return 1

    print(f"\nAlgorithm: {args.algorithm}")
    print(f"Function: {args.function}")
    print(f"Dimension: {args.dim}")
    print(f"Budget: {args.max_observations} evaluations")
    print(f"Epsilon: {args.epsilon}")

    print("\nOptimizing...")
    start = time.time()
    error = fn.relative_error(optimizer.best_node().value)
    while error > args.epsilon and not optimizer.is_finished():
        optimizer.step()
        error = fn.relative_error(optimizer.best_node().value)
    elapsed = time.time() - start

    reason = StopReason.TARGET if error <= args.epsilon else StopReason.BUDGET
    result = optimizer.result(reason)

    print("\n" + "-" * 60)
    print("RESULTS")
    print("-" * 60)
    print(f"Stopped on: {reason.value}")
    print(f"Time: {elapsed:.3f}s")
    print(f"Number of function evaluations: {result.num_observations}")
    print(f"Steps: {result.num_steps}")
    print(f"Error: {error:.6e}")
    print(f"Best value: {result.value:.6e}")
    print(f"Best: {np.array2string(result.x_best, precision=6)}")

    if args.output:
        output_data = result.to_dict()
        output_data.update({
            'function': args.function,
            'dimension': args.dim,
            'error': error,
            'time': elapsed,
        })
        with open(args.output, 'w') as f:
            json.dump(output_data, f, indent=2)
        print(f"\nResults saved to: {args.output}")

    return 0 if reason == StopReason.TARGET else 1


def cmd_list(args):
    """List algorithms and benchmark functions."""
    print("Algorithms:")
    for name in available_algorithms():
        print(f"  {name}")
    print("Functions:")
    for name in available_functions():
        print(f"  {name}")
    return 0


def cmd_version(args):
    """Print version information."""
    print(f"logo-optimizer {__version__}")
    print("Tree-partitioning global optimization")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='logo',
        description='LOGO Optimizer - SOO, LOGO, DOO, BaMSOO and IMGPO'
    )
    subparsers = parser.add_subparsers(dest='command', help='Commands')

    run_parser = subparsers.add_parser('run', help='Optimize a benchmark function')
    run_parser.add_argument('algorithm', choices=available_algorithms(),
                            help='Algorithm variant')
    run_parser.add_argument('function', choices=available_functions(),
                            help='Function to maximize')
    run_parser.add_argument('--dim', '-d', type=int, default=2,
                            help='Dimension (default: 2)')
    run_parser.add_argument('--max-observations', '-n', type=int, default=8000,
                            help='Evaluation budget (default: 8000)')
    run_parser.add_argument('--children', '-k', type=int, default=3,
                            help='Children per split, odd and >= 3 (default: 3)')
    run_parser.add_argument('--seed', type=int, default=0,
                            help='Random seed (default: 0)')
    run_parser.add_argument('--split-rule', choices=[r.value for r in SplitRule],
                            help='Tie-breaking rule for the split dimension')
    run_parser.add_argument('--widths', type=int, nargs='+', default=[3, 4, 5, 6, 8, 30],
                            help='LOGO width schedule (default: 3 4 5 6 8 30)')
    run_parser.add_argument('--max-slope', type=float, default=1.0,
                            help='DOO slope constant (default: 1)')
    run_parser.add_argument('--subtree-depth', type=int, default=5,
                            help='IMGPO lookahead depth limit (default: 5)')
    run_parser.add_argument('--init-observations', type=int, default=10,
                            help='InitBaMSOO warm-start points (default: 10)')
    run_parser.add_argument('--epsilon', '-e', type=float, default=1e-4,
                            help='Error target (default: 1e-4)')
    run_parser.add_argument('--log-frequency', type=int, default=0,
                            help='Print progress every N steps (default: off)')
    run_parser.add_argument('--output', '-o', type=str,
                            help='Output JSON file')
    run_parser.set_defaults(func=cmd_run)

    list_parser = subparsers.add_parser('list', help='List algorithms and functions')
    list_parser.set_defaults(func=cmd_list)

    ver_parser = subparsers.add_parser('version', help='Print version')
    ver_parser.set_defaults(func=cmd_version)

    return parser


def main(argv=None):
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 0

    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
