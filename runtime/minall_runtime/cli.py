"""
MinAll command line

    minall script.js                 run a script
    minall script.js --ast           print the parsed tree instead of running
    minall script.js --time          report wall-clock execution time on stderr
    minall --benchmark [--json]      run the built-in performance suite
"""

import argparse
import json
import logging
import sys
import time
from pathlib import Path
from typing import List, Optional

from .ast_printer import format_ast
from .config import RuntimeConfig
from .errors import MinAllError
from .runtime import MinAllRuntime

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="minall", description="Run MinAll scripts.")
    parser.add_argument("script", nargs="?", help="Path to the MinAll source file.")
    parser.add_argument("--ast", action="store_true", help="Print the AST instead of executing.")
    parser.add_argument("--time", action="store_true", help="Report execution time on stderr.")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging.")
    parser.add_argument("--benchmark", action="store_true", help="Run the performance suite.")
    parser.add_argument("--json", action="store_true", help="Emit benchmark results as JSON.")
    parser.add_argument("--scale", type=float, default=1.0,
                        help="Multiply benchmark iteration counts (default: 1.0).")
    parser.add_argument("--max-depth", type=int, default=None, dest="max_call_depth",
                        help="Maximum user function call depth.")
    parser.add_argument("--strict-assignment", action="store_true", default=None,
                        help="Assigning an undeclared variable is an error.")
    parser.add_argument("--strict-arity", action="store_true", default=None,
                        help="Calling a function with the wrong argument count is an error.")
    return parser


def run_benchmark(scale: float, as_json: bool) -> int:
    # numpy is only needed here
    from .benchmark import format_report, run_performance_tests

    results = run_performance_tests(scale=scale)
    if as_json:
        print(json.dumps({"results": [r.to_dict() for r in results]}, indent=4))
    else:
        print(format_report(results))
    return 0


def run_script(args: argparse.Namespace, config: RuntimeConfig) -> int:
    path = Path(args.script)
    if not path.is_file():
        print(f"Error: File '{path}' not found.", file=sys.stderr)
        return 1

    runtime = MinAllRuntime(config)
    try:
        if args.ast:
            source = path.read_text(encoding='utf-8')
            print(format_ast(runtime.parse(source), config.max_call_depth))
            return 0

        start = time.perf_counter()
        runtime.execute_file(path)
        elapsed = time.perf_counter() - start
    except MinAllError as e:
        sys.stdout.flush()
        print(str(e), file=sys.stderr)
        return 1
    except (OSError, UnicodeDecodeError) as e:
        print(f"Error: cannot read '{path}': {e}", file=sys.stderr)
        return 1

    if args.time:
        print(f"Execution completed in {elapsed:.6f} seconds", file=sys.stderr)
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    if args.benchmark:
        return run_benchmark(args.scale, args.json)

    if args.script is None:
        parser.print_usage(sys.stderr)
        print("Error: a script path is required (or use --benchmark).", file=sys.stderr)
        return 1

    try:
        config = RuntimeConfig.from_env(
            max_call_depth=args.max_call_depth,
            strict_assignment=args.strict_assignment,
            strict_arity=args.strict_arity,
        )
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    logger.debug("Running %s with %s", args.script, config)
    return run_script(args, config)


if __name__ == "__main__":
    sys.exit(main())
