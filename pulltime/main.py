from __future__ import annotations

import argparse
import json
import logging
import os
import sys
from pathlib import Path
from typing import Any, Callable

from .benchmarks import BenchmarkConfig, BenchmarkRunner, summarize
from .benchmarks.collector import build_dataframe
from .benchmarks.config import DEFAULT_CONCURRENCY, DEFAULT_TIMEOUT_SECONDS
from .errors import ConfigurationError, OutputError
from .modes import ci, compare, warmup
from .pull import ImagePuller
from .runtime import DEFAULT_RUNTIME, RuntimeCommands

LOGGER = logging.getLogger("pulltime")

PullerFactory = Callable[[str], ImagePuller]


def _env_number(name: str, default: float, cast: Callable[[str], Any]) -> Any:
    raw = os.environ.get(name)
    if raw is None:
        return default
    try:
        return cast(raw)
    except ValueError:
        print(f"invalid {name} value {raw!r}; defaulting to {default}", file=sys.stderr)
        return default


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="pulltime",
        description="Measure image pull time from remote registries",
    )
    parser.add_argument(
        "--runtime",
        default=os.environ.get("PULLTIME_RUNTIME", DEFAULT_RUNTIME),
        help="Container CLI used for pull/rmi (docker, podman, nerdctl)",
    )
    parser.add_argument(
        "--log-level",
        default=os.environ.get("PULLTIME_LOG_LEVEL", "WARNING"),
        help="Logging level",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    image = subparsers.add_parser("image", help="Measure pull time for a container image")
    image.add_argument("image")

    benchmark = subparsers.add_parser(
        "benchmark",
        help="Benchmark pull times for multiple container images and output JSON report",
    )
    benchmark.add_argument("images", nargs="+")
    benchmark.add_argument(
        "-c",
        "--concurrent",
        type=int,
        default=_env_number("PULLTIME_CONCURRENCY", DEFAULT_CONCURRENCY, int),
        help="Number of concurrent pulls",
    )
    benchmark.add_argument(
        "-t",
        "--timeout",
        type=float,
        default=_env_number("PULLTIME_TIMEOUT", DEFAULT_TIMEOUT_SECONDS, float),
        help="Timeout (seconds) for each pull",
    )
    benchmark.add_argument(
        "-s", "--summary", action="store_true", help="Print summary statistics"
    )
    benchmark.add_argument(
        "--csv", type=Path, help="Also write the results table to this CSV file"
    )

    compare_parser = subparsers.add_parser(
        "compare",
        help="Compare pull times between a mirror and a remote registry",
    )
    compare_parser.add_argument("mirror")
    compare_parser.add_argument("remote")

    ci_parser = subparsers.add_parser(
        "ci", help="Measure and export image pull time for CI/CD integration"
    )
    ci_parser.add_argument("image")
    ci_parser.add_argument("--output", help="Write the JSON report to this file")

    warmup_parser = subparsers.add_parser(
        "warmup",
        help="Repeatedly pull and remove an image to measure cold and warm cache pull times",
    )
    warmup_parser.add_argument("image")
    warmup_parser.add_argument(
        "-n", "--iterations", type=int, default=3, help="Number of pull/remove iterations"
    )
    warmup_parser.add_argument(
        "-d", "--delay", type=int, default=1000, help="Delay (ms) between iterations"
    )
    return parser.parse_args(argv)


def setup_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.WARNING),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        stream=sys.stderr,
    )


def encode(payload: Any) -> str:
    try:
        return json.dumps(payload, indent=2)
    except (TypeError, ValueError) as exc:
        raise OutputError(f"Error generating JSON: {exc}") from exc


def default_puller(runtime: str) -> ImagePuller:
    return ImagePuller(RuntimeCommands(executable=runtime))


def run(argv: list[str] | None = None, puller_factory: PullerFactory = default_puller) -> int:
    args = parse_args(argv)
    setup_logging(args.log_level)
    puller = puller_factory(args.runtime)

    try:
        if args.command == "image":
            return _run_image(puller, args.image)
        if args.command == "benchmark":
            config = BenchmarkConfig(
                concurrency=args.concurrent,
                timeout_seconds=args.timeout,
                summary=args.summary,
                csv_path=args.csv,
            )
            return _run_benchmark(puller, args.images, config)
        if args.command == "compare":
            records = compare(puller, args.mirror, args.remote)
            print(encode([record.to_dict() for record in records]))
            return 0
        if args.command == "ci":
            return _run_ci(puller, args.image, args.output)
        if args.iterations < 0 or args.delay < 0:
            raise ConfigurationError("iterations and delay must not be negative")
        iterations = warmup(puller, args.image, args.iterations, args.delay)
        print(encode([item.to_dict() for item in iterations]))
        return 0
    except ConfigurationError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1
    except OutputError as exc:
        print(exc)
        return 1


def _run_image(puller: ImagePuller, image: str) -> int:
    print(f"Pulling image: {image}")
    result = puller.pull(image)
    if not result.success:
        print(f"Error pulling image: {result.error}")
        if result.cmd_output:
            print(result.cmd_output)
        return 1
    print(f"Image pull completed in: {result.pull_time_ms / 1000:.3f}s")
    print(f"--- {puller.runtime.capitalize()} Output ---")
    print(result.cmd_output)
    return 0


def _run_benchmark(puller: ImagePuller, images: list[str], config: BenchmarkConfig) -> int:
    results = BenchmarkRunner(puller, config).run(images)
    if config.summary:
        print()
        print(summarize(results).format_line())
    if config.csv_path is not None:
        try:
            build_dataframe(results).to_csv(config.csv_path, index=False)
        except OSError as exc:
            raise OutputError(f"Error writing to file: {exc}") from exc
        LOGGER.info("wrote %d row(s) to %s", len(results), config.csv_path)
    print(encode([result.to_dict() for result in results]))
    return 0


def _run_ci(puller: ImagePuller, image: str, output: str | None) -> int:
    payload = encode(ci(puller, image).to_dict())
    if not output:
        print(payload)
        return 0
    try:
        Path(output).write_text(payload, encoding="utf-8")
    except OSError as exc:
        raise OutputError(f"Error writing to file: {exc}") from exc
    print(f"Results written to {output}")
    return 0


def main() -> None:
    sys.exit(run())


if __name__ == "__main__":
    main()
