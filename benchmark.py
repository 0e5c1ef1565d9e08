#!/usr/bin/env python3
"""
Timing benchmark for razorfmt.

Templates (.razor / .cshtml) come from a directory tree or from a .tar.zst
archive that is decompressed while it is read. Every stage runs in its own
process so its peak RSS can be sampled on the side.

Requires the benchmark extra: pip install razorfmt[benchmark]
"""

# ruff: noqa: BLE001
from __future__ import annotations

import argparse
import logging
import multiprocessing
import pathlib
import sys
import tarfile
import threading
import time

import psutil
import zstandard as zstd

from razorfmt import Config, format_document, format_markup, tokenize

SUFFIXES = (".razor", ".cshtml")

MB = 1024 * 1024


class RssSampler:
    """Samples the resident set size of one process from a background thread."""

    def __init__(self, pid: int, interval: float = 0.01):
        self.interval = interval
        self.process = psutil.Process(pid)
        self.first: int | None = None
        self.peak = 0
        self.samples = 0
        self._done = threading.Event()
        self._thread = threading.Thread(target=self._loop, daemon=True)

    def _rss(self) -> int | None:
        try:
            return self.process.memory_info().rss
        except psutil.Error:
            return None

    def _loop(self):
        while not self._done.is_set():
            rss = self._rss()
            if rss is not None:
                if self.first is None:
                    self.first = rss
                self.peak = max(self.peak, rss)
                self.samples += 1
            self._done.wait(self.interval)

    def __enter__(self):
        self._thread.start()
        return self

    def __exit__(self, *exc_info):
        self._done.set()
        self._thread.join(timeout=1.0)

    def summary(self) -> dict:
        return {
            "rss_peak_mb": self.peak / MB,
            "rss_growth_mb": (self.peak - (self.first or self.peak)) / MB,
            "rss_samples": self.samples,
        }


def load_from_directory(directory: pathlib.Path, limit: int | None = None) -> list[tuple[str, str]]:
    """Return ``(relative path, content)`` for every template below ``directory``."""
    if not directory.is_dir():
        sys.exit(f"ERROR: not a directory: {directory}")
    paths = sorted(p for p in directory.rglob("*") if p.suffix in SUFFIXES and p.is_file())
    if limit:
        paths = paths[:limit]
    return [(str(p.relative_to(directory)), p.read_text(encoding="utf-8", errors="replace")) for p in paths]


def load_from_archive(archive: pathlib.Path, limit: int | None = None) -> list[tuple[str, str]]:
    """Stream templates out of a .tar.zst archive."""
    if not archive.is_file():
        sys.exit(f"ERROR: archive not found: {archive}")
    templates = []
    with archive.open("rb") as raw, zstd.ZstdDecompressor().stream_reader(raw) as reader:
        with tarfile.open(fileobj=reader, mode="r|") as tar:
            for member in tar:
                if limit and len(templates) >= limit:
                    break
                if not (member.isfile() and member.name.endswith(SUFFIXES)):
                    continue
                data = tar.extractfile(member).read()
                templates.append((member.name, data.decode("utf-8", errors="replace")))
    return templates


STAGES = {
    "tokenize": lambda text, config: tokenize(text),
    "markup": lambda text, config: format_markup(text, config),
    "document": lambda text, config: format_document(text, config),
}


def time_stage(stage, templates, iterations, config):
    """Run one stage over every template ``iterations`` times."""
    run = STAGES[stage]
    timings = []
    failures = []
    if templates:
        run(templates[0][1], config)
    for _ in range(iterations):
        for name, text in templates:
            start = time.perf_counter()
            try:
                run(text, config)
            except Exception as exc:
                failures.append((name, f"{type(exc).__name__}: {exc}"))
                continue
            timings.append(time.perf_counter() - start)
    return {
        "total": sum(timings),
        "mean": sum(timings) / len(timings) if timings else 0.0,
        "worst": max(timings, default=0.0),
        "runs": len(timings),
        "failures": failures,
    }


def _stage_worker(stage, templates, iterations, indent_size, queue):
    try:
        queue.put(time_stage(stage, templates, iterations, Config(indent_size=indent_size)))
    except Exception as exc:
        queue.put({"crashed": f"{type(exc).__name__}: {exc}"})


def run_stage(stage, templates, iterations, config, sample_memory=True, interval=0.01):
    """Time ``stage``; with ``sample_memory`` it runs in a child process under an RssSampler."""
    if not sample_memory:
        return time_stage(stage, templates, iterations, config)

    queue = multiprocessing.Queue()
    child = multiprocessing.Process(
        target=_stage_worker,
        args=(stage, templates, iterations, config.indent_size, queue),
    )
    child.start()
    with RssSampler(child.pid, interval) as sampler:
        result = queue.get()
    child.join()
    if "crashed" not in result:
        result.update(sampler.summary())
    return result


def print_results(results: dict, template_count: int, iterations: int):
    width = 78
    print()
    print("=" * width)
    print(f"razorfmt: {template_count} templates, {iterations} iteration(s) each")
    print("=" * width)
    print(f"{'stage':<12}{'total s':>10}{'mean ms':>10}{'worst ms':>10}{'peak MB':>10}{'grew MB':>10}{'failed':>8}")
    print("-" * width)
    for stage, result in results.items():
        if "crashed" in result:
            print(f"{stage:<12}crashed: {result['crashed']}")
            continue
        if "rss_peak_mb" in result:
            memory = f"{result['rss_peak_mb']:>10.1f}{result['rss_growth_mb']:>10.1f}"
        else:
            memory = f"{'-':>10}{'-':>10}"
        print(
            f"{stage:<12}{result['total']:>10.3f}{result['mean'] * 1000:>10.3f}"
            f"{result['worst'] * 1000:>10.3f}{memory}{len(result['failures']):>8}"
        )
    print("=" * width)

    for stage, result in results.items():
        for name, message in result.get("failures", []):
            print(f"{stage}: {name}: {message}")


def main():
    parser = argparse.ArgumentParser(description="Benchmark razorfmt on a corpus of Razor templates")
    source = parser.add_mutually_exclusive_group(required=True)
    source.add_argument("--dir", type=pathlib.Path, help="directory searched recursively for templates")
    source.add_argument("--archive", type=pathlib.Path, help=".tar.zst archive of templates")
    parser.add_argument("--limit", type=int, default=100, help="maximum number of templates (0 = all)")
    parser.add_argument("--iterations", type=int, default=5, help="passes over the corpus per stage")
    parser.add_argument("--stages", nargs="+", choices=list(STAGES), default=list(STAGES))
    parser.add_argument("--indent-size", type=int, default=4)
    parser.add_argument("--no-mem", action="store_true", help="run in-process without RSS sampling")
    parser.add_argument("--mem-sample-ms", type=float, default=10.0, help="RSS sampling interval")
    args = parser.parse_args()

    logging.basicConfig(level=logging.WARNING)

    limit = args.limit or None
    if args.archive:
        templates = load_from_archive(args.archive, limit)
    else:
        templates = load_from_directory(args.dir, limit)
    if not templates:
        sys.exit("ERROR: no templates found")
    size = sum(len(text) for _, text in templates)
    print(f"Loaded {len(templates)} templates ({size / MB:.2f} MB)")

    config = Config(indent_size=args.indent_size)
    results = {}
    for stage in args.stages:
        print(f"  {stage}...", flush=True)
        results[stage] = run_stage(
            stage,
            templates,
            args.iterations,
            config,
            sample_memory=not args.no_mem,
            interval=max(0.0005, args.mem_sample_ms / 1000.0),
        )

    print_results(results, len(templates), args.iterations)


if __name__ == "__main__":
    main()
