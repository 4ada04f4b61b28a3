#!/usr/bin/env python3
"""Simulate triage conversations against the SDK directly (no server).

Walks the guided tree with random (or scripted) choices and runs a handful
of free-text samples through the classifier, printing every prompt, the
choice taken, and the final recommendation with its doctor listing.

Usage::

    # Five random guided walks
    python scripts/simulate_triage.py -n 5

    # A fixed path
    python scripts/simulate_triage.py --path Yes Yes Cardiology

    # Classify free text instead
    python scripts/simulate_triage.py -t "my chest hurts" -t "rash on my arm"

    # Reproducible random walks
    python scripts/simulate_triage.py -n 10 --seed 42
"""

from __future__ import annotations

import argparse
import logging
import random
import sys
from pathlib import Path

_REPO_ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(_REPO_ROOT / "src"))

from symptom_triage.directory import InMemoryDirectory, match_doctors  # noqa: E402
from symptom_triage.models.session import Recommendation  # noqa: E402
from symptom_triage.ruleset import RulesetStore  # noqa: E402

_DOUBLE_LINE = "=" * 72
_SINGLE_LINE = "-" * 72

_SAMPLE_TEXTS = [
    "I have a terrible headache and feel dizzy",
    "my chest hurts",
    "there's a rash on my neck",
    "stomach cramps after lunch",
    "my tooth is killing me",
    "xyz123",
]

_quiet = False


def _print(*args, **kwargs) -> None:
    """Print wrapper that respects the --quiet flag."""
    if not _quiet:
        print(*args, **kwargs)


def log_recommendation(rec: Recommendation, directory: InMemoryDirectory) -> None:
    """Print a recommendation and the doctors it would hand off to."""
    _print(f" => specialization: {rec.specialization or '(none)'}")
    _print(f"    message: {rec.message}")
    listing = match_doctors(directory, specialization=rec.specialization)
    for m in listing:
        flag = "*" if m.recommended else " "
        _print(f"    {flag} {m.doctor.full_name:<24s} {', '.join(m.doctor.specializations)}")


def run_walk(store: RulesetStore, directory: InMemoryDirectory, rng: random.Random, path: list[str] | None) -> str | None:
    """Run one guided walk; return the recommended tag (or None)."""
    walker = store.new_walker()
    step = walker.start()
    scripted = list(path or [])

    _print(f"\n{_DOUBLE_LINE}")
    _print(" GUIDED TRIAGE")
    _print(_DOUBLE_LINE)

    while not step.is_terminal:
        _print(f"\n [Q] {step.prompt} ({step.node_id})")
        _print(f"     Options: {', '.join(step.choices)}")
        choice = scripted.pop(0) if scripted else rng.choice(step.choices)
        _print(f" [A] {choice}")
        step = walker.answer(choice)

    _print(f"\n{_SINGLE_LINE}")
    _print(f" Terminal step: {step.type}")
    log_recommendation(step.recommendation, directory)
    return step.recommendation.specialization


def run_texts(store: RulesetStore, directory: InMemoryDirectory, texts: list[str]) -> None:
    _print(f"\n{_DOUBLE_LINE}")
    _print(" FREE-TEXT CLASSIFIER")
    _print(_DOUBLE_LINE)
    for text in texts:
        _print(f"\n [T] {text!r}")
        log_recommendation(store.classifier.classify(text), directory)


def main() -> None:
    global _quiet

    parser = argparse.ArgumentParser(
        description="Simulate guided triage walks and free-text classification against the SDK.",
    )
    parser.add_argument("-n", "--runs", type=int, default=1, help="Number of random guided walks (default: 1)")
    parser.add_argument("--path", nargs="+", help="Scripted choice labels for a single walk")
    parser.add_argument(
        "-t", "--text",
        action="append",
        help="Free text to classify (repeatable). Without -t/--path/-n the sample texts are used too.",
    )
    parser.add_argument("--seed", type=int, default=None, help="Random seed for reproducible walks")
    parser.add_argument("--ruleset-dir", default=None, help="Ruleset directory (default: v1/ at repo root)")
    parser.add_argument("-q", "--quiet", action="store_true", help="Suppress all print output")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable DEBUG logging from the SDK")
    args = parser.parse_args()

    _quiet = args.quiet
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )

    store = RulesetStore(ruleset_dir=args.ruleset_dir)
    store.load()
    directory = InMemoryDirectory(store.doctors)
    rng = random.Random(args.seed)

    try:
        if args.path:
            run_walk(store, directory, rng, args.path)
        elif not args.text:
            for _ in range(args.runs):
                run_walk(store, directory, rng, None)
        if args.text:
            run_texts(store, directory, args.text)
        elif not args.path:
            run_texts(store, directory, _SAMPLE_TEXTS)
    except ValueError as exc:
        print(f"error: {exc}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
