#!/usr/bin/env python3
"""API client smoke test for the triage server.

Acts as a pure HTTP client against a live server (unlike
``simulate_triage.py``, which calls the SDK directly).  Each run opens a
conversation, walks the guided tree with random choices, optionally sends a
free-text message mid-walk, fetches the doctor listing for the outcome, and
closes the conversation.  Unexpected status codes or shapes are flagged.

Usage::

    # Install deps (first time only)
    pip install -e ".[scripts]"

    # Quick smoke test
    python scripts/run_client_test.py -n 5 -v

    # Interrupt one walk in three with free text
    python scripts/run_client_test.py -n 30 --free-text-rate 0.33

    # Reproducible run
    python scripts/run_client_test.py --seed 42
"""

from __future__ import annotations

import argparse
import asyncio
import random
import sys
import time
import uuid
from dataclasses import dataclass, field
from typing import Any

import httpx
from rich.console import Console
from rich.table import Table

API = "/api/v1"

# Free text sent when a walk is interrupted; mirrors the shipped classifier rules.
FREE_TEXT_POOL = [
    "I have a terrible headache and feel dizzy",
    "my chest hurts",
    "there's a rash on my neck",
    "stomach cramps after lunch",
    "my tooth is killing me",
    "I just feel a bit off",
]


# ---------------------------------------------------------------------------
# APIClient — thin httpx wrapper with X-User-ID header
# ---------------------------------------------------------------------------

class APIClient:
    """Async HTTP client for the triage server API."""

    def __init__(self, base_url: str, user_id: str, timeout: float = 10.0):
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._headers = {"X-User-ID": user_id}
        self._client: httpx.AsyncClient | None = None

    async def __aenter__(self) -> APIClient:
        self._client = httpx.AsyncClient(
            base_url=self._base_url,
            timeout=self._timeout,
            headers=self._headers,
        )
        return self

    async def __aexit__(self, *args: Any) -> None:
        if self._client:
            await self._client.aclose()

    async def health_check(self) -> bool:
        """Check server health. Returns True if server is reachable."""
        try:
            resp = await self._client.get("/health")  # type: ignore[union-attr]
            return resp.status_code == 200 and resp.json().get("status") == "ok"
        except (httpx.ConnectError, httpx.TimeoutException):
            return False

    async def create_conversation(self, conversation_id: str) -> dict:
        return await self._post("/conversations", {"conversation_id": conversation_id})

    async def delete_conversation(self, conversation_id: str) -> None:
        resp = await self._client.delete(f"{API}/conversations/{conversation_id}")  # type: ignore[union-attr]
        resp.raise_for_status()

    async def start(self, conversation_id: str) -> dict:
        return await self._post(f"/conversations/{conversation_id}/triage/start", None)

    async def answer(self, conversation_id: str, choice: str) -> dict:
        return await self._post(f"/conversations/{conversation_id}/triage/answer", {"choice": choice})

    async def message(self, conversation_id: str, text: str) -> dict:
        return await self._post(f"/conversations/{conversation_id}/messages", {"text": text})

    async def doctors(self, specialization: str | None) -> list[dict]:
        params = {"specialization": specialization} if specialization else {}
        resp = await self._client.get(f"{API}/doctors", params=params)  # type: ignore[union-attr]
        resp.raise_for_status()
        return resp.json()

    async def _post(self, path: str, json: Any) -> Any:
        """POST under the API prefix, retry once on timeout."""
        url = f"{API}{path}"
        try:
            resp = await self._client.post(url, json=json)  # type: ignore[union-attr]
        except httpx.TimeoutException:
            resp = await self._client.post(url, json=json)  # type: ignore[union-attr]
        resp.raise_for_status()
        return resp.json() if resp.content else None


# ---------------------------------------------------------------------------
# Result tracking
# ---------------------------------------------------------------------------

@dataclass
class RunResult:
    """Outcome of one scripted conversation."""

    run_index: int
    path: list[str] = field(default_factory=list)
    mode: str = "guided"           # "guided" or "free_text"
    outcome: str = "incomplete"    # "recommendation", "closed", "incomplete"
    specialization: str | None = None
    recommended_doctors: int = 0
    status: str = "success"        # "success" or "failed"
    error: str | None = None


class RunExecutor:
    """Drives one conversation through the API."""

    def __init__(self, client: APIClient, rng: random.Random, console: Console, *, verbose: int, free_text_rate: float, max_steps: int):
        self._client = client
        self._rng = rng
        self._console = console
        self._verbose = verbose
        self._free_text_rate = free_text_rate
        self._max_steps = max_steps

    async def run(self, run_index: int) -> RunResult:
        result = RunResult(run_index=run_index)
        conversation_id = f"run-{run_index}-{uuid.uuid4().hex[:8]}"
        try:
            await self._client.create_conversation(conversation_id)
            step = await self._client.start(conversation_id)
            for _ in range(self._max_steps):
                if step["type"] != "question":
                    break
                if self._rng.random() < self._free_text_rate:
                    text = self._rng.choice(FREE_TEXT_POOL)
                    result.mode = "free_text"
                    result.path.append(f"“{text}”")
                    rec = await self._client.message(conversation_id, text)
                    result.outcome = "recommendation" if rec["specialization"] else "closed"
                    result.specialization = rec["specialization"]
                    break
                choice = self._rng.choice(step["choices"])
                result.path.append(choice)
                if self._verbose:
                    self._console.print(f"    [dim]Q:[/] {step['prompt']}")
                    self._console.print(f"    [dim]A:[/] {choice}")
                step = await self._client.answer(conversation_id, choice)
            else:
                raise RuntimeError(f"walk did not terminate within {self._max_steps} steps")

            if result.mode == "guided":
                if step["type"] == "question":
                    raise RuntimeError("walk ended on a question step")
                result.outcome = step["type"]
                result.specialization = step["recommendation"]["specialization"]
                if step["type"] == "closed" and result.specialization is not None:
                    raise RuntimeError("closed step carried a specialization")

            listing = await self._client.doctors(result.specialization)
            result.recommended_doctors = sum(1 for m in listing if m["recommended"])
            if result.specialization and not result.recommended_doctors:
                self._console.print(f"  [yellow]![/] no doctors for {result.specialization}")

            await self._client.delete_conversation(conversation_id)
        except (httpx.HTTPError, RuntimeError, KeyError) as exc:
            result.status = "failed"
            result.error = f"{type(exc).__name__}: {exc}"
        return result


def print_summary(console: Console, results: list[RunResult]) -> None:
    """Print a rich summary table of all results."""
    console.print("\n")
    console.rule("[bold]Run Summary")
    console.print()

    failed = [r for r in results if r.status == "failed"]
    console.print(f"  Total:   {len(results)}")
    console.print(f"  [green]Passed:[/]  {len(results) - len(failed)}")
    console.print(f"  [red]Failed:[/]  {len(failed)}")
    console.print()

    table = Table(title="Results", show_lines=True)
    table.add_column("#", style="dim", width=4)
    table.add_column("Mode", width=10)
    table.add_column("Path", min_width=30)
    table.add_column("Outcome", width=15)
    table.add_column("Specialization", width=18)
    table.add_column("Doctors", width=8)
    table.add_column("Status", width=8)

    for r in results:
        status_str = "[green]OK[/]" if r.status == "success" else "[red]FAIL[/]"
        table.add_row(
            str(r.run_index),
            r.mode,
            " → ".join(r.path) or "-",
            r.outcome,
            r.specialization or "-",
            str(r.recommended_doctors),
            status_str,
        )
    console.print(table)

    if failed:
        console.print()
        console.rule("[red]Failed Runs")
        for r in failed:
            console.print(f"  run {r.run_index}: {r.error}")
    console.print()


# ---------------------------------------------------------------------------
# CLI + async main
# ---------------------------------------------------------------------------

def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="API client smoke test for the triage server.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument("--base-url", default="http://localhost:8080", help="Server base URL (default: http://localhost:8080)")
    parser.add_argument("-n", "--runs", type=int, default=10, help="Number of conversations (default: 10)")
    parser.add_argument("-v", "--verbose", action="count", default=0, help="Print Q&A pairs")
    parser.add_argument("--seed", type=int, default=None, help="RNG seed (default: current timestamp)")
    parser.add_argument("--user-id", default="client-test", help="X-User-ID to send")
    parser.add_argument("--free-text-rate", type=float, default=0.0, help="Probability of interrupting a step with free text")
    parser.add_argument("--max-steps", type=int, default=20, help="Safety limit: max answers per walk (default: 20)")
    parser.add_argument("--timeout", type=float, default=10.0, help="HTTP request timeout in seconds (default: 10)")
    return parser.parse_args()


async def main() -> None:
    args = parse_args()
    console = Console()

    seed = args.seed if args.seed is not None else int(time.time())
    rng = random.Random(seed)
    console.print(f"[dim]RNG seed: {seed}[/]")

    results: list[RunResult] = []
    async with APIClient(args.base_url, args.user_id, timeout=args.timeout) as client:
        if not await client.health_check():
            console.print(f"[red]Server at {args.base_url} is not reachable. Is the server running?[/]")
            sys.exit(1)

        executor = RunExecutor(
            client, rng, console,
            verbose=args.verbose,
            free_text_rate=args.free_text_rate,
            max_steps=args.max_steps,
        )
        for i in range(1, args.runs + 1):
            if args.verbose:
                console.print(f"[bold]Run {i}[/]")
            results.append(await executor.run(i))

    print_summary(console, results)
    if any(r.status == "failed" for r in results):
        sys.exit(1)


if __name__ == "__main__":
    asyncio.run(main())
