"""run_full_synthetic_test_suite.py

Unit tests plus three bulb soak scenarios, all against synthetic frames and a
local fake bulb. The run fails when any step exits non-zero or when a soak
summary shows lost datagrams or send errors.

Usage:
  python tools/run_full_synthetic_test_suite.py --minutes 10

Outputs:
  logs/synthetic_suite_YYYYmmdd_HHMMSS.log
  logs/synthetic_suite_YYYYmmdd_HHMMSS__soak_<tag>.json
"""

import argparse
import datetime as dt
import json
import subprocess
import sys
from pathlib import Path
from typing import List, NamedTuple

REPO_ROOT = Path(__file__).resolve().parent.parent
SOAK_SCRIPT = REPO_ROOT / "tools" / "soak_test_synthetic_frames.py"
RULE = "-" * 72


class Scenario(NamedTuple):
    tag: str
    share: float  # fraction of the time budget
    flags: List[str]


SCENARIOS = [
    Scenario("smooth", 0.4, ["--stride", "5"]),
    Scenario("instant", 0.3, ["--stride", "5", "--no-smooth"]),
    Scenario("coarse", 0.3, ["--stride", "50"]),
]


def run_step(label, cmd, log):
    log.write(f"\n{RULE}\n[{label}] {' '.join(cmd)}\n{RULE}\n")
    log.flush()
    return subprocess.call(cmd, stdout=log, stderr=subprocess.STDOUT, cwd=str(REPO_ROOT))


def summary_problems(summary):
    """
    Check one soak summary.
    Returns:
        list of str: Human-readable problems; empty when the run was clean.
    """
    problems = []
    if summary.get("send_errors", 0) > 0:
        problems.append(f"{summary['send_errors']} send errors")
    if summary.get("datagrams_received", 0) < summary.get("ticks", 0):
        problems.append(f"bulb received {summary.get('datagrams_received', 0)} of {summary['ticks']} updates")
    return problems


def main():
    ap = argparse.ArgumentParser(description="Run unit tests and bulb soak scenarios.")
    ap.add_argument("--minutes", type=float, default=10.0, help="Soak time budget shared by all scenarios.")
    ap.add_argument("--fps", type=float, default=25.0)
    ap.add_argument("--out-dir", default="logs")
    args = ap.parse_args()

    out_dir = REPO_ROOT / args.out_dir
    out_dir.mkdir(parents=True, exist_ok=True)
    stamp = dt.datetime.now().strftime("%Y%m%d_%H%M%S")
    log_path = out_dir / f"synthetic_suite_{stamp}.log"
    budget_s = max(args.minutes * 60.0, 60.0)

    failures = []
    with log_path.open("w", encoding="utf-8") as log:
        log.write(f"suite {stamp} python={sys.executable} minutes={args.minutes} fps={args.fps}\n")

        unit_cmd = [sys.executable, "-m", "unittest", "discover", "-s", "wiz_mood_light", "-p", "test*.py"]
        if run_step("unit", unit_cmd, log) != 0:
            failures.append("unit tests failed")

        for scenario in SCENARIOS:
            json_out = out_dir / f"synthetic_suite_{stamp}__soak_{scenario.tag}.json"
            seconds = max(budget_s * scenario.share, 20.0)
            cmd = [sys.executable, str(SOAK_SCRIPT), "--seconds", f"{seconds:.0f}",
                   "--fps", f"{args.fps:.2f}", "--json-out", str(json_out)] + scenario.flags
            if run_step(f"soak {scenario.tag}", cmd, log) != 0:
                failures.append(f"soak {scenario.tag} exited non-zero")
            if not json_out.exists():
                failures.append(f"soak {scenario.tag} wrote no summary")
                continue
            summary = json.loads(json_out.read_text(encoding="utf-8"))
            for problem in summary_problems(summary):
                failures.append(f"soak {scenario.tag}: {problem}")
            log.write(f"[soak {scenario.tag}] ticks={summary.get('ticks')} "
                      f"received={summary.get('datagrams_received')} errors={summary.get('send_errors')}\n")

        log.write(f"\n{RULE}\n")
        log.write("PASS\n" if not failures else "FAIL\n" + "\n".join(failures) + "\n")

    for line in failures:
        print(f"[SUITE] {line}")
    print(f"[SUITE] {'FAIL' if failures else 'PASS'} - log: {log_path}")
    return 1 if failures else 0


if __name__ == "__main__":
    sys.exit(main())
