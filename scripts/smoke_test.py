from __future__ import annotations

import os
import subprocess
import sys
from pathlib import Path

SCENARIO = "case_files/scenario.yaml"
OUT_DIR = "output/smoke"

COMMANDS = [
    ["--help"],
    ["validate", "--input", SCENARIO],
    ["run", "--input", SCENARIO, "--quiet"],
    ["export", "--input", SCENARIO, "--output", f"{OUT_DIR}/scenario.xlsx", "--csv", "--charts"],
    ["amortize", "-p", "10000", "-r", "0.06", "-n", "12", "-q", "-o", f"{OUT_DIR}/schedule.xlsx"],
    ["irr", "--flows=-1000,300,400,500", "--discount-rate", "0.10"],
    ["plan", "mortgage", "-p", "250000", "-r", "6", "-y", "30", "--extra", "200", "--start-date", "2025-01-01"],
    ["plan", "refinance", "-b", "200000", "-r", "6", "-m", "306", "--new-rate", "4", "--new-term", "25", "-c", "3000"],
    ["plan", "debts", "-d", "Card:3000:22:90", "-d", "Car:8000:6:250", "--extra", "100"],
    ["plan", "savings", "-t", "20000", "-m", "400", "-r", "4", "-y", "3"],
]


def main() -> None:
    root = Path(__file__).resolve().parents[1]
    env = dict(os.environ, PYTHONPATH=str(root / "src"))

    for args in COMMANDS:
        cmd = [sys.executable, "-m", "budget_ui_cli.cli", *args]
        result = subprocess.run(cmd, cwd=root, env=env, capture_output=True, text=True)
        if result.returncode != 0:
            print(" ".join(args))
            print(result.stdout, result.stderr)
            raise SystemExit(result.returncode)
        print(f"ok  {' '.join(args)}")


if __name__ == "__main__":
    main()
