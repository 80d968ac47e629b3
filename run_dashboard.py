#!/usr/bin/env python3
"""Direct launcher for the SpendWise dashboard.

Runs ``streamlit run spendwise/dashboard.py`` with the project root on the
import path, so the app works from a plain checkout.
"""

import os
import subprocess
import sys
from pathlib import Path

project_root = Path(__file__).parent.resolve()

if __name__ == "__main__":
    env = dict(os.environ)
    env["PYTHONPATH"] = os.pathsep.join(filter(None, [str(project_root), env.get("PYTHONPATH")]))
    raise SystemExit(subprocess.run(
        [sys.executable, "-m", "streamlit", "run", str(project_root / "spendwise" / "dashboard.py")],
        env=env,
    ).returncode)
