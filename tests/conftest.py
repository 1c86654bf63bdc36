import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]

for rel in (
    ("apps", "terminal"),
    ("packages", "core"),
    ("packages", "renderer"),
    ("packages", "script"),
    ("packages", "telemetry"),
):
    path = str(ROOT.joinpath(*rel))
    if path not in sys.path:
        sys.path.insert(0, path)
