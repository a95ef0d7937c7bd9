# Make src/ledgerlink importable when running pytest from a checkout without installing it.
from pathlib import Path
import sys

SRC = Path(__file__).resolve().parent / "src"
if SRC.exists():
    sys.path.insert(0, str(SRC))
