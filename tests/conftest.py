import os

# Analysis plots must not need a display.
os.environ.setdefault("MPLBACKEND", "Agg")
