import os

# Keep unit runs from shipping traces to an Opik backend.
os.environ.setdefault("OPIK_TRACK_DISABLE", "true")
