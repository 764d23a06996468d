"""SceneSnap: single-shot offscreen scene capture for automation tooling."""

__version__ = "0.1.0"
