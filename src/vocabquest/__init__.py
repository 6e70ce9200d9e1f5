"""Japanese vocabulary quest: scene-based vocabulary study for young learners."""

__version__ = "0.1.0"
