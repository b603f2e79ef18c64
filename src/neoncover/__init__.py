"""NeonCover: layer state, interaction and export core of a cover composer."""

__version__ = "0.1.0"
