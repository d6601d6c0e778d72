"""GrowthPath: learning-progress dashboard with AI insights."""

__version__ = "0.1.0"
