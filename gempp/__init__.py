"""Graph matching command line, molecule graph hierarchization, edit cost learning and display models."""

__version__ = "1.0.0"