"""SSA intermediate representation, analysis passes and highlighting for Java methods."""

__version__ = "0.1.0"