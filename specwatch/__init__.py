"""specwatch: run spec files and follow their tests from the runner output."""

__version__ = "0.1.0"
