"""Carbon sequestration and vegetation index toolkit for date-palm farms."""

__version__ = "0.1.0"
