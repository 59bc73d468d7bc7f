"""Desktop pets that walk along the screen, blink, and stack on one another."""

__version__ = "0.1.0"