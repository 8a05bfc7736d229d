"""hcenav - Haskell Code Explorer navigation client."""

__version__ = "0.1.0"
