"""WAF fingerprinting, response classification, scan bookkeeping and graded console and JSON reports."""

__version__ = "0.1.0"