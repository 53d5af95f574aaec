"""
YaraCheck - Lost-and-found and anti-theft reporting API.
"""

__version__ = "0.1.0"
