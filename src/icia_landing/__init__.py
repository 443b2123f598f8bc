"""
ICIA landing site backend.

A Flask API serving the contact form relay and the region
statistics behind the landing page geography map.
"""

__version__ = "1.0.0"
__author__ = "ICIA"
