"""Wellness Record Builder.

Generates NDHM-conformant FHIR Wellness Record document bundles from person
demographics and wellness observations.
"""

__version__ = "0.1.0"
