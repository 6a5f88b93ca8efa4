"""Headless presentation math: slot transforms and gesture classification.

No Qt imports; the widget layer consumes these values.
"""
