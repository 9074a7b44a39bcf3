"""VISION attendance service package.

Organized by feature modules (students, sessions, attendance, reports, ...)
with a thin Flask controller layer over service and repository layers.
"""
