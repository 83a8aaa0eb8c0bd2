"""Tutoring attendance package.

Organized by feature modules (students, attendance, absence, ...) with a thin
Flask controller layer over service/repository layers. The auto-absence engine
lives in ``absence``.
"""
