"""Classroom attendance package.

This package is organized by feature modules (classes, students, attendance, ...)
with a thin Flask controller layer, service/repository layers and a sync layer
that reconciles the remote MySQL store with the per-class local cache.
"""
