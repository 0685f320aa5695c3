"""Ports (framework-free ABCs) that the service layer depends on.

Layering rule: modules here may import `codetype.domain` only; they must not
import adapters, bootstrap, or entrypoints.
"""
