"""Deprecated entry points kept for older notebooks."""

from cutpursuit.legacy.notebook_compat import CP_quadratic_l1

__all__ = ["CP_quadratic_l1"]
