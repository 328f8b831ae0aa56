"""Cut-pursuit engine and its quadratic + d1 + l1 + box instance."""

from cutpursuit.partition.engine import CutPursuit
from cutpursuit.partition.d1_ql1b import CutPursuitD1Ql1b

__all__ = ["CutPursuit", "CutPursuitD1Ql1b"]
