"""Evaluation metrics and benchmark runner exports."""

from cutpursuit.evaluation.metrics import ari_sklearn, nmi_sklearn, permuted_accuracy, relative_error, vi_sklearn
from cutpursuit.evaluation.runner import run_evaluation

__all__ = ["ari_sklearn", "nmi_sklearn", "permuted_accuracy", "relative_error", "run_evaluation", "vi_sklearn"]
