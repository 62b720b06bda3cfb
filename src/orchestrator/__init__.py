from .pipeline import AnalysisOutcome, run_analysis

__all__ = ["AnalysisOutcome", "run_analysis"]
