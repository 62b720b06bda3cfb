# tests/__init__.py
"""
Expose common test utilities so tests can import directly:
    from tests import make_sfr_deal, make_mf_deal
"""

from .utils import make_metrics, make_mf_deal, make_sfr_deal

__all__ = ["make_sfr_deal", "make_mf_deal", "make_metrics"]
