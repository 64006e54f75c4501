"""
Analytics Module.

Chart series, risk statistics and narrative-summary messages built from
matched claims.
"""

from .charts import build_chart_series
from .risk import risk_summary
from .summary import build_summary_messages, clean_summary_text

__all__ = [
    'build_chart_series',
    'risk_summary',
    'build_summary_messages',
    'clean_summary_text',
]
