"""
PredictView: live Bitcoin price/volume dashboard core.

Provides:
- Quote series model and quote sources (Supabase, CSV)
- VWMA calculation, indicator registry and multi-indicator evaluation
- Trend signal classification from fast/medium/slow VWMA values
- Chart series preparation and static rendering
"""
__version__ = "0.1.0"
