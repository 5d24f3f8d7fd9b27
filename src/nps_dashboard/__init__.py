"""
Internal NPS survey dashboard.

- config: paths, schema headers and filter constants
- core: survey export loading and the record aggregation engine
- ui: Streamlit presentation layer
"""
