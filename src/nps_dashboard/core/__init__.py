"""
Core data and aggregation layer.

This package contains:
- data_loader: read the survey export and map raw headers to SurveyRecords
- aggregation: filtering, distinct-value counts and multi-value tallies
- views: per-filter dashboard snapshot and chart-ready frames
"""
