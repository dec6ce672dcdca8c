"""
Lunch picking core.

Responsibilities:
- Validate raw store rows into typed restaurant records.
- Pick a restaurant at random, weighted towards the least picked.
- Filter, sort and paginate the list for the Data Table view.
- Allow a single bulk reset of pick counts per session.
"""
