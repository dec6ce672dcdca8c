"""
Remote restaurant store.

Responsibilities:
- Read Supabase endpoint and key from the environment.
- Talk to the PostgREST ``restaurants`` table (read all, update counters).
- Retry the initial load with an increasing delay.
"""
