"""Lab occupancy sampling and utilization rollups.

Everything below ``service`` is pure: it works on intervals that were already
fetched and a configuration snapshot, and never touches the database.
"""
