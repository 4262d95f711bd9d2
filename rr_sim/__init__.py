"""
Round-robin CPU scheduling simulator.

Replays a fixed workload under round robin with a decaying time quantum and
shortest-remaining-time selection, producing an event trace and a
waiting-time report.
"""

__all__ = ["cli"]
