import math

from delivery_sim.sim.clock import MIN


def format_eta(seconds: float) -> str:
    if seconds <= 0:
        return "Arrivée !"
    m = math.floor(seconds / MIN)
    s = math.floor(seconds % MIN)
    if m < 1:
        return f"{s}s"
    return f"{m} min"
