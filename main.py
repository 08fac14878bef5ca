# main.py
import asyncio
import sys

from delivery_sim.app.build import build_async
from delivery_sim.io.config import load_scenario

# 26 boulevard Maxime Gorki, Villejuif
DEFAULT_SCENARIO = {
    "name": "villejuif",
    "run_id": "local",
    "sim": {"seed": 42, "tick_s": 5.0},
    "route": {"kind": "road"},
    "trip": {"dest": (48.7925, 2.3634)},
}


async def run(cfg) -> None:
    app = await build_async(cfg)
    app.send("Quel est le code svp", at=30.0)
    app.run()
    for msg in app.state.chat:
        print(f"[{app.clock.hhmm(msg.t)}] {msg.sender:>8}: {msg.text}")
    print(app.eta_label())


if __name__ == "__main__":
    cfg = load_scenario(sys.argv[1]) if len(sys.argv) > 1 else DEFAULT_SCENARIO
    asyncio.run(run(cfg))
