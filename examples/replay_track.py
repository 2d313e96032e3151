"""Replay a KML/GPX file in real time on an asyncio event loop.

Usage:
    python examples/replay_track.py path/to/track.gpx [speed]
"""

import asyncio
import sys
from pathlib import Path

from trackreplay import AsyncioScheduler, PlaybackConfig, PlaybackEngine, import_track
from trackreplay.constants import EXTENDED_SPEEDS
from trackreplay.formatters import format_distance, format_elapsed, format_speed_kmh


async def replay(path: Path, speed: float) -> None:
    track = import_track(path.name, path.read_text(encoding="utf-8"))
    print(f"{track.name}: {len(track)} fixes, {format_distance(track.total_distance)}")

    finished = asyncio.Event()
    last_index = len(track) - 1
    config = PlaybackConfig(speeds=EXTENDED_SPEEDS)

    with PlaybackEngine(track, scheduler=AsyncioScheduler(), config=config) as engine:

        def render(update) -> None:
            snap = update.snapshot
            speed_text = format_speed_kmh(snap.sample.speed if snap.sample else None)
            print(
                f"\r{snap.progress:6.1%}  {format_elapsed(snap.time_elapsed_seconds):>8}  "
                f"{format_distance(snap.distance_traveled_meters):>10}  {speed_text:>9}",
                end="",
                flush=True,
            )
            if snap.index == last_index and not update.cursor.is_playing:
                finished.set()

        engine.subscribe(render)
        engine.set_speed(speed)
        engine.play()
        if engine.is_playing:
            await finished.wait()
    print()


def main() -> None:
    if len(sys.argv) < 2:
        print(__doc__)
        raise SystemExit(2)
    speed = float(sys.argv[2]) if len(sys.argv) > 2 else 10.0
    asyncio.run(replay(Path(sys.argv[1]), speed))


if __name__ == "__main__":
    main()
