"""Basic usage: record a short track, store it, export it and replay it."""

from trackreplay import (
    LocationSample,
    LocationService,
    ManualScheduler,
    MemoryKeyValueStore,
    PlaybackEngine,
    TrackRecorder,
    TrackStorage,
    generate_gpx,
)
from trackreplay.formatters import format_distance, format_elapsed


def main() -> None:
    storage = TrackStorage(MemoryKeyValueStore())
    service = LocationService()
    recorder = TrackRecorder(storage, service)

    # Simulate a GPS feed heading north-east, one fix every 5 seconds
    print("=== Recording ===")
    started = recorder.start("Lunch walk")
    for i in range(12):
        service.publish(
            LocationSample(
                latitude=52.52 + i * 0.0004,
                longitude=13.405 + i * 0.0003,
                timestamp_ms=started.created_at + i * 5000,
                speed=1.4,
            )
        )
    track = recorder.stop()
    if track is None:
        print("  Nothing recorded.")
        return
    print(f"  {track.name}: {len(track)} fixes, {format_distance(track.total_distance)}, "
          f"{format_elapsed(track.duration)}")

    print("\n=== GPX export (first lines) ===")
    for line in generate_gpx(track.samples, track.name).splitlines()[:6]:
        print(f"  {line}")

    print("\n=== Playback at 8x ===")
    scheduler = ManualScheduler()
    with PlaybackEngine(track, scheduler=scheduler) as engine:
        engine.subscribe(
            lambda u: print(
                f"  #{u.snapshot.index:>2} {u.snapshot.progress:5.0%} "
                f"{format_elapsed(u.snapshot.time_elapsed_seconds)} "
                f"{format_distance(u.snapshot.distance_traveled_meters)}"
                f"{'' if u.cursor.is_playing else '  (stopped)'}"
            )
        )
        engine.set_speed(8)
        engine.play()
        scheduler.advance(10.0)


if __name__ == "__main__":
    main()
