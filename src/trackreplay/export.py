"""KML and GPX generation and parsing for recorded tracks."""

from __future__ import annotations

import re
import time
import xml.etree.ElementTree as ET
from collections.abc import Sequence
from datetime import UTC, datetime, timedelta
from pathlib import PurePath

from pydantic import ValidationError

from trackreplay._logging import get_logger
from trackreplay.constants import DEFAULT_TRACK_NAME
from trackreplay.exceptions import TrackParseError
from trackreplay.models.location import LocationSample
from trackreplay.models.track import Track

KML_NS = "http://www.opengis.net/kml/2.2"
GPX_NS = "http://www.topografix.com/GPX/1/1"
GPX_CREATOR = "trackreplay"

START_ICON = "http://maps.google.com/mapfiles/kml/paddle/grn-circle.png"
END_ICON = "http://maps.google.com/mapfiles/kml/paddle/red-circle.png"
TRACK_LINE_COLOR = "ff0000ff"
TRACK_LINE_WIDTH = 3

_XML_DECLARATION = '<?xml version="1.0" encoding="UTF-8"?>\n'
_EXTENSION_RE = re.compile(r"\.(kml|gpx)$", re.IGNORECASE)
_EPOCH = datetime(1970, 1, 1, tzinfo=UTC)


def _local(tag: str) -> str:
    return tag.rsplit("}", 1)[-1]


def _sub(parent: ET.Element, ns: str, tag: str, text: str | None = None, **attrib: str) -> ET.Element:
    el = ET.SubElement(parent, f"{{{ns}}}{tag}", attrib)
    if text is not None:
        el.text = text
    return el


def _serialize(root: ET.Element, ns: str) -> str:
    ET.register_namespace("", ns)
    ET.indent(root, space="  ")
    return _XML_DECLARATION + ET.tostring(root, encoding="unicode")


def _iso_utc(timestamp_ms: int) -> str:
    """ISO-8601 UTC with millisecond precision and a Z suffix."""
    dt = _EPOCH + timedelta(milliseconds=timestamp_ms)
    return dt.strftime("%Y-%m-%dT%H:%M:%S.") + f"{dt.microsecond // 1000:03d}Z"


def _human_time(timestamp_ms: int) -> str:
    return (_EPOCH + timedelta(milliseconds=timestamp_ms)).strftime("%Y-%m-%d %H:%M:%S UTC")


def _kml_coord(sample: LocationSample) -> str:
    return f"{sample.longitude},{sample.latitude},{sample.altitude or 0}"


# ── Generation ─────────────────────────────────────────────────────────────


def _kml_endpoint(document: ET.Element, label: str, verb: str, sample: LocationSample, icon: str) -> None:
    placemark = _sub(document, KML_NS, "Placemark")
    _sub(placemark, KML_NS, "name", label)
    lines = [
        f"{verb} at: {_human_time(sample.timestamp_ms)}",
        f"Accuracy: {round(sample.accuracy)}m" if sample.accuracy else "Accuracy: Unknown",
    ]
    if sample.altitude:
        lines.append(f"Altitude: {round(sample.altitude)}m")
    _sub(placemark, KML_NS, "description", "\n".join(lines))
    style = _sub(placemark, KML_NS, "Style")
    icon_style = _sub(style, KML_NS, "IconStyle")
    icon_el = _sub(icon_style, KML_NS, "Icon")
    _sub(icon_el, KML_NS, "href", icon)
    point = _sub(placemark, KML_NS, "Point")
    _sub(point, KML_NS, "coordinates", _kml_coord(sample))


def generate_kml(
    samples: Sequence[LocationSample],
    track_name: str = DEFAULT_TRACK_NAME,
    now: datetime | None = None,
) -> str:
    """Render samples as a KML document: the path plus start and end markers.

    Returns an empty string when there are no samples.
    """
    if not samples:
        return ""
    now = now or datetime.now(tz=UTC)

    root = ET.Element(f"{{{KML_NS}}}kml")
    document = _sub(root, KML_NS, "Document")
    _sub(document, KML_NS, "name", track_name)
    _sub(document, KML_NS, "description", f"GPS track recorded on {now:%Y-%m-%d}")

    style = _sub(document, KML_NS, "Style", id="trackStyle")
    line_style = _sub(style, KML_NS, "LineStyle")
    _sub(line_style, KML_NS, "color", TRACK_LINE_COLOR)
    _sub(line_style, KML_NS, "width", str(TRACK_LINE_WIDTH))

    line = _sub(document, KML_NS, "Placemark")
    _sub(line, KML_NS, "name", track_name)
    _sub(line, KML_NS, "styleUrl", "#trackStyle")
    line_string = _sub(line, KML_NS, "LineString")
    _sub(line_string, KML_NS, "tessellate", "1")
    _sub(line_string, KML_NS, "coordinates", " ".join(_kml_coord(s) for s in samples))

    _kml_endpoint(document, "Start Point", "Started", samples[0], START_ICON)
    if len(samples) > 1:
        _kml_endpoint(document, "End Point", "Ended", samples[-1], END_ICON)

    return _serialize(root, KML_NS)


def generate_gpx(samples: Sequence[LocationSample], track_name: str = DEFAULT_TRACK_NAME) -> str:
    """Render samples as a GPX 1.1 document with a single track segment.

    Returns an empty string when there are no samples.
    """
    if not samples:
        return ""

    root = ET.Element(f"{{{GPX_NS}}}gpx", {"version": "1.1", "creator": GPX_CREATOR})
    metadata = _sub(root, GPX_NS, "metadata")
    _sub(metadata, GPX_NS, "name", track_name)
    _sub(metadata, GPX_NS, "desc", f"GPS track recorded on {samples[0].recorded_at:%Y-%m-%d}")
    _sub(metadata, GPX_NS, "time", _iso_utc(samples[0].timestamp_ms))

    trk = _sub(root, GPX_NS, "trk")
    _sub(trk, GPX_NS, "name", track_name)
    segment = _sub(trk, GPX_NS, "trkseg")
    for sample in samples:
        point = _sub(segment, GPX_NS, "trkpt", lat=str(sample.latitude), lon=str(sample.longitude))
        if sample.altitude is not None:
            _sub(point, GPX_NS, "ele", str(sample.altitude))
        _sub(point, GPX_NS, "time", _iso_utc(sample.timestamp_ms))
        if sample.speed is not None:
            extensions = _sub(point, GPX_NS, "extensions")
            _sub(extensions, GPX_NS, "speed", str(sample.speed))

    return _serialize(root, GPX_NS)


# ── Parsing ────────────────────────────────────────────────────────────────


def _parse_root(content: str, kind: str) -> ET.Element:
    try:
        return ET.fromstring(content)
    except ET.ParseError as exc:
        raise TrackParseError(f"Invalid {kind} document: {exc}") from exc


def _child(el: ET.Element, name: str) -> ET.Element | None:
    return next((c for c in el if _local(c.tag) == name), None)


def _make_sample(**fields: object) -> LocationSample | None:
    try:
        return LocationSample.model_validate(fields)
    except ValidationError:
        return None


def parse_kml(content: str, base_timestamp_ms: int | None = None) -> list[LocationSample]:
    """Extract the first coordinate list of a KML document.

    KML coordinates carry no time, so sample *i* is stamped
    ``base_timestamp_ms + i * 1000``. Entries that are not valid coordinates are
    skipped.
    """
    root = _parse_root(content, "KML")
    base = base_timestamp_ms if base_timestamp_ms is not None else int(time.time() * 1000)

    coords = next((el for el in root.iter() if _local(el.tag) == "coordinates"), None)
    if coords is None or not coords.text:
        return []

    samples: list[LocationSample] = []
    for token in coords.text.split():
        parts = token.split(",")
        try:
            lon, lat = float(parts[0]), float(parts[1])
            alt = float(parts[2]) if len(parts) > 2 else 0.0
        except (ValueError, IndexError):
            continue
        sample = _make_sample(
            latitude=lat,
            longitude=lon,
            timestamp_ms=base + len(samples) * 1000,
            altitude=alt or None,
        )
        if sample is not None:
            samples.append(sample)
    return samples


def _parse_gpx_time(text: str | None) -> int | None:
    if not text:
        return None
    try:
        dt = datetime.fromisoformat(text.strip())
    except ValueError:
        return None
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=UTC)
    return (dt - _EPOCH) // timedelta(milliseconds=1)


def _float_or_none(el: ET.Element | None) -> float | None:
    if el is None or el.text is None:
        return None
    try:
        return float(el.text)
    except ValueError:
        return None


def parse_gpx(content: str, base_timestamp_ms: int | None = None) -> list[LocationSample]:
    """Extract every ``trkpt`` of a GPX document.

    Points without a readable ``time`` are stamped ``base_timestamp_ms + i * 1000``,
    where ``i`` counts the points kept so far.
    Points without a valid lat/lon are skipped.
    """
    root = _parse_root(content, "GPX")
    base = base_timestamp_ms if base_timestamp_ms is not None else int(time.time() * 1000)

    samples: list[LocationSample] = []
    for trkpt in (el for el in root.iter() if _local(el.tag) == "trkpt"):
        try:
            lat = float(trkpt.attrib["lat"])
            lon = float(trkpt.attrib["lon"])
        except (KeyError, ValueError):
            continue

        timestamp = _parse_gpx_time(getattr(_child(trkpt, "time"), "text", None))
        extensions = _child(trkpt, "extensions")
        sample = _make_sample(
            latitude=lat,
            longitude=lon,
            timestamp_ms=timestamp if timestamp is not None else base + len(samples) * 1000,
            altitude=_float_or_none(_child(trkpt, "ele")),
            speed=_float_or_none(_child(extensions, "speed")) if extensions is not None else None,
        )
        if sample is not None:
            samples.append(sample)
    return samples


def import_track(filename: str, content: str, now_ms: int | None = None) -> Track:
    """Build a complete Track from a KML or GPX file's contents."""
    now_ms = now_ms if now_ms is not None else int(time.time() * 1000)
    name = PurePath(filename).name
    lowered = name.lower()

    if lowered.endswith(".kml"):
        samples = parse_kml(content, base_timestamp_ms=now_ms)
    elif lowered.endswith(".gpx"):
        samples = parse_gpx(content, base_timestamp_ms=now_ms)
    else:
        raise TrackParseError(f"Unsupported track file type: {name!r} (expected .kml or .gpx)")

    if not samples:
        raise TrackParseError(f"No valid location data found in {name!r}")

    get_logger().info("Imported %d samples from %s", len(samples), name)
    return Track(
        id=f"imported_{now_ms}",
        name=f"Imported: {_EXTENSION_RE.sub('', name)}",
        samples=tuple(samples),
        created_at=samples[0].timestamp_ms,
        last_modified=now_ms,
        is_complete=True,
    )
