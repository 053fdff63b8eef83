"""
GPX track writer.

Serializes track points as a single-track, single-segment GPX 1.1 document
for map rendering. Coordinates and elevation are written with repr() so they
parse back to exactly the same floats.
"""

import xml.etree.ElementTree as ET
from collections.abc import Sequence

from app.models.activity import TrackPoint


GPX_VERSION = "1.1"
GPX_CREATOR = "OwnPath"
XML_DECLARATION = '<?xml version="1.0" encoding="UTF-8"?>'


def build_gpx(points: Sequence[TrackPoint]) -> str:
    """
    Build a GPX document from track points.

    Returns an empty string (not an empty document) when there are no points;
    consumers treat "" as "activity has no track".
    """
    if not points:
        return ""

    gpx = ET.Element("gpx", version=GPX_VERSION, creator=GPX_CREATOR)
    trkseg = ET.SubElement(ET.SubElement(gpx, "trk"), "trkseg")
    for pt in points:
        trkpt = ET.SubElement(trkseg, "trkpt", lat=repr(pt.lat), lon=repr(pt.lon))
        ET.SubElement(trkpt, "ele").text = repr(pt.ele)

    return XML_DECLARATION + ET.tostring(gpx, encoding="unicode")

