"""
Typed GeoJSON objects and bounding boxes that cross the antimeridian.
"""

import importlib.metadata
from pathlib import Path


__version__: str = importlib.metadata.version("aio-geojson")

# we add this to all modules for pdoc;
# see https://pdoc.dev/docs/pdoc.html#use-numpydoc-or-google-docstrings
__docformat__ = "google"

# we also use __all__ in all modules for pdoc; this lets us control the order
__all__ = (
    "__version__",
    "BoundingBox",
    "Feature",
    "FeatureCollection",
    "GeoJsonError",
    "from_dict",
    "parse",
    "parse_file",
    "write",
    "write_file",
    "bbox",
    "codec",
    "coords",
    "error",
    "feature",
    "geometry",
    "spatial",
    "wfs",
    "wkt",
)

from .bbox import BoundingBox
from .codec import from_dict, parse, parse_file, write, write_file
from .error import GeoJsonError
from .feature import Feature, FeatureCollection


# extend the module's docstring
for filename in ("usage.md",):
    __doc__ += "\n<br>\n"
    __doc__ += (Path(__file__).parent / "doc" / filename).read_text(encoding="utf-8")
