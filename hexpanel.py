"""
Hex Panel Generator

A single-file Python CLI tool that lays out decorative hexagon motifs on a
beehive grid and exports them as SVG cut paths for laser-cut panels. Shapes
are composed from wedges with shapely boolean operations; the drawing is
serialised with svgwrite and can optionally be previewed as a PNG via Pillow.

Usage:
    python hexpanel.py --debug
    python hexpanel.py --width 740 --height 320 --radius 60 --shape windowed
    python hexpanel.py --drawing sample --preview sample.png
    python hexpanel.py --import_settings settings.json
    python hexpanel.py --export_settings settings.json
"""

import argparse
import json
import math
import os
import re
import sys
from typing import Dict, Iterable, Iterator, List, Optional, Sequence, Tuple, Union

import shapely.affinity as sa
import shapely.geometry as sg
import svgwrite
from PIL import Image, ImageColor, ImageDraw


Point = Tuple[float, float]
Color = Tuple[int, int, int]

# Snapping grid for boolean operations, keeps collinear wedge edges from
# leaving slivers behind.
_GRID_SIZE: float = 1e-9


# ---------------------------------------------------------------------------
# HexagonGeometry
# ---------------------------------------------------------------------------
class HexagonGeometry:
    """Vertex computation for pointy-top regular hexagons.

    The first vertex sits at 30 degrees from the centre so that a wedge
    pointing along +x (spanning -30 to +30 degrees) is exactly one sixth
    of the hexagon.

    Attributes:
        circumradius: The circumradius (centre-to-vertex distance).
    """

    def __init__(self, circumradius: float) -> None:
        """Initialise hexagon geometry with a given circumradius.

        Args:
            circumradius: The circumradius R of the hexagon.
        """
        self._circumradius: float = circumradius

    @property
    def circumradius(self) -> float:
        """Return the circumradius R."""
        return self._circumradius

    @property
    def inradius(self) -> float:
        """Return the inradius (apothem) r = R * sqrt(3)/2."""
        return self._circumradius * math.sqrt(3) / 2.0

    @property
    def side_length(self) -> float:
        """Return the side length, 2R * sin(30) which equals R."""
        return 2.0 * self._circumradius * math.sin(math.pi / 6.0)

    def vertices(self, cx: float, cy: float) -> List[Point]:
        """Compute the 6 vertices of a pointy-top hexagon centred at (cx, cy).

        Vertices start at 30 degrees and proceed in increasing angle at
        60-degree intervals.

        Args:
            cx: X coordinate of the hexagon centre.
            cy: Y coordinate of the hexagon centre.

        Returns:
            A list of 6 (x, y) tuples representing the vertex positions.
        """
        R = self._circumradius
        return [
            (cx + R * math.cos(math.radians(30 + 60 * k)),
             cy + R * math.sin(math.radians(30 + 60 * k)))
            for k in range(6)
        ]


# ---------------------------------------------------------------------------
# BeeHiveTiler
# ---------------------------------------------------------------------------
class BeeHiveTiler:
    """Computes tile centres for a beehive packing inside rectangular bounds.

    Rows are grown outward from the centre of the bounds, which gives the
    most balanced tiling for the widest range of bounds. Every other row is
    staggered by half a horizontal pitch.

    In strict mode (the default) a centre is accepted only when the square
    bounding box of its tile lies fully inside the bounds. In loose mode the
    centre itself only has to be inside, so tiles may overhang the border
    and are expected to be clipped by the caller.

    Attributes:
        radius: Tile circumradius.
        loose: Whether loose containment is used.
    """

    def __init__(self, radius: float, loose: bool = False) -> None:
        """Initialise the tiler.

        Args:
            radius: Tile circumradius, must be > 0.
            loose: Accept tiles whose centre is inside the bounds even if
                the tile itself overhangs.

        Raises:
            ValueError: If radius is not positive.
        """
        if not radius > 0:
            raise ValueError(f"Tile radius must be positive, got {radius}")
        self._radius: float = radius
        self._loose: bool = loose

    @property
    def radius(self) -> float:
        """Return the tile circumradius."""
        return self._radius

    @property
    def loose(self) -> bool:
        """Return whether loose containment is in effect."""
        return self._loose

    @property
    def stagger_offset(self) -> Point:
        """Return the offset from a tile to its neighbour in the next row.

        This is the vector (0, R) rotated -60 degrees about the origin, plus
        (0, R), which works out to (R * sqrt(3)/2, 1.5R).
        """
        plumb = sa.rotate(sg.Point(0, self._radius), -60, origin=(0, 0))
        return (plumb.x, plumb.y + self._radius)

    def is_contained(self, center: Point, container: sg.Polygon) -> bool:
        """Check whether a tile centred at `center` fits the container.

        Args:
            center: Candidate tile centre.
            container: The bounds rectangle.

        Returns:
            True if the tile is accepted under the current containment mode.
        """
        cx, cy = center
        if self._loose:
            return container.covers(sg.Point(cx, cy))
        r = self._radius
        return container.covers(sg.box(cx - r, cy - r, cx + r, cy + r))

    def generate(self, bounds: Tuple[float, float]) -> List[Point]:
        """Generate tile centres for the given bounds.

        Args:
            bounds: (width, height) of the area to tile, with its origin
                at (0, 0).

        Returns:
            A list of (x, y) tile centres. When not even the centre tile
            fits, the list holds just the centre of the bounds.
        """
        width, height = bounds
        container = sg.box(0, 0, width, height)
        sx, sy = self.stagger_offset
        dx, dy = 2.0 * sx, 2.0 * sy
        center = (width / 2.0, height / 2.0)

        center_line = self._walk_row(center, dx, container)
        # may only be one point for small tilings
        if not center_line:
            return [center]
        points: List[Point] = list(center_line)

        stagger_line = self._walk_row((center[0] + sx, center[1] + sy), dx, container)

        # The centre line is symmetric about the middle, so one walk covers
        # rows both above and below it.
        x0, y0 = center_line[0]
        offset = dy
        while self.is_contained((x0, y0 + offset), container):
            points.extend(self._shift(center_line, offset))
            points.extend(self._shift(center_line, -offset))
            offset += dy

        if stagger_line:
            x0, y0 = stagger_line[0]
            offset = 0.0
            while self.is_contained((x0, y0 + offset), container):
                points.extend(self._shift(stagger_line, offset))
                offset += dy
            # start one row below so the template row is not doubled up
            offset = -dy
            while self.is_contained((x0, y0 + offset), container):
                points.extend(self._shift(stagger_line, offset))
                offset -= dy

        return points

    def _walk_row(self, start: Point, dx: float, container: sg.Polygon) -> List[Point]:
        """Grow a row from `start` to the right, then to the left."""
        row: List[Point] = []
        at = start
        while self.is_contained(at, container):
            row.append(at)
            at = (at[0] + dx, at[1])
        at = (start[0] - dx, start[1])
        while self.is_contained(at, container):
            row.append(at)
            at = (at[0] - dx, at[1])
        return row

    @staticmethod
    def _shift(row: Sequence[Point], dy: float) -> List[Point]:
        return [(x, y + dy) for x, y in row]


def generate_beehive_points(
    bounds: Tuple[float, float],
    radius: float,
    loose: bool = False,
) -> List[Point]:
    """Beehive tile centres for `bounds`; see BeeHiveTiler.generate."""
    return BeeHiveTiler(radius, loose=loose).generate(bounds)


# ---------------------------------------------------------------------------
# ShapeGroup
# ---------------------------------------------------------------------------
class ShapeGroup:
    """An ordered, immutable collection of paths and nested groups.

    Children are shapely polygons (or multipolygons) and other ShapeGroups.
    Transforms never modify the group; they return a new one. When the
    origin is "center", the group turns or scales about the centre of its
    combined bounding box, the same way a single path does.
    """

    def __init__(self, children: Iterable = ()) -> None:
        self._children: tuple = tuple(children)

    @classmethod
    def empty(cls) -> "ShapeGroup":
        """Return a group with no children."""
        return cls(())

    @property
    def children(self) -> tuple:
        """Return the direct children in drawing order."""
        return self._children

    def __len__(self) -> int:
        return len(self._children)

    def __iter__(self) -> Iterator:
        return iter(self._children)

    def flatten(self) -> List:
        """Return all leaf geometries, depth first.

        Returns:
            A list of shapely geometries.
        """
        leaves: List = []
        for child in self._children:
            if isinstance(child, ShapeGroup):
                leaves.extend(child.flatten())
            else:
                leaves.append(child)
        return leaves

    @property
    def bounds(self) -> Tuple[float, float, float, float]:
        """Return (minx, miny, maxx, maxy) over every leaf."""
        return sg.GeometryCollection(self.flatten()).bounds

    def rotate(self, angle: float, origin: Union[str, Point] = "center") -> "ShapeGroup":
        """Rotate every child by `angle` degrees about `origin`.

        Args:
            angle: Rotation in degrees, positive from +x towards +y.
            origin: "center" for the group's bounding box centre, or an
                (x, y) pivot.

        Returns:
            The rotated group.
        """
        pivot = self._pivot(origin)
        return ShapeGroup(
            child.rotate(angle, pivot) if isinstance(child, ShapeGroup)
            else sa.rotate(child, angle, origin=pivot)
            for child in self._children
        )

    def scale(self, factor: float, origin: Union[str, Point] = "center") -> "ShapeGroup":
        """Uniformly scale every child by `factor` about `origin`.

        Args:
            factor: Scale factor.
            origin: "center" for the group's bounding box centre, or an
                (x, y) pivot.

        Returns:
            The scaled group.
        """
        pivot = self._pivot(origin)
        return ShapeGroup(
            child.scale(factor, pivot) if isinstance(child, ShapeGroup)
            else sa.scale(child, factor, factor, origin=pivot)
            for child in self._children
        )

    def translate(self, dx: float, dy: float) -> "ShapeGroup":
        """Return the group moved by (dx, dy)."""
        return ShapeGroup(
            child.translate(dx, dy) if isinstance(child, ShapeGroup)
            else sa.translate(child, dx, dy)
            for child in self._children
        )

    def clip(self, region: sg.Polygon) -> "ShapeGroup":
        """Return the group with every leaf intersected with `region`."""
        return ShapeGroup(
            child.clip(region) if isinstance(child, ShapeGroup)
            else child.intersection(region)
            for child in self._children
        )

    def _pivot(self, origin: Union[str, Point]) -> Point:
        if isinstance(origin, str):
            if origin != "center":
                raise ValueError(f"Unsupported origin: '{origin}'")
            minx, miny, maxx, maxy = self.bounds
            return ((minx + maxx) / 2.0, (miny + maxy) / 2.0)
        return origin

    def __repr__(self) -> str:
        return f"<ShapeGroup children={len(self._children)}>"


Shape = Union[sg.Polygon, sg.MultiPolygon, ShapeGroup]


def iter_polygons(shape) -> Iterator[sg.Polygon]:
    """Yield every non-empty polygon contained in a shape.

    Groups, multipolygons and geometry collections are walked recursively;
    points and lines left over from clipping are skipped.
    """
    if isinstance(shape, ShapeGroup):
        for child in shape:
            yield from iter_polygons(child)
    elif isinstance(shape, sg.Polygon):
        if not shape.is_empty:
            yield shape
    elif hasattr(shape, "geoms"):
        for part in shape.geoms:
            yield from iter_polygons(part)


def shape_rings(shape) -> List[List[Point]]:
    """Return every ring (exteriors and holes) of a shape as open point lists."""
    rings: List[List[Point]] = []
    for poly in iter_polygons(shape):
        for ring in [poly.exterior, *poly.interiors]:
            rings.append(list(ring.coords)[:-1])
    return rings


def clip_shape(shape, region: sg.Polygon):
    """Intersect a path or group with `region`."""
    if isinstance(shape, ShapeGroup):
        return shape.clip(region)
    return shape.intersection(region)


# ---------------------------------------------------------------------------
# Path operations
# ---------------------------------------------------------------------------
def subtract(path, cutter):
    """Boolean difference `path - cutter`.

    A cutter (or path) without area leaves the path unchanged. Slivers
    thinner than the snapping grid are dropped, so a clean cut yields a
    single Polygon rather than a MultiPolygon.
    """
    if path.is_empty or path.area == 0 or cutter.is_empty or cutter.area == 0:
        return path
    result = path.difference(cutter, grid_size=_GRID_SIZE)
    if isinstance(result, sg.MultiPolygon):
        min_area = path.area * 1e-9
        parts = [p for p in result.geoms if p.area > min_area]
        if len(parts) == 1:
            return parts[0]
        return sg.MultiPolygon(parts)
    return result


def smooth_catmull_rom(path, factor: float = 0.8, samples: int = 8):
    """Round off the corners of a path with a closed Catmull-Rom spline.

    The spline passes through every vertex of each ring. `factor` is the
    knot parameterisation exponent: 0 is uniform, 0.5 centripetal and 1
    chordal. Each segment is flattened into `samples` points.

    Args:
        path: A Polygon or MultiPolygon.
        factor: Knot parameterisation exponent.
        samples: Points emitted per segment.

    Returns:
        The smoothed path, of the same kind as the input.
    """
    if isinstance(path, sg.MultiPolygon):
        return sg.MultiPolygon([smooth_catmull_rom(p, factor, samples) for p in path.geoms])
    if path.is_empty or path.area == 0:
        return path
    exterior = _catmull_rom_ring(list(path.exterior.coords)[:-1], factor, samples)
    holes = [_catmull_rom_ring(list(r.coords)[:-1], factor, samples) for r in path.interiors]
    return sg.Polygon(exterior, holes)


def _catmull_rom_ring(coords: List[Point], factor: float, samples: int) -> List[Point]:
    # zero-length segments have no usable knot interval
    ring: List[Point] = []
    for p in coords:
        if not ring or p != ring[-1]:
            ring.append(p)
    if len(ring) > 1 and ring[0] == ring[-1]:
        ring.pop()
    if len(ring) < 3:
        return coords

    n = len(ring)
    out: List[Point] = []
    for i in range(n):
        p0, p1, p2, p3 = ring[i - 1], ring[i], ring[(i + 1) % n], ring[(i + 2) % n]
        t0 = 0.0
        t1 = t0 + _knot(p0, p1, factor)
        t2 = t1 + _knot(p1, p2, factor)
        t3 = t2 + _knot(p2, p3, factor)
        out.append(p1)
        for k in range(1, samples):
            t = t1 + (t2 - t1) * k / samples
            # Barry-Goldman pyramid
            a1 = _lerp(p0, p1, t0, t1, t)
            a2 = _lerp(p1, p2, t1, t2, t)
            a3 = _lerp(p2, p3, t2, t3, t)
            b1 = _lerp(a1, a2, t0, t2, t)
            b2 = _lerp(a2, a3, t1, t3, t)
            out.append(_lerp(b1, b2, t1, t2, t))
    return out


def _knot(a: Point, b: Point, factor: float) -> float:
    return max(math.hypot(b[0] - a[0], b[1] - a[1]) ** factor, 1e-12)


def _lerp(a: Point, b: Point, ta: float, tb: float, t: float) -> Point:
    u = (t - ta) / (tb - ta)
    return (a[0] + (b[0] - a[0]) * u, a[1] + (b[1] - a[1]) * u)


def _polar(length: float, degrees: float) -> Point:
    return (length * math.cos(math.radians(degrees)),
            length * math.sin(math.radians(degrees)))


# ---------------------------------------------------------------------------
# Shape builders
# ---------------------------------------------------------------------------
def hexagon(center: Point, radius: float) -> sg.Polygon:
    """A simple pointy-top hexagon at a point with a circumradius."""
    return sg.Polygon(HexagonGeometry(radius).vertices(*center))


def hexagon_wedge(center: Point, radius: float = 1.0) -> sg.Polygon:
    """A 60 degree pie slice of a hexagon, pointing right.

    The exterior runs centre, upper corner, lower corner and back to the
    centre, the corners being (radius, 0) turned -30 and +30 degrees.

    Args:
        center: Apex of the wedge.
        radius: Distance from the apex to the two outer corners.

    Returns:
        A triangular Polygon.
    """
    cx, cy = center
    seed = sg.Point(cx + radius, cy)
    top_right = sa.rotate(seed, -30, origin=(cx, cy))
    bottom_right = sa.rotate(seed, 30, origin=(cx, cy))
    return sg.Polygon([
        (cx, cy),
        (top_right.x, top_right.y),
        (bottom_right.x, bottom_right.y),
        (cx, cy),
    ])


def hexagon_trapezoidal_wedge(
    center: Point,
    radius: float = 1.0,
    percent_to_clip: float = 0.5,
):
    """A hexagon wedge with its tip cut off by a smaller wedge.

    Args:
        center: Apex of the uncut wedge.
        radius: Outer radius.
        percent_to_clip: Radius of the removed tip, as a fraction of
            `radius`.

    Returns:
        A trapezoidal Polygon.
    """
    full_wedge = hexagon_wedge(center, radius)
    hat = hexagon_wedge(center, radius * percent_to_clip)
    return subtract(full_wedge, hat)


def hexagon_petal(center: Point, radius: float = 1.0, scale: float = 1.0):
    """A single rounded petal, drawn to the right of `center`.

    The wedge is scaled about its own bounding box centre, a thin stem
    notch is cut along the centre line, and the result is smoothed.
    """
    cx, cy = center
    full_wedge = sa.scale(hexagon_wedge(center, radius), scale, scale, origin="center")
    stem = sg.box(cx, cy - radius / 20.0, cx + radius * 0.75, cy + radius / 20.0)
    petal = subtract(full_wedge, stem)
    return smooth_catmull_rom(petal, factor=0.8)


def _ring_of_six(path, center: Point, keep: float) -> List:
    # each copy shrinks about its own centre, which opens up the frame gaps
    return [
        sa.scale(sa.rotate(path, 60 * i, origin=center), keep, keep, origin="center")
        for i in range(6)
    ]


def windowed_hexagon(
    center: Point,
    radius: float = 1.0,
    percent_to_clip: float = 0.5,
    percent_for_framing: float = 0.2,
) -> ShapeGroup:
    """A windowed hexagon: a centre hexagon ringed by six trapezoidal panes.

    The exterior of the containing hexagon is implied and not drawn.

    Args:
        center: Centre of the hexagon.
        radius: Outer radius of the panes.
        percent_to_clip: Radius of the centre window, as a fraction of
            `radius`.
        percent_for_framing: How much each piece shrinks to leave frame
            material between them.

    Returns:
        A ShapeGroup of 7 paths, the window first.
    """
    keep = 1 - percent_for_framing
    window = sa.scale(hexagon(center, radius * percent_to_clip), keep, keep, origin="center")
    wedge = hexagon_trapezoidal_wedge(center, radius, percent_to_clip)
    return ShapeGroup([window] + _ring_of_six(wedge, center, keep))


def six_petal_flower_hexagon(
    center: Point,
    radius: float = 1.0,
    percent_to_clip: float = 0.5,
    percent_for_framing: float = 0.2,
) -> ShapeGroup:
    """A six petal flower cutout.

    `percent_to_clip` is accepted so the signature matches
    windowed_hexagon, but petals have no clipped tip and ignore it.
    The exterior of the containing hexagon is implied and not drawn.

    Returns:
        A ShapeGroup of 6 petals.
    """
    keep = 1 - percent_for_framing
    petal = hexagon_petal(center, radius, keep)
    return ShapeGroup(_ring_of_six(petal, center, keep))


def parallelogram_wedge(
    center: Point,
    radius: float = 1.0,
    frame_width: float = 0.0,
) -> ShapeGroup:
    """One third of a hexagon, cut into two parallel strips.

    The third is the rhombus spanned from `center` by one side running
    towards -30 degrees and one towards 90 degrees. It is split across
    the 90 degree side into two congruent parallelograms separated by
    a gap of perpendicular width `frame_width`.

    Args:
        center: Centre of the hexagon the rhombus belongs to.
        radius: Hexagon circumradius.
        frame_width: Perpendicular width of the gap between the strips.

    Returns:
        A ShapeGroup of 2 parallelograms.
    """
    cx, cy = center
    side = HexagonGeometry(radius).side_length
    ax, ay = _polar(side, -30)
    ux, uy = _polar(1.0, 90)
    # sides meet at 120 degrees, so the gap measured along them is longer
    gap = frame_width / math.sin(math.radians(60))
    strip = (side - gap) / 2.0

    def parallelogram(start: float) -> sg.Polygon:
        ox, oy = cx + ux * start, cy + uy * start
        hx, hy = ux * strip, uy * strip
        return sg.Polygon([
            (ox, oy),
            (ox + ax, oy + ay),
            (ox + ax + hx, oy + ay + hy),
            (ox + hx, oy + hy),
        ])

    return ShapeGroup([parallelogram(0.0), parallelogram(strip + gap)])


def parallelogram_hexagon(
    center: Point,
    radius: float = 1.0,
    frame_width: float = 0.0,
    show_surround: bool = False,
) -> ShapeGroup:
    """Three parallelogram wedges 120 degrees apart, tumbling-block style.

    Args:
        center: Centre of the hexagon.
        radius: Hexagon circumradius.
        frame_width: Gap inside each wedge, see parallelogram_wedge.
        show_surround: Also draw the enclosing hexagon outline.

    Returns:
        A ShapeGroup of 3 wedge groups, plus the surround when requested.
    """
    wedge = parallelogram_wedge(center, radius, frame_width)
    children: List = [wedge.rotate(120 * i, center) for i in range(3)]
    if show_surround:
        children.append(hexagon(center, radius))
    return ShapeGroup(children)


# ---------------------------------------------------------------------------
# ColorParser
# ---------------------------------------------------------------------------
class ColorParser:
    """Parses color specifications from multiple string formats into RGB tuples.

    Supports CSS named colours, hex codes (#RGB, #RRGGBB), and RGB
    comma-separated tuples (e.g. '255,128,0').
    """

    def parse(self, color_str: str) -> Color:
        """Parse a color string into an (R, G, B) tuple.

        Args:
            color_str: The color specification string.

        Returns:
            An (R, G, B) tuple of integers in [0, 255].

        Raises:
            ValueError: If the color string cannot be parsed.
        """
        s = color_str.strip()

        if "," in s:
            return self._parse_rgb_tuple(s)

        try:
            rgb = ImageColor.getrgb(s)
            return (rgb[0], rgb[1], rgb[2])
        except (ValueError, AttributeError):
            raise ValueError(f"Invalid color specification: '{color_str}'")

    def _parse_rgb_tuple(self, s: str) -> Color:
        """Parse a comma-separated RGB string like '255,128,0'.

        Raises:
            ValueError: If parsing fails or values are out of range.
        """
        parts = [p.strip() for p in s.split(",")]
        if len(parts) != 3:
            raise ValueError(f"RGB tuple must have 3 components, got {len(parts)}: '{s}'")
        try:
            values = tuple(int(p) for p in parts)
        except ValueError:
            raise ValueError(f"RGB components must be integers: '{s}'")
        for v in values:
            if v < 0 or v > 255:
                raise ValueError(f"RGB values must be in [0, 255], got {v}: '{s}'")
        return (values[0], values[1], values[2])


# ---------------------------------------------------------------------------
# Scene
# ---------------------------------------------------------------------------
class Scene:
    """The shapes of one drawing, in paint order, each with a stroke colour.

    Attributes:
        width: Canvas width.
        height: Canvas height.
    """

    def __init__(self, width: float, height: float) -> None:
        self._width: float = width
        self._height: float = height
        self._items: List[Tuple[Shape, Color]] = []

    @property
    def width(self) -> float:
        return self._width

    @property
    def height(self) -> float:
        return self._height

    @property
    def items(self) -> List[Tuple[Shape, Color]]:
        """Return the (shape, colour) pairs in paint order."""
        return list(self._items)

    def add(self, shape: Shape, color: Color) -> None:
        """Append a shape stroked in `color`."""
        self._items.append((shape, color))

    def path_count(self) -> int:
        """Return the number of rings that will be emitted as paths."""
        return sum(len(shape_rings(shape)) for shape, _ in self._items)


# ---------------------------------------------------------------------------
# DrawingBuilder
# ---------------------------------------------------------------------------
class DrawingBuilder:
    """Builds the available drawings as fresh Scenes.

    Every call starts from an empty scene, so redrawing never shows
    leftovers of a previous build.
    """

    DRAWINGS: Tuple[str, ...] = ("side_panel", "sample")
    SHAPES: Tuple[str, ...] = (
        "flower", "windowed", "hexagon", "wedge", "trapezoid", "petal", "parallelogram",
    )

    def __init__(self, color_parser: Optional[ColorParser] = None) -> None:
        self._colors = color_parser or ColorParser()

    def build_tile(
        self,
        shape: str,
        at: Point,
        radius: float,
        clip: float = 0.6,
        framing: float = 0.2,
        frame_width: float = 4.0,
        surround: bool = False,
    ) -> Shape:
        """Build one motif of the named kind at a tile centre.

        Args:
            shape: One of SHAPES.
            at: Tile centre.
            radius: Motif radius.
            clip: percent_to_clip for trapezoid, windowed and flower.
            framing: percent_for_framing for windowed, flower and petal.
            frame_width: Strip gap for parallelogram.
            surround: Whether parallelogram draws its surround.

        Returns:
            The motif as a path or group.

        Raises:
            ValueError: If the shape name is unknown.
        """
        if shape == "flower":
            return six_petal_flower_hexagon(at, radius, clip, framing)
        if shape == "windowed":
            return windowed_hexagon(at, radius, clip, framing)
        if shape == "hexagon":
            return hexagon(at, radius)
        if shape == "wedge":
            return hexagon_wedge(at, radius)
        if shape == "trapezoid":
            return hexagon_trapezoidal_wedge(at, radius, clip)
        if shape == "petal":
            return hexagon_petal(at, radius, 1 - framing)
        if shape == "parallelogram":
            return parallelogram_hexagon(at, radius, frame_width, surround)
        raise ValueError(
            f"Unknown shape '{shape}'. Must be one of: {', '.join(self.SHAPES)}"
        )

    def side_panel(
        self,
        width: float = 740,
        height: float = 320,
        radius: float = 60,
        border: float = 1,
        shape: str = "flower",
        clip: float = 0.6,
        framing: float = 0.2,
        frame_width: float = 4.0,
        surround: bool = False,
        loose: bool = False,
        color_shape: Color = (0, 128, 0),
        color_frame: Color = (255, 0, 0),
    ) -> Scene:
        """Tile a panel with motifs on a beehive grid, inside a cut-out frame.

        Each motif is drawn `border` smaller than the tile radius. In loose
        mode overhanging motifs are clipped to the frame.

        Returns:
            The finished Scene, frame last.
        """
        scene = Scene(width, height)
        frame = sg.box(0, 0, width, height)
        for at in generate_beehive_points((width, height), radius, loose=loose):
            tile = self.build_tile(shape, at, radius - border, clip, framing,
                                   frame_width, surround)
            if loose:
                tile = clip_shape(tile, frame)
            scene.add(tile, color_shape)
        scene.add(frame, color_frame)
        return scene

    def sample(self, width: float = 740, height: float = 320) -> Scene:
        """A demo sheet showing the basic building blocks."""
        black = self._colors.parse("black")
        green = self._colors.parse("green")
        blue = self._colors.parse("blue")
        red = self._colors.parse("red")

        scene = Scene(width, height)
        center = (50.0, 50.0)
        radius = 25.0

        circle = sg.Point(center).buffer(radius)
        scene.add(circle, black)
        scene.add(hexagon(center, radius), black)
        scene.add(hexagon_wedge(center, radius), green)
        trap = hexagon_trapezoidal_wedge(center, radius, 0.5)
        scene.add(sa.scale(trap, 0.75, 0.75, origin="center"), blue)

        # windowgon!
        scene.add(windowed_hexagon((200.0, 200.0), 25), black)

        # a copy of the circle, moved to (100, 100)
        minx, miny, maxx, maxy = circle.bounds
        copy = sa.translate(circle, 100 - (minx + maxx) / 2.0, 100 - (miny + maxy) / 2.0)
        scene.add(copy, red)
        return scene

    def build(self, name: str, **kwargs) -> Scene:
        """Build a drawing by name.

        Raises:
            ValueError: If the drawing name is unknown.
        """
        if name == "side_panel":
            return self.side_panel(**kwargs)
        if name == "sample":
            return self.sample(kwargs.get("width", 740), kwargs.get("height", 320))
        raise ValueError(
            f"Unknown drawing '{name}'. Must be one of: {', '.join(self.DRAWINGS)}"
        )


# ---------------------------------------------------------------------------
# SvgExporter
# ---------------------------------------------------------------------------
class SvgExporter:
    """Serialises a Scene to SVG with svgwrite.

    Every ring becomes its own stroked, unfilled polygon, which is what
    laser cutters expect as cut paths.
    """

    def __init__(self, stroke_width: float = 1.0) -> None:
        self._stroke_width: float = stroke_width

    def drawing(self, scene: Scene, filename: str = "drawing.svg") -> svgwrite.Drawing:
        """Build the svgwrite Drawing for a scene.

        Args:
            scene: The scene to serialise.
            filename: File name the drawing will save to.

        Returns:
            An svgwrite.Drawing sized to the scene.
        """
        w, h = scene.width, scene.height
        dwg = svgwrite.Drawing(filename, size=(w, h), viewBox=("0 0 %f %f" % (w, h)))
        for shape, color in scene.items:
            args = {
                "stroke": svgwrite.rgb(*color),
                "fill": "none",
                "stroke_width": self._stroke_width,
            }
            for ring in shape_rings(shape):
                dwg.add(dwg.polygon(ring, **args))
        return dwg

    def to_string(self, scene: Scene) -> str:
        """Return the scene as an SVG document string."""
        return self.drawing(scene).tostring()

    def write(self, scene: Scene, path: str) -> None:
        """Save the scene as an SVG file.

        Raises:
            OSError: If the file cannot be written.
        """
        self.drawing(scene, path).save()


# ---------------------------------------------------------------------------
# PreviewRenderer
# ---------------------------------------------------------------------------
class PreviewRenderer:
    """Rasterises a Scene's outlines to a PNG preview with Pillow.

    Draws at a supersampled resolution and downsamples with LANCZOS for
    anti-aliasing.
    """

    # Anti-alias scale factors.
    _AA_SCALES: Dict[str, int] = {
        "off": 1,
        "low": 2,
        "medium": 4,
        "high": 8,
    }

    def render(
        self,
        scene: Scene,
        stroke_width: float,
        color_background: Color,
        antialias: str,
    ) -> Tuple[Image.Image, int]:
        """Render the scene outlines.

        Args:
            scene: The scene to draw.
            stroke_width: Outline width in canvas units.
            color_background: Background colour as (R, G, B).
            antialias: Anti-alias level ('off', 'low', 'medium', 'high').

        Returns:
            A tuple of (PIL Image at scene resolution, outlines drawn).
        """
        k = self._AA_SCALES.get(antialias, 1)

        width = max(int(round(scene.width)), 1)
        height = max(int(round(scene.height)), 1)
        s_lw = max(int(round(stroke_width * k)), 1)

        img = Image.new("RGB", (width * k, height * k), color_background)
        draw = ImageDraw.Draw(img)

        outline_count = 0
        for shape, color in scene.items:
            for ring in shape_rings(shape):
                pts = [(x * k, y * k) for x, y in ring]
                draw.line(pts + pts[:1], fill=color, width=s_lw, joint="curve")
                outline_count += 1

        if k > 1:
            img = img.resize((width, height), Image.LANCZOS)

        return img, outline_count


# ---------------------------------------------------------------------------
# SettingsManager
# ---------------------------------------------------------------------------
class SettingsManager:
    """JSON import/export of parameter sets with CLI-precedence logic.

    JSON overrides defaults, explicit CLI args override JSON.
    """

    # Keys that are persisted to JSON.
    _PERSISTED_KEYS: List[str] = [
        "drawing", "width", "height", "radius", "border", "shape", "clip",
        "framing", "frame_width", "surround", "loose", "stroke_width",
        "color_shape", "color_frame", "color_background", "file", "preview",
        "antialias", "debug",
    ]

    def export_settings(self, params: argparse.Namespace, path: str) -> None:
        """Export current parameters to a JSON file.

        Args:
            params: The resolved argparse Namespace.
            path: Output JSON file path.

        Raises:
            IOError: If the file cannot be written.
        """
        data: Dict = {}
        for key in self._PERSISTED_KEYS:
            data[key] = getattr(params, key, None)
        with open(path, "w") as f:
            json.dump(data, f, indent=2)

    def import_settings(self, path: str) -> Dict:
        """Import settings from a JSON file.

        Raises:
            FileNotFoundError: If the file does not exist.
            json.JSONDecodeError: If the file is not valid JSON.
        """
        with open(path, "r") as f:
            data = json.load(f)
        return data

    def merge_settings(
        self,
        defaults: argparse.Namespace,
        json_settings: Dict,
        explicit_keys: set,
    ) -> argparse.Namespace:
        """Merge JSON settings with CLI args, respecting precedence.

        Args:
            defaults: The argparse Namespace with default/CLI values.
            json_settings: Dictionary loaded from JSON.
            explicit_keys: Set of parameter names explicitly provided on CLI.

        Returns:
            A merged argparse Namespace.
        """
        for key in self._PERSISTED_KEYS:
            if key in json_settings and key not in explicit_keys:
                setattr(defaults, key, json_settings[key])
        return defaults


# ---------------------------------------------------------------------------
# Version helper
# ---------------------------------------------------------------------------
def _changelog_version(fallback: str = "0.0.0") -> str:
    """Read the highest version from CHANGELOG.md next to this script.

    Scans for ``## [X.Y.Z]`` headings (skipping ``[Unreleased]``) and returns
    the first match. Returns *fallback* when the file is missing or has no
    versioned headings.
    """
    changelog = os.path.join(os.path.dirname(os.path.abspath(__file__)), "CHANGELOG.md")
    try:
        with open(changelog, "r", encoding="utf-8") as fh:
            for line in fh:
                m = re.match(r"^##\s+\[(\d+\.\d+\.\d+)\]", line)
                if m:
                    return m.group(1)
    except OSError:
        pass
    return fallback


def _with_extension(path: str, ext: str) -> str:
    if not path.lower().endswith(ext):
        path += ext
    return path


# ---------------------------------------------------------------------------
# Application
# ---------------------------------------------------------------------------
class Application:
    """Top-level entry point for the Hex Panel Generator.

    Orchestrates CLI argument parsing, settings loading, drawing, SVG and
    preview output, and debug reporting.
    """

    VERSION:      str = _changelog_version("1.0.0")
    BUILD_DATE:   str = "2026-10-19"
    TITLE:        str = "Hex Panel Generator"
    AUTHOR:       str = "Rohin Gosling"
    BANNER_WIDTH: int = 60

    def run(self, argv: Optional[List[str]] = None) -> None:
        """Execute the full application pipeline.

        Args:
            argv: Argument list, defaults to sys.argv[1:].

        Returns:
            None
        """
        # Step 1: Parse CLI arguments and detect explicit keys
        args, explicit_keys = self._parse_args(argv)

        # Step 2: Import settings if requested
        if args.import_settings:
            args.import_settings = _with_extension(args.import_settings, ".json")
            try:
                manager = SettingsManager()
                json_data = manager.import_settings(args.import_settings)
                args = manager.merge_settings(args, json_data, explicit_keys)
            except FileNotFoundError:
                self._fail(f"Settings file not found: '{args.import_settings}'")
            except json.JSONDecodeError as e:
                self._fail(f"Malformed JSON in settings file: {e}")

        # Step 3: Export settings if requested
        export_path = None
        if args.export_settings:
            export_path = _with_extension(args.export_settings, ".json")
            try:
                SettingsManager().export_settings(args, export_path)
            except IOError as e:
                self._fail(f"Cannot write settings file: {e}")

        # Step 4: Validate parameters
        parser = ColorParser()
        try:
            color_shape = parser.parse(args.color_shape)
            color_frame = parser.parse(args.color_frame)
            color_background = parser.parse(args.color_background)
        except ValueError as e:
            self._fail(str(e))

        valid_aa = {"off", "low", "medium", "high"}
        if args.antialias not in valid_aa:
            self._fail(f"Invalid antialias level '{args.antialias}'. "
                       f"Must be one of: {', '.join(sorted(valid_aa))}")
        if not args.radius > 0:
            self._fail(f"Radius must be positive, got {args.radius}")
        if args.width < 0 or args.height < 0:
            self._fail(f"Bounds must be non-negative, got {args.width} x {args.height}")

        # Step 5: Build the drawing
        builder = DrawingBuilder(parser)
        try:
            scene = builder.build(
                args.drawing,
                width=args.width,
                height=args.height,
                radius=args.radius,
                border=args.border,
                shape=args.shape,
                clip=args.clip,
                framing=args.framing,
                frame_width=args.frame_width,
                surround=args.surround,
                loose=args.loose,
                color_shape=color_shape,
                color_frame=color_frame,
            )
        except ValueError as e:
            self._fail(str(e))

        # Step 6: Write the SVG and the optional preview
        out_file = _with_extension(args.file, ".svg")
        preview_file = _with_extension(args.preview, ".png") if args.preview else None
        outline_count = 0
        try:
            SvgExporter(args.stroke_width).write(scene, out_file)
            if preview_file:
                img, outline_count = PreviewRenderer().render(
                    scene, args.stroke_width, color_background, args.antialias
                )
                img.save(preview_file, "PNG")
        except OSError as e:
            self._fail(f"Cannot write output file: {e}")

        # Banner and save confirmations (always shown)
        self._print_banner()
        saved = [out_file] + ([preview_file] if preview_file else []) + \
                ([export_path] if export_path else [])
        for path in saved:
            size_str = self._format_file_size(os.path.getsize(path))
            print(f"  Saved: {path} ({size_str})")

        # Step 7: Debug output
        if args.debug:
            self._print_debug(
                args=args,
                scene=scene,
                color_shape=color_shape,
                color_frame=color_frame,
                color_background=color_background,
                outline_count=outline_count,
            )
        print()

    def _fail(self, message: str) -> None:
        print(f"Error: {message}", file=sys.stderr)
        sys.exit(1)

    def _parse_args(self, argv: Optional[List[str]] = None) -> Tuple[argparse.Namespace, set]:
        """Parse CLI arguments and detect which were explicitly provided.

        Returns:
            A tuple of (parsed Namespace, set of explicitly-provided key names).
        """
        parser = self._build_parser()
        args = parser.parse_args(argv)

        # Second parse with SUPPRESS defaults to detect explicit keys
        suppress_parser = self._build_parser(suppress_defaults=True)
        explicit_args = suppress_parser.parse_args(argv)
        explicit_keys = set(vars(explicit_args).keys())

        return args, explicit_keys

    def _build_parser(self, suppress_defaults: bool = False) -> argparse.ArgumentParser:
        """Build the argparse ArgumentParser.

        Args:
            suppress_defaults: If True, set all defaults to SUPPRESS to
                detect explicitly-provided CLI args.

        Returns:
            A configured ArgumentParser.
        """
        d = argparse.SUPPRESS if suppress_defaults else None

        banner = self._banner_text()

        class _BannerParser(argparse.ArgumentParser):
            """ArgumentParser that prints the banner before help text."""

            def print_help(self, file=None):
                if file is None:
                    file = sys.stdout
                file.write(banner + "\n\n")
                super().print_help(file)

        parser = _BannerParser(
            description="Hex Panel Generator: lay out hexagon motifs for laser-cut panels as SVG.",
        )

        parser.add_argument("--drawing", type=str, default=d if d else "side_panel",
                            help="Drawing to build: side_panel, sample (default: side_panel)")
        parser.add_argument("--width", type=float, default=d if d else 740.0,
                            help="Panel width (default: 740)")
        parser.add_argument("--height", type=float, default=d if d else 320.0,
                            help="Panel height (default: 320)")
        parser.add_argument("--radius", type=float, default=d if d else 60.0,
                            help="Tile circumradius (default: 60)")
        parser.add_argument("--border", type=float, default=d if d else 1.0,
                            help="Amount each motif is drawn inside its tile (default: 1)")
        parser.add_argument("--shape", type=str, default=d if d else "flower",
                            help="Motif: " + ", ".join(DrawingBuilder.SHAPES) + " (default: flower)")
        parser.add_argument("--clip", type=float, default=d if d else 0.6,
                            help="Fraction of the radius clipped from wedge tips (default: 0.6)")
        parser.add_argument("--framing", type=float, default=d if d else 0.2,
                            help="Fraction each piece shrinks to leave framing (default: 0.2)")
        parser.add_argument("--frame_width", type=float, default=d if d else 4.0,
                            help="Gap between parallelogram strips (default: 4)")
        parser.add_argument("--surround", nargs="?", const=True, default=d if d else False,
                            type=self._parse_bool_flag,
                            help="Draw the hexagon surround for parallelogram motifs")
        parser.add_argument("--loose", nargs="?", const=True, default=d if d else False,
                            type=self._parse_bool_flag,
                            help="Allow tiles to overhang the frame, clipped to it")
        parser.add_argument("--stroke_width", type=float, default=d if d else 1.0,
                            help="Outline stroke width (default: 1)")
        parser.add_argument("--color_shape", type=str, default=d if d else "green",
                            help="Motif stroke colour (default: green)")
        parser.add_argument("--color_frame", type=str, default=d if d else "red",
                            help="Frame stroke colour (default: red)")
        parser.add_argument("--color_background", type=str, default=d if d else "white",
                            help="Preview background colour (default: white)")
        parser.add_argument("--file", type=str, default=d if d else "drawing.svg",
                            help="Output SVG filename (default: drawing.svg)")
        parser.add_argument("--preview", type=str, default=d if d else None,
                            help="Also render a PNG preview to this file")
        parser.add_argument("--antialias", type=str, default=d if d else "high",
                            help="Preview anti-alias level: off, low, medium, high (default: high)")
        parser.add_argument("--debug", nargs="?", const=True, default=d if d else False,
                            type=self._parse_bool_flag,
                            help="Enable debug output")
        parser.add_argument("--export_settings", type=str, default=None,
                            help="Export parameters to a JSON file")
        parser.add_argument("--import_settings", type=str, default=None,
                            help="Import parameters from a JSON file")

        return parser

    def _parse_bool_flag(self, value: str) -> bool:
        """Parse a boolean flag value ('true'/'false' or bare flag)."""
        if isinstance(value, bool):
            return value
        if value.lower() in ("true", "1", "yes"):
            return True
        if value.lower() in ("false", "0", "no"):
            return False
        raise argparse.ArgumentTypeError(f"Boolean value expected, got '{value}'")

    def _banner_text(self) -> str:
        """Build the application banner as a string."""
        w = self.BANNER_WIDTH
        inner = w - 2  # space between │ and │
        lines = [
            "┌" + "─" * inner + "┐",
            f"│{'  Program:    ' + self.TITLE:<{inner}}│",
            f"│{'  Version:    ' + self.VERSION:<{inner}}│",
            f"│{'  Build Date: ' + self.BUILD_DATE:<{inner}}│",
            f"│{'  Author:     ' + self.AUTHOR:<{inner}}│",
            "└" + "─" * inner + "┘",
        ]
        return "\n".join(lines)

    def _print_banner(self) -> None:
        """Print the application banner to stdout."""
        print(self._banner_text())

    def _print_debug(
        self,
        args: argparse.Namespace,
        scene: Scene,
        color_shape: Color,
        color_frame: Color,
        color_background: Color,
        outline_count: int,
    ) -> None:
        """Print debug information to stdout.

        Args:
            args: The resolved parameters.
            scene: The scene that was written.
            color_shape: Resolved motif colour.
            color_frame: Resolved frame colour.
            color_background: Resolved background colour.
            outline_count: Outlines drawn in the preview, 0 without one.
        """
        print(f"\n  Drawing:          {args.drawing}")
        print(f"  Panel size:       {args.width} x {args.height}")
        if args.drawing == "side_panel":
            print(f"  Radius:           {args.radius} (border {args.border})")
            print(f"  Shape:            {args.shape}")
            print(f"  Clip / framing:   {args.clip} / {args.framing}")
            print(f"  Frame width:      {args.frame_width} (surround {args.surround})")
            print(f"  Loose:            {args.loose}")
            # the frame is the last item
            print(f"  Tiles:            {len(scene.items) - 1}")
        print(f"  Shape colour:     {args.color_shape} -> {color_shape}")
        print(f"  Frame colour:     {args.color_frame} -> {color_frame}")
        print(f"  Background:       {args.color_background} -> {color_background}")
        print(f"  Paths written:    {scene.path_count()}")
        if args.preview:
            print(f"  Anti-alias:       {args.antialias}")
            print(f"  Outlines drawn:   {outline_count}")

    def _format_file_size(self, size_bytes: int) -> str:
        """Format a file size in human-readable form (e.g. '1.23 MB')."""
        if size_bytes < 1024:
            return f"{size_bytes} B"
        elif size_bytes < 1024 * 1024:
            return f"{size_bytes / 1024:.2f} KB"
        else:
            return f"{size_bytes / (1024 * 1024):.2f} MB"


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------
def main() -> None:
    """Main entry point for the Hex Panel Generator."""
    if sys.stdout and hasattr(sys.stdout, "reconfigure"):
        sys.stdout.reconfigure(encoding="utf-8", errors="replace")
    app = Application()
    app.run()


if __name__ == "__main__":
    main()
