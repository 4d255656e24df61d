# =============================================================================
# Online Polyline Simplification
# =============================================================================
# This module simplifies a polygonal line, built up one point at a time, into
# a visually similar polyline with fewer vertices. After every new point the
# engine knows the simplified representation with the fewest segments such
# that every original point stays within a distance threshold of its fitted
# line.
# =============================================================================

import logging
import math
from enum import IntEnum
from typing import Iterator, List, NamedTuple, Optional, Tuple

import numpy as np

logger = logging.getLogger(__name__)

# =============================================================================
# CONFIGURATION CONSTANTS
# =============================================================================

FIT_EPSILON = 1e-12        # Below this spread a point set counts as a single point
INTERSECTION_SLACK = 4.0   # Vertex fallback when |q - p|^2 > slack * threshold^2
DEFAULT_THRESHOLD = 1.0    # Maximum deviation used when none is given


# =============================================================================
# TRACE OUTCOMES
# =============================================================================
# Every candidate start index examined while processing a new point ends in
# exactly one of these outcomes. They are recorded for diagnostics only.

class Outcome(IntEnum):
    ACCEPT = 0          # Segment is admissible
    CUT = 1             # Segment would make the path self-intersect
    THRESHOLD = 2       # Error bound exceeded the threshold
    PIONEER_WEAK = 3    # Start point is not extremal on the fitted line
    PIONEER_STRONG = 4  # End point is not extremal on the fitted line


class TraceEvent(NamedTuple):
    index: int
    outcome: Outcome


# =============================================================================
# GEOMETRY PRIMITIVES
# =============================================================================

class Point(NamedTuple):
    """
    Immutable 2D point. Plain (x, y) tuples compare equal to it.
    """
    x: float
    y: float


def as_point(p) -> Point:
    """
    Convert an (x, y) pair into a Point.

    Raises:
        ValueError: If a coordinate is infinite or NaN
    """
    x = float(p[0])
    y = float(p[1])
    if not (math.isfinite(x) and math.isfinite(y)):
        raise ValueError(f"point coordinates must be finite: ({x}, {y})")
    return Point(x, y)


def sq(x: float) -> float:
    """Calculate the square of a number."""
    return x * x


def ddist(p: Point, q: Point) -> float:
    """
    Calculate the Euclidean distance between two points.

    Args:
        p, q: The two points

    Returns:
        The distance between the points
    """
    return math.sqrt(sq(p.x - q.x) + sq(p.y - q.y))


def iprod(p0: Point, p1: Point, p2: Point) -> float:
    """
    Calculate the dot product (p1-p0)*(p2-p0).
    """
    return (p1.x - p0.x) * (p2.x - p0.x) + (p1.y - p0.y) * (p2.y - p0.y)


def side(a: Point, b: Point, p: Point) -> float:
    """
    Calculate the cross product (b-a)x(p-a).

    The sign tells on which side of the directed line a->b the point p lies.

    Args:
        a: Start of the directed line
        b: End of the directed line
        p: The point to classify

    Returns:
        Positive if p is left of a->b, negative if right, zero if collinear
    """
    return (b.x - a.x) * (p.y - a.y) - (b.y - a.y) * (p.x - a.x)


def segments_intersect(a: Point, b: Point, c: Point, d: Point) -> bool:
    """
    Check whether segment ab meets segment cd.

    Two segments meet when the endpoints of each lie on opposite sides of
    (or on) the line through the other. If both side products vanish the
    configuration is collinear or shares an endpoint, and the test falls
    back to overlapping bounding boxes.

    Args:
        a, b: Endpoints of the first segment
        c, d: Endpoints of the second segment

    Returns:
        True if the segments cross or touch
    """
    d1 = side(a, b, c) * side(a, b, d)
    d2 = side(c, d, a) * side(c, d, b)

    if d1 == 0 and d2 == 0:
        return (
            min(a.x, b.x) <= max(c.x, d.x)
            and min(c.x, d.x) <= max(a.x, b.x)
            and min(a.y, b.y) <= max(c.y, d.y)
            and min(c.y, d.y) <= max(a.y, b.y)
        )
    return d1 <= 0 and d2 <= 0


def project(p: Point, line: "Line") -> Point:
    """
    Orthogonally project point p onto a line.
    """
    t = (line.a * p.x + line.b * p.y + line.c) / line.norm2
    return Point(p.x - line.a * t, p.y - line.b * t)


def intersect(line1: "Line", line2: "Line") -> Point:
    """
    Calculate the intersection point of two lines.

    The 2x2 system a1*x + b1*y = -c1, a2*x + b2*y = -c2 is solved by
    Gaussian elimination with full pivoting: the largest coefficient is
    moved to the top-left corner by swapping rows and columns before
    eliminating.

    Args:
        line1, line2: The two lines

    Returns:
        The intersection point. Its coordinates are infinite if the lines
        are parallel and NaN if they coincide; callers must check.
    """
    m = np.array(
        [[line1.a, line1.b], [line2.a, line2.b]], dtype=np.float64
    )
    rhs = np.array([-line1.c, -line2.c], dtype=np.float64)

    # Full pivoting: bring the largest coefficient to m[0, 0]
    r, k = divmod(int(np.argmax(np.abs(m))), 2)
    if r == 1:
        m = m[::-1]
        rhs = rhs[::-1]
    swapped = k == 1
    if swapped:
        m = m[:, ::-1]

    with np.errstate(divide="ignore", invalid="ignore"):
        f = m[1, 0] / m[0, 0]
        m11 = m[1, 1] - f * m[0, 1]
        r1 = rhs[1] - f * rhs[0]

        # A vanishing second pivot gives inf (parallel) or nan (identical)
        u1 = r1 / m11
        u0 = (rhs[0] - m[0, 1] * u1) / m[0, 0]

    if swapped:
        u0, u1 = u1, u0
    return Point(float(u0), float(u1))


# =============================================================================
# LINE CLASS
# =============================================================================
# An implicit line a*x + b*y + c = 0 together with the local coordinate
# system it induces: origin at the projection of (0, 0), tangent (-b, a)
# and normal (a, b). Neither axis is normalized, so the squared distance of
# a point with local coordinates (s, t) to the line is t^2 * (a^2 + b^2).

class Line:
    """
    Implicit 2D line with its local (s, t) coordinate system.
    """

    def __init__(self, a: float, b: float, c: float):
        """
        Initialize a line from its coefficients.

        Args:
            a, b: Normal vector of the line, not both zero
            c: Offset term

        Raises:
            ValueError: If a and b are both zero or a coefficient is not finite
        """
        if not (math.isfinite(a) and math.isfinite(b) and math.isfinite(c)):
            raise ValueError(f"line coefficients must be finite: ({a}, {b}, {c})")
        if a == 0 and b == 0:
            raise ValueError("line normal (a, b) must not be zero")

        self.a = a
        self.b = b
        self.c = c

        self.norm2 = a * a + b * b
        self.origin = Point(-a * c / self.norm2, -b * c / self.norm2)
        self.tangent = Point(-b, a)
        self.normal = Point(a, b)

    def __repr__(self):
        return "Line(%f, %f, %f)" % (self.a, self.b, self.c)

    def map(self, p: Point) -> Tuple[float, float]:
        """
        Convert a cartesian point into local (s, t) coordinates.

        Args:
            p: Point in cartesian coordinates

        Returns:
            (s, t) with p == origin + s * tangent + t * normal
        """
        dx = p.x - self.origin.x
        dy = p.y - self.origin.y
        s = (dx * self.tangent.x + dy * self.tangent.y) / self.norm2
        t = (dx * self.normal.x + dy * self.normal.y) / self.norm2
        return s, t

    def unmap(self, s: float, t: float) -> Point:
        """Convert local (s, t) coordinates back into a cartesian point."""
        return Point(
            self.origin.x + s * self.tangent.x + t * self.normal.x,
            self.origin.y + s * self.tangent.y + t * self.normal.y,
        )

    def remap(self, other: "Line", s: float, t: float) -> Tuple[float, float]:
        """
        Re-express local coordinates of another line in this line's system.

        Args:
            other: The line whose coordinate system (s, t) refers to
            s, t: Local coordinates relative to other

        Returns:
            The same point as (s, t) relative to this line
        """
        return self.map(other.unmap(s, t))

    def distance2(self, p: Point) -> float:
        """Squared distance from p to the line."""
        return sq(self.a * p.x + self.b * p.y + self.c) / self.norm2


# =============================================================================
# INCREMENTAL LINE FITTING
# =============================================================================
# Prefix sums over the appended points let us compute the least squares line
# through any index range in constant time.

class _Sums:
    """
    Container for precomputed sums used in fast line fitting.
    Entry k of the sum list holds the sums over the first k points.
    """

    def __init__(self, x=0.0, y=0.0, x2=0.0, xy=0.0, y2=0.0):
        self.x = x    # Sum of x coordinates
        self.y = y    # Sum of y coordinates
        self.x2 = x2  # Sum of x² coordinates
        self.xy = xy  # Sum of x*y coordinates
        self.y2 = y2  # Sum of y² coordinates


class IncrementalLineFitter:
    """
    Least squares line fitting over index ranges of a growing point sequence.

    Coordinates are accumulated relative to the first point appended, which
    keeps the sums small and limits cancellation in the variance terms.
    """

    def __init__(self):
        self._x0 = 0.0
        self._y0 = 0.0
        self._sums = [_Sums()]

    def __len__(self):
        """Return the number of points appended so far."""
        return len(self._sums) - 1

    def clear(self) -> None:
        self._x0 = 0.0
        self._y0 = 0.0
        self._sums = [_Sums()]

    def append(self, p: Point) -> None:
        """
        Extend all prefix sums by one point.

        Args:
            p: The point appended to the path
        """
        if len(self) == 0:
            self._x0 = p.x
            self._y0 = p.y

        # Convert to relative coordinates
        x = p.x - self._x0
        y = p.y - self._y0

        last = self._sums[-1]
        self._sums.append(
            _Sums(
                last.x + x,
                last.y + y,
                last.x2 + x * x,
                last.xy + x * y,
                last.y2 + y * y,
            )
        )

    def fit_line(self, i: Optional[int] = None, j: Optional[int] = None) -> Line:
        """
        Calculate the least squares line through points i..j (inclusive).

        The line minimizes the sum of squared perpendicular distances. It
        passes through the centroid of the points; its normal (a, b) solves
        fxy*b^2 + (fa - fb)*b - fxy = 0 with a = 1 when the points spread
        mostly along y, and the mirrored equation with b = 1 otherwise. In
        either case the root is taken in the form whose denominator cannot
        vanish.

        Args:
            i: First index of the range (default: 0)
            j: Last index of the range (default: last point)

        Returns:
            The fitted line in cartesian coordinates

        Raises:
            IndexError: If the range is empty or out of bounds
        """
        if i is None:
            i = 0
        if j is None:
            j = len(self) - 1
        if not 0 <= i <= j < len(self):
            raise IndexError(f"fit range [{i}, {j}] outside of 0..{len(self) - 1}")

        sums = self._sums
        n = j + 1 - i
        x = sums[j + 1].x - sums[i].x
        y = sums[j + 1].y - sums[i].y
        x2 = sums[j + 1].x2 - sums[i].x2
        xy = sums[j + 1].xy - sums[i].xy
        y2 = sums[j + 1].y2 - sums[i].y2

        # n^2 times the covariance matrix, clamped against rounding
        fa = max(n * x2 - x * x, 0.0)
        fb = max(n * y2 - y * y, 0.0)
        fxy = n * xy - x * y

        if fa < FIT_EPSILON and fb < FIT_EPSILON:
            # All points coincide: any direction will do
            a = -1.0
            b = -1.0
        elif fa < fb:
            a = 1.0
            b = -2.0 * fxy / ((fb - fa) + math.sqrt(sq(fa - fb) + 4.0 * sq(fxy)))
        else:
            b = 1.0
            denom = (fa - fb) + math.sqrt(sq(fa - fb) + 4.0 * sq(fxy))
            a = -2.0 * fxy / denom if denom > 0 else 0.0

        # Line through the centroid, shifted back to absolute coordinates
        c = -(a * (x / n + self._x0) + b * (y / n + self._y0))
        return Line(a, b, c)


# =============================================================================
# ONLINE CONVEX HULL
# =============================================================================
# Melkman-style convex hull of a simple polyline whose points arrive one at a
# time. The hull is a cyclic doubly linked list in counter-clockwise order;
# "first" is the most recently inserted vertex.

class HullNode:
    """
    A vertex of the convex hull.

    A node is valid while it is linked into the hull. Nodes removed from the
    hull are detached and never reused.
    """

    def __init__(self, point: Point):
        self.point = point
        self.prev = self  # Previous node in CCW order
        self.next = self  # Next node in CCW order

    def __repr__(self):
        return "HullNode(%f, %f)" % (self.point.x, self.point.y)

    @property
    def valid(self) -> bool:
        return self.prev is not None and self.next is not None

    def insert_between(self, before: "HullNode", after: "HullNode") -> None:
        """Link this node into the hull between two adjacent nodes."""
        self.prev = before
        self.next = after
        before.next = self
        after.prev = self

    def detach(self) -> None:
        self.prev = None
        self.next = None


class OnlineConvexHull:
    """
    Convex hull maintained under point insertion in polyline order.

    Points must be offered in the order they occur along a simple polyline.
    Under that precondition each offer costs amortized O(1): a point is
    outside the current hull iff it lies strictly right of one of the two
    edges incident to the most recently inserted vertex.
    """

    def __init__(self):
        self.first = None  # Most recently inserted node
        self.count = 0     # Number of valid nodes

    def __len__(self):
        return self.count

    def __iter__(self) -> Iterator[Point]:
        """Iterate over the hull vertices in CCW order, starting at first."""
        node = self.first
        for _ in range(self.count):
            yield node.point
            node = node.next

    def points(self) -> List[Point]:
        return list(self)

    def offer(self, p: Point) -> Optional[HullNode]:
        """
        Offer the next polyline point to the hull.

        Args:
            p: The next point along the polyline

        Returns:
            The new hull node for p, or None if p does not define a hull
            vertex (it lies inside or on the current hull)

        Note:
            A point equal to the single point held is rejected rather than
            linked in as a 2-gon. Two coincident nodes would make every
            later side test zero and stall the hull. A repeated first point
            therefore shows up as PIONEER_WEAK in the engine trace, not as
            ACCEPT.
        """
        if self.count == 0:
            return self._accept(HullNode(p))

        first = self.first

        if self.count == 1:
            if p == first.point:
                return None
            node = HullNode(p)
            node.insert_between(first, first)
            return self._accept(node)

        if self.count == 2:
            other = first.next
            s = side(first.point, other.point, p)
            node = HullNode(p)
            if s > 0:
                # CCW triangle first -> other -> p
                node.insert_between(other, first)
            elif s < 0:
                # CCW triangle first -> p -> other
                node.insert_between(first, other)
            else:
                # Collinear: keep the two extreme points
                t = iprod(first.point, other.point, p)
                if t < 0:
                    middle = first
                elif t > iprod(first.point, other.point, other.point):
                    middle = other
                else:
                    return None
                keep = other if middle is first else first
                middle.detach()
                node.insert_between(keep, keep)
                self.count -= 1
            return self._accept(node)

        # Walk back and forth from first to find the two tangent points
        n0 = first
        for _ in range(self.count):
            if side(n0.point, n0.prev.point, p) < 0:
                break
            n0 = n0.prev
        n1 = first
        for _ in range(self.count):
            if side(n1.point, n1.next.point, p) > 0:
                break
            n1 = n1.next

        if (n0 is first and n1 is first) or n0 is n1:
            # p is inside or on the hull
            return None

        # Remove every node strictly between n0 and n1
        node = n0.next
        while node is not n1:
            following = node.next
            node.detach()
            self.count -= 1
            node = following

        node = HullNode(p)
        node.insert_between(n0, n1)
        return self._accept(node)

    def _accept(self, node: HullNode) -> HullNode:
        self.first = node
        self.count += 1
        return node


def is_pioneer(line: Line, node: Optional[HullNode]) -> bool:
    """
    Check whether a hull vertex is extremal along a line.

    The hull is convex, so a vertex whose two neighbors both project onto
    the same side of it along the line's tangent has the minimal or maximal
    projection of the whole point set.

    Args:
        line: The line to project onto
        node: The hull vertex to test

    Returns:
        True if the vertex projection is extremal, False otherwise or if
        the node is no longer on the hull
    """
    if node is None or not node.valid:
        return False

    tx, ty = line.tangent
    p = node.point
    d1 = tx * (node.prev.point.x - p.x) + ty * (node.prev.point.y - p.y)
    d2 = tx * (node.next.point.x - p.x) + ty * (node.next.point.y - p.y)
    return (d1 >= 0 and d2 >= 0) or (d1 <= 0 and d2 <= 0)


# =============================================================================
# ERROR BOUND
# =============================================================================
# A rectangle in the local coordinates of the current fitted line that
# contains every point added so far. When the line changes, the rectangle's
# corners are carried over into the new coordinate system, so the box only
# ever grows and its error never decreases.

class ErrorBound:
    """
    Conservative bound on the squared distance of a point set to a line.
    """

    def __init__(self, line: Line, p: Point):
        """
        Initialize the bound with a single point.

        Args:
            line: The initial reference line
            p: The first point of the set
        """
        self.line = line
        s, t = line.map(p)
        self.smin = self.smax = s
        self.tmin = self.tmax = t

    def corners(self) -> List[Tuple[float, float]]:
        return [
            (self.smin, self.tmin),
            (self.smax, self.tmin),
            (self.smax, self.tmax),
            (self.smin, self.tmax),
        ]

    def extend(self, line: Line, p: Point) -> None:
        """
        Add a point to the set and switch to a new reference line.

        Args:
            line: The new reference line
            p: The point being added
        """
        s, t = line.map(p)
        smin = smax = s
        tmin = tmax = t

        for cs, ct in self.corners():
            s, t = line.remap(self.line, cs, ct)
            smin = min(smin, s)
            smax = max(smax, s)
            tmin = min(tmin, t)
            tmax = max(tmax, t)

        self.smin, self.smax = smin, smax
        self.tmin, self.tmax = tmin, tmax
        self.line = line

    def error(self) -> float:
        """
        Upper bound on the squared distance from any point of the set to the
        current reference line.
        """
        return max(sq(self.tmin), sq(self.tmax)) * self.line.norm2

    def corners_in_cartesian(self) -> List[Point]:
        """Rectangle corners in cartesian coordinates, for display."""
        return [self.line.unmap(s, t) for s, t in self.corners()]


# =============================================================================
# SIMPLIFICATION ENGINE
# =============================================================================
# For each point j the engine finds the shortest path from point 0 to point j
# in the graph whose edges are the admissible segments (i, j). A segment is
# admissible when the subpath i..j is simple, fits a line within the
# threshold, and both endpoints are extremal along that line.

class PointTag:
    """
    Shortest path record for one path index.
    """

    def __init__(self, dist: int, next: int):
        """
        Args:
            dist: Number of segments on the shortest path from point 0
            next: Predecessor index on that path (-1 for point 0)
        """
        self.dist = dist
        self.next = next
        self.cut = False  # Segment starting here crosses a later segment

    def __repr__(self):
        return "PointTag(dist=%d, next=%d, cut=%s)" % (self.dist, self.next, self.cut)


class SimplificationEngine:
    """
    Online polyline simplifier.

    Points are appended one at a time with append(). After every append the
    simplified path can be read with simplified().
    """

    def __init__(self, threshold: float = DEFAULT_THRESHOLD):
        """
        Args:
            threshold: Maximum distance of an original point to its fitted
                line; math.inf disables the distance check

        Raises:
            ValueError: If threshold is negative or NaN
        """
        if not threshold >= 0:
            raise ValueError(f"threshold must be a non-negative number, got {threshold}")

        self.threshold = threshold
        self.pt = []          # Points appended so far
        self.fitter = IncrementalLineFitter()
        self._tags = []       # One PointTag per point
        self._trace = []      # Outcomes of the latest scan
        self.bound = None     # ErrorBound of the latest scan
        self.hull = None      # OnlineConvexHull of the latest scan

    def __len__(self):
        return len(self.pt)

    @property
    def tags(self) -> Tuple[PointTag, ...]:
        return tuple(self._tags)

    def trace(self) -> List[TraceEvent]:
        """
        Outcomes of the most recent append, one per examined start index,
        ordered by increasing index.
        """
        return list(self._trace)

    def clear(self) -> None:
        self.pt = []
        self.fitter.clear()
        self._tags = []
        self._trace = []
        self.bound = None
        self.hull = None

    # Observer callbacks used by PointPath
    def path_appended(self, p: Point) -> None:
        self.append(p)

    def path_cleared(self) -> None:
        self.clear()

    def append(self, p) -> None:
        """
        Append a point and update the shortest path records.

        Args:
            p: The new point, a Point or any (x, y) pair

        Raises:
            ValueError: If a coordinate is infinite or NaN; the engine is
                left unchanged
        """
        p = as_point(p)
        self.pt.append(p)
        self.fitter.append(p)
        self._scan(len(self.pt) - 1)

    def _scan(self, j: int) -> None:
        """
        Examine the segments (i, j) for i = j-1 down to 0 and record the
        best predecessor of j.
        """
        pt = self.pt
        tags = self._tags
        self._trace = []

        if j == 0:
            tags.append(PointTag(0, -1))
            return

        threshold2 = sq(self.threshold)
        bound = ErrorBound(self.fitter.fit_line(j, j), pt[j])
        hull = OnlineConvexHull()
        nj = hull.offer(pt[j])
        self.bound = bound
        self.hull = hull

        best = j - 1
        best_dist = tags[j - 1].dist
        events = []

        for i in range(j - 1, -1, -1):
            # A segment crossing the newest segment can never be used again
            if tags[i].cut or (
                i < j - 2 and segments_intersect(pt[i], pt[i + 1], pt[j - 1], pt[j])
            ):
                tags[i].cut = True
                events.append(TraceEvent(i, Outcome.CUT))
                break

            line = self.fitter.fit_line(i, j)
            bound.extend(line, pt[i])
            if bound.error() > threshold2:
                events.append(TraceEvent(i, Outcome.THRESHOLD))
                break

            node = hull.offer(pt[i])
            if not is_pioneer(line, node):
                events.append(TraceEvent(i, Outcome.PIONEER_WEAK))
                continue

            if not is_pioneer(line, nj):
                events.append(TraceEvent(i, Outcome.PIONEER_STRONG))
                break

            events.append(TraceEvent(i, Outcome.ACCEPT))
            if tags[i].dist < best_dist:
                best = i
                best_dist = tags[i].dist

        tags.append(PointTag(best_dist + 1, best))
        events.reverse()
        self._trace = events

        logger.debug(
            f"point {j}: predecessor {best}, {best_dist + 1} segments, "
            f"{len(events)} candidates examined"
        )

    def _vertex_indices(self) -> List[int]:
        """Read off the shortest path by following the next pointers."""
        path = []
        i = len(self.pt) - 1
        while i >= 0:
            path.append(i)
            i = self._tags[i].next
        path.reverse()
        return path

    def simplified(self) -> List[Point]:
        """
        Reconstruct the simplified path.

        Interior vertices are the intersections of consecutive fitted lines.
        An intersection that is undefined (parallel or identical lines) or
        lies too far from the shared original point is replaced by that
        point. The endpoints are the projections of the first and last
        original points onto the boundary lines.

        Returns:
            The vertices of the simplified path, in path order
        """
        pt = self.pt
        if len(pt) <= 1:
            return list(pt)

        idx = self._vertex_indices()
        lines = [
            self.fitter.fit_line(idx[k], idx[k + 1]) for k in range(len(idx) - 1)
        ]
        limit = INTERSECTION_SLACK * sq(self.threshold)

        out = [project(pt[0], lines[0])]
        for k in range(1, len(lines)):
            p = pt[idx[k]]
            q = intersect(lines[k - 1], lines[k])
            if (
                math.isfinite(q.x)
                and math.isfinite(q.y)
                and sq(q.x - p.x) + sq(q.y - p.y) <= limit
            ):
                out.append(q)
            else:
                logger.debug(f"vertex {idx[k]}: using original point instead of {q}")
                out.append(p)
        out.append(project(pt[-1], lines[-1]))
        return out

    def simplified_array(self) -> np.ndarray:
        """Return the simplified path as an (m, 2) float array."""
        return np.array(self.simplified(), dtype=float).reshape(-1, 2)


# =============================================================================
# OBSERVABLE PATH
# =============================================================================
# The path owned by the surrounding application. Observers are notified in
# registration order after every append or clear.

class PointPath(list):
    """
    Append-only list of points that notifies observers of changes.

    Observers implement path_appended(point) and path_cleared().
    """

    def __init__(self, points=()):
        list.__init__(self, (as_point(p) for p in points))
        self._observers = []

    def add_observer(self, observer) -> None:
        self._observers.append(observer)

    def remove_observer(self, observer) -> None:
        self._observers.remove(observer)

    def append(self, p) -> None:
        p = as_point(p)
        list.append(self, p)
        for observer in self._observers:
            observer.path_appended(p)

    def clear(self) -> None:
        list.clear(self)
        for observer in self._observers:
            observer.path_cleared()

    def _unsupported(self, *args, **kwargs):
        raise TypeError("a PointPath only supports append() and clear()")

    extend = insert = pop = remove = reverse = sort = _unsupported
    __setitem__ = __delitem__ = __iadd__ = __imul__ = _unsupported


def attach(path: PointPath, threshold: float = DEFAULT_THRESHOLD) -> SimplificationEngine:
    """
    Create an engine that follows a path.

    The current contents of the path are replayed so the engine ends up in
    the same state as if it had observed the path from the start.

    Args:
        path: The path to observe
        threshold: Maximum deviation of the simplified path

    Returns:
        The attached engine
    """
    engine = SimplificationEngine(threshold)
    for p in path:
        engine.append(p)
    path.add_observer(engine)
    logger.info(f"attached engine to path of {len(path)} points, threshold {threshold}")
    return engine


def simplify(points, threshold: float = DEFAULT_THRESHOLD) -> np.ndarray:
    """
    Simplify a complete polyline in one call.

    Args:
        points: Array-like of shape (N, 2)
        threshold: Maximum deviation of the simplified path

    Returns:
        The simplified polyline as an (M, 2) float array
    """
    pts = np.asarray(points, dtype=float)
    if pts.size == 0:
        return np.empty((0, 2), dtype=float)
    if pts.ndim != 2 or pts.shape[1] != 2:
        raise ValueError(f"expected an (N, 2) array of points, got shape {pts.shape}")

    engine = SimplificationEngine(threshold)
    for x, y in pts:
        engine.append((x, y))
    return engine.simplified_array()
