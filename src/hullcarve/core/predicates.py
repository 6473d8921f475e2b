"""
Adaptive-Precision Orientation Predicate

Exact sign of the 2D orientation determinant, following Shewchuk's
adaptive scheme:
- A fast floating-point determinant with a forward error bound
- Escalation through error-free expansion arithmetic when the bound fails
- An exact result for every finite input, so collinearity yields exactly 0

Python floats are IEEE-754 doubles evaluated without fused multiply-add,
which the error-free transformations below rely on.
"""

from typing import List, Sequence, Tuple


EPSILON = 1.1102230246251565e-16  # 2 ** -53
SPLITTER = 134217729.0  # 2 ** 27 + 1

RESULT_ERRBOUND = (3.0 + 8.0 * EPSILON) * EPSILON
CCW_ERRBOUND_A = (3.0 + 16.0 * EPSILON) * EPSILON
CCW_ERRBOUND_B = (2.0 + 12.0 * EPSILON) * EPSILON
CCW_ERRBOUND_C = (9.0 + 64.0 * EPSILON) * EPSILON * EPSILON


def _fast_two_sum(a: float, b: float) -> Tuple[float, float]:
    # Requires |a| >= |b|.
    x = a + b
    return x, b - (x - a)


def _two_sum(a: float, b: float) -> Tuple[float, float]:
    x = a + b
    bvirt = x - a
    avirt = x - bvirt
    return x, (a - avirt) + (b - bvirt)


def _two_diff(a: float, b: float) -> Tuple[float, float]:
    x = a - b
    bvirt = a - x
    avirt = x + bvirt
    return x, (a - avirt) + (bvirt - b)


def _two_diff_tail(a: float, b: float, x: float) -> float:
    bvirt = a - x
    avirt = x + bvirt
    return (a - avirt) + (bvirt - b)


def _split(a: float) -> Tuple[float, float]:
    c = SPLITTER * a
    ahi = c - (c - a)
    return ahi, a - ahi


def _two_product(a: float, b: float) -> Tuple[float, float]:
    x = a * b
    ahi, alo = _split(a)
    bhi, blo = _split(b)
    err = x - ahi * bhi - alo * bhi - ahi * blo
    return x, alo * blo - err


def _two_two_diff(a1: float, a0: float, b1: float, b0: float) -> List[float]:
    """(a1 + a0) - (b1 + b0) as a four-component expansion, smallest first."""
    i, x0 = _two_diff(a0, b0)
    j, k = _two_sum(a1, i)
    i, x1 = _two_diff(k, b1)
    x3, x2 = _two_sum(j, i)
    return [x0, x1, x2, x3]


def fast_expansion_sum_zeroelim(e: Sequence[float], f: Sequence[float]) -> List[float]:
    """
    Sum two nonoverlapping expansions, dropping zero components.

    Parameters
    ----------
    e, f : sequence of float
        Expansions ordered by increasing magnitude.

    Returns
    -------
    list of float
        Nonoverlapping expansion equal to ``sum(e) + sum(f)`` exactly,
        ordered by increasing magnitude. Never empty.
    """
    elen = len(e)
    flen = len(f)
    eindex = findex = 0
    h = []

    enow = e[0]
    fnow = f[0]
    if (fnow > enow) == (fnow > -enow):
        q = enow
        eindex = 1
    else:
        q = fnow
        findex = 1

    if eindex < elen and findex < flen:
        enow = e[eindex]
        fnow = f[findex]
        if (fnow > enow) == (fnow > -enow):
            q, hh = _fast_two_sum(enow, q)
            eindex += 1
        else:
            q, hh = _fast_two_sum(fnow, q)
            findex += 1
        if hh != 0.0:
            h.append(hh)

        while eindex < elen and findex < flen:
            enow = e[eindex]
            fnow = f[findex]
            if (fnow > enow) == (fnow > -enow):
                q, hh = _two_sum(q, enow)
                eindex += 1
            else:
                q, hh = _two_sum(q, fnow)
                findex += 1
            if hh != 0.0:
                h.append(hh)

    while eindex < elen:
        q, hh = _two_sum(q, e[eindex])
        eindex += 1
        if hh != 0.0:
            h.append(hh)

    while findex < flen:
        q, hh = _two_sum(q, f[findex])
        findex += 1
        if hh != 0.0:
            h.append(hh)

    if q != 0.0 or not h:
        h.append(q)
    return h


def estimate(e: Sequence[float]) -> float:
    """Approximate value of an expansion (plain left-to-right sum)."""
    q = e[0]
    for component in e[1:]:
        q += component
    return q


def _orient2d_adapt(ax, ay, bx, by, cx, cy, detsum):
    acx = ax - cx
    bcx = bx - cx
    acy = ay - cy
    bcy = by - cy

    s1, s0 = _two_product(acx, bcy)
    t1, t0 = _two_product(acy, bcx)
    b = _two_two_diff(s1, s0, t1, t0)

    det = estimate(b)
    errbound = CCW_ERRBOUND_B * detsum
    if det >= errbound or -det >= errbound:
        return det

    acxtail = _two_diff_tail(ax, cx, acx)
    bcxtail = _two_diff_tail(bx, cx, bcx)
    acytail = _two_diff_tail(ay, cy, acy)
    bcytail = _two_diff_tail(by, cy, bcy)

    if acxtail == 0.0 and acytail == 0.0 and bcxtail == 0.0 and bcytail == 0.0:
        return det

    errbound = CCW_ERRBOUND_C * detsum + RESULT_ERRBOUND * abs(det)
    det += (acx * bcytail + bcy * acxtail) - (acy * bcxtail + bcx * acytail)
    if det >= errbound or -det >= errbound:
        return det

    s1, s0 = _two_product(acxtail, bcy)
    t1, t0 = _two_product(acytail, bcx)
    c1 = fast_expansion_sum_zeroelim(b, _two_two_diff(s1, s0, t1, t0))

    s1, s0 = _two_product(acx, bcytail)
    t1, t0 = _two_product(acy, bcxtail)
    c2 = fast_expansion_sum_zeroelim(c1, _two_two_diff(s1, s0, t1, t0))

    s1, s0 = _two_product(acxtail, bcytail)
    t1, t0 = _two_product(acytail, bcxtail)
    d = fast_expansion_sum_zeroelim(c2, _two_two_diff(s1, s0, t1, t0))

    return d[-1]


def orient2d(ax: float, ay: float, bx: float, by: float, cx: float, cy: float) -> float:
    """
    Orientation of point C relative to the directed line A -> B.

    Parameters
    ----------
    ax, ay, bx, by, cx, cy : float
        Coordinates of A, B and C.

    Returns
    -------
    float
        Positive if A, B, C turn counter-clockwise (C left of A -> B),
        negative if clockwise, and exactly 0.0 iff the points are collinear.
        The magnitude approximates twice the signed triangle area.
    """
    detleft = (ax - cx) * (by - cy)
    detright = (ay - cy) * (bx - cx)
    det = detleft - detright

    detsum = abs(detleft + detright)
    if abs(det) >= CCW_ERRBOUND_A * detsum:
        return det

    return _orient2d_adapt(ax, ay, bx, by, cx, cy, detsum)


def orient(a: Sequence[float], b: Sequence[float], c: Sequence[float]) -> float:
    """Point-tuple form of :func:`orient2d`."""
    return orient2d(a[0], a[1], b[0], b[1], c[0], c[1])


def _in_box(p, q, r) -> bool:
    return (min(p[0], q[0]) <= r[0] <= max(p[0], q[0]) and
            min(p[1], q[1]) <= r[1] <= max(p[1], q[1]))


def segments_cross(p1, q1, p2, q2) -> bool:
    """
    Test whether closed segments (p1, q1) and (p2, q2) intersect.

    Touching counts: an endpoint lying on the other segment, or collinear
    overlap, is reported as a crossing. Segments that share an endpoint
    object never count as crossing. Point identity, not coordinate
    equality, decides whether an endpoint is shared.
    """
    if p1 is p2 or p1 is q2 or q1 is p2 or q1 is q2:
        return False

    d1 = orient(p2, q2, p1)
    d2 = orient(p2, q2, q1)
    d3 = orient(p1, q1, p2)
    d4 = orient(p1, q1, q2)

    if ((d1 > 0 and d2 < 0) or (d1 < 0 and d2 > 0)) and \
            ((d3 > 0 and d4 < 0) or (d3 < 0 and d4 > 0)):
        return True

    # collinear endpoints decide by position along the other segment
    return ((d1 == 0 and _in_box(p2, q2, p1)) or
            (d2 == 0 and _in_box(p2, q2, q1)) or
            (d3 == 0 and _in_box(p1, q1, p2)) or
            (d4 == 0 and _in_box(p1, q1, q2)))
