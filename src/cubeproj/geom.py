## foundational computational geometry kernel for cubeproj
## Copyright (c) 2025 cubeproj contributors

# Permission is hereby granted, free of charge, to any person
# obtaining a copy of this software and associated documentation files
# (the "Software"), to deal in the Software without restriction,
# including without limitation the rights to use, copy, modify, merge,
# publish, distribute, sublicense, and/or sell copies of the Software,
# and to permit persons to whom the Software is furnished to do so,
# subject to the following conditions:
#
# The above copyright notice and this permission notice shall be
# included in all copies or substantial portions of the Software.
#
# THE SOFTWARE IS PROVIDED "AS IS", WITHOUT WARRANTY OF ANY KIND,
# EXPRESS OR IMPLIED, INCLUDING BUT NOT LIMITED TO THE WARRANTIES OF
# MERCHANTABILITY, FITNESS FOR A PARTICULAR PURPOSE AND
# NONINFRINGEMENT. IN NO EVENT SHALL THE AUTHORS OR COPYRIGHT HOLDERS
# BE LIABLE FOR ANY CLAIM, DAMAGES OR OTHER LIABILITY, WHETHER IN AN
# ACTION OF CONTRACT, TORT OR OTHERWISE, ARISING FROM, OUT OF OR IN
# CONNECTION WITH THE SOFTWARE OR THE USE OR OTHER DEALINGS IN THE
# SOFTWARE.

"""foundational computational geometry kernel for **cubeproj**

====================
OVERVIEW
====================

The cubeproj.geom module provides the small set of scalar, vector and
planar operations that the projectors and the arc builder are built
on: circumcircles, ray/sphere intersection, the Postel (azimuthal
equidistant) mapping, circle and line intersections, and angle
utilities.

vectors and points
==================

Vectors are lists of four numbers, ``[x,y,z,w]``.  Points lie in the
w=1 hyperplane and are made with ``point()``; unspecified coordinates
are zero.  Planar (2D) points are ordinary points with ``z == 0``, so
``point(3,4)`` is the planar point (3,4).  The projectors express all
planar output relative to the viewpoint's own projection, which means
the viewpoint always maps to ``point(0,0)``.

circles
=======

Circles are full-circle arcs in list form, *i.e.*
``[center, [radius, 0, 360, -1]]``.  ``c[0]`` is the center and
``c[1][0]`` is the radius.

lines
=====

Lines are lists of two points.  Line intersection functions accept an
``inside`` flag; when it is true only intersections that fall within
both segments are reported.

tolerances
==========

``epsilon`` is the absolute tolerance used for generic comparisons.
Collinearity and parallelism tests use ``scaletol()``, which grows
with the magnitude of the coordinates under test, because the
projection radius (and therefore every planar coordinate) varies over
more than an order of magnitude.

missing results
===============

Functions that can fail for geometric reasons (collinear points, a ray
that misses a sphere, parallel lines) return ``None`` rather than
raising.  Bad arguments still raise ``ValueError``.

"""

from math import *
import mpmath as mpm

## constants
epsilon=0.000005
pi2 = 2.0*pi
halfpi = pi/2.0

## floor and relative factor for scale-adaptive tolerances
tolfloor = 1.0e-6
tolscale = 1.0e-8

## operations on scalars
## -----------------------

def isgoodnum(n):
    """ determine if an argument is actually a scalar number, and not boolean
    """
    return (not isinstance(n,bool)) and isinstance(n,(int,float))

def close(a,b,tol=epsilon):
    """ are two scalars the same within ``tol``
    """
    return abs(a-b) < tol

def clamp(x,lo,hi):
    """ constrain ``x`` to the closed interval ``[lo, hi]``"""
    return max(lo,min(hi,x))

## operations on vectors
## ------------------------

def vect(a=False,b=False,c=False,d=False):
    """Convenience function for making a homogeneous coordinates 4 vector
from practically anything
    """
    r = [0,0,0,1]
    if isgoodnum(a):
        r[0]=a
        if isgoodnum(b):
            r[1]=b
            if isgoodnum(c):
                r[2]=c
                if isgoodnum(d):
                    r[3]=d
    elif isinstance(a,(tuple,list)):
        for i in range(min(4,len(a))):
            x=a[i]
            if isgoodnum(x):
                r[i]=x
    return r

def point(x=False,y=False,z=False,w=False):
    """make a point, from coordinates or by copying an existing point,
    list, or tuple.  The w coordinate of a point is always positive."""
    p = vect(x,y,z,w)
    if p[3] <= 0:
        raise ValueError('w must be greater than zero for a point')
    return p

def ispoint(x):
    """ is it a point? """
    return isinstance(x,list) and len(x) == 4 and \
        all(isgoodnum(v) for v in x) and x[3] > 0

def add(a,b):
    """ 3 vector, `a + b`"""
    return [a[0]+b[0],a[1]+b[1],a[2]+b[2],1.0]

def sub(a,b):
    """ 3 vector, `a - b`"""
    return [a[0]-b[0],a[1]-b[1],a[2]-b[2],1.0]

def scale3(a,c):
    """ 3 vector, vector ''a'' times scalar ``c``, `a * c`"""
    return [a[0]*c,a[1]*c,a[2]*c,1.0]

def dot(a,b):
    """ 3 vector ``a`` dot ``b`` """
    return a[0]*b[0]+a[1]*b[1]+a[2]*b[2]

def cross(a,b):
    """Compute the cross product of a x b, assuming that both fall into
    the w=1 hyperplane"""
    return [ a[1]*b[2] - a[2]*b[1],
             a[2]*b[0] - a[0]*b[2],
             a[0]*b[1] - a[1]*b[0],
             1.0 ]

def mag(a):
    """ compute the magnitude of 3 vector ``a``"""
    return sqrt(a[0]*a[0]+a[1]*a[1]+a[2]*a[2])

def dist(a,b):
    """ compute the euclidean distance between two 3 vector points ``a`` and ``b``"""
    return mag(sub(a,b))

def vclose(a,b,tol=epsilon):
    """ are two points the same, to within ``tol``"""
    return dist(a,b) < tol

def unit(a):
    """return the unit vector in the direction of ``a``, or ``None`` if
    ``a`` is too short to normalize"""
    m = mag(a)
    if m < epsilon*epsilon:
        return None
    return scale3(a,1.0/m)

def mag2(a):
    """ magnitude of the x-y components of ``a``"""
    return sqrt(a[0]*a[0]+a[1]*a[1])

def cross2(a,b):
    """ z component of the cross product of the x-y parts of ``a`` and ``b``"""
    return a[0]*b[1] - a[1]*b[0]

def lerp(a,b,u):
    """ linear interpolation between points ``a`` and ``b``"""
    return add(a,scale3(sub(b,a),u))

## scale-adaptive tolerance.  Coordinates in the projected planes grow
## linearly with the projection radius, so tests on them must scale
## with the largest coordinate in play.
def scaletol(*points):
    """return a comparison tolerance proportional to the largest x-y
    coordinate magnitude among ``points``, never less than ``tolfloor``"""
    m = 0.0
    for p in points:
        m = max(m,abs(p[0]),abs(p[1]))
    return max(tolfloor,m*tolscale)

## angle utilities
## ----------------

def normangle(a):
    """ normalize angle ``a`` (radians) into ``[0, 2*pi)``"""
    a = fmod(a,pi2)
    if a < 0:
        a += pi2
    if a >= pi2:
        a = 0.0
    return a

def angdiff(a,b):
    """ signed shortest angular difference ``b - a``, in ``(-pi, pi]``"""
    d = normangle(b-a)
    if d > pi:
        d -= pi2
    return d

def isbetweenCCW(ang,start,end):
    """is ``ang`` strictly between ``start`` and ``end`` when sweeping
    counter-clockwise from ``start``?  All angles are normalized to
    ``[0, 2*pi)`` first."""
    ang = normangle(ang)
    start = normangle(start)
    end = normangle(end)
    if start < end:
        return ang > start and ang < end
    ## the sweep crosses the 0/2pi seam
    return ang > start or ang < end

def polarangle(center,p):
    """ angle of ``p`` about ``center`` normalized to ``[0, 2*pi)``"""
    return normangle(atan2(p[1]-center[1],p[0]-center[0]))

## circles
## -------

def circle(c,r):
    """make a full circle with center ``c`` and radius ``r``"""
    if not isgoodnum(r) or r < 0:
        raise ValueError('bad radius for circle: {}'.format(r))
    return [ point(c), [r, 0, 360, -1] ]

def iscircle(c):
    """ is it a circle? """
    return isinstance(c,list) and len(c) == 2 and ispoint(c[0]) and \
        isinstance(c[1],list) and len(c[1]) == 4 and \
        c[1][1] == 0 and c[1][2] == 360 and c[1][3] == -1

def samplecircle(c,ang):
    """ point on circle ``c`` at angle ``ang`` (radians)"""
    r = c[1][0]
    return point(c[0][0]+r*cos(ang),c[0][1]+r*sin(ang))

## collinearity is tested three ways: triangle area, the cross product
## of the two edge vectors, and the circumcenter determinant.  Any one
## of them falling under the scale-adaptive tolerance marks the points
## as collinear.

def _circumdet(p1,p2,p3):
    return 2.0*(p1[0]*(p2[1]-p3[1]) +
                p2[0]*(p3[1]-p1[1]) +
                p3[0]*(p1[1]-p2[1]))

def collinearXY(p1,p2,p3):
    """are the x-y projections of three points collinear, to within a
    tolerance scaled by their largest coordinate?"""
    tol = scaletol(p1,p2,p3)
    v1 = sub(p2,p1)
    v2 = sub(p3,p1)
    crs = abs(cross2(v1,v2))
    area = crs/2.0
    d = _circumdet(p1,p2,p3)
    return area < tol or crs < tol or abs(d) < tol

def circleFromThreePoints(p1,p2,p3):
    """compute the circle passing through three planar points.  Returns
    a full circle, or ``None`` if the points are collinear."""
    if collinearXY(p1,p2,p3):
        return None
    d = _circumdet(p1,p2,p3)
    s1 = p1[0]*p1[0] + p1[1]*p1[1]
    s2 = p2[0]*p2[0] + p2[1]*p2[1]
    s3 = p3[0]*p3[0] + p3[1]*p3[1]
    ux = (s1*(p2[1]-p3[1]) + s2*(p3[1]-p1[1]) + s3*(p1[1]-p2[1]))/d
    uy = (s1*(p3[0]-p2[0]) + s2*(p1[0]-p3[0]) + s3*(p2[0]-p1[0]))/d
    cen = point(ux,uy)
    return circle(cen,mag2(sub(p1,cen)))

## intersections
## -------------

def intersectRaySphere(origin,direction,center,radius,eps=0.001):
    """intersect the ray ``origin + t*direction`` with a sphere.  Of the
    roots with ``t > eps``, the nearest is returned; ``None`` if the ray
    misses or both roots lie behind ``eps``."""
    oc = sub(origin,center)
    a = dot(direction,direction)
    if a < epsilon*epsilon:
        return None
    b = 2.0*dot(oc,direction)
    c = dot(oc,oc) - radius*radius
    disc = b*b - 4.0*a*c
    if disc < 0:
        return None
    sq = sqrt(disc)
    ts = [ t for t in ((-b-sq)/(2.0*a), (-b+sq)/(2.0*a)) if t > eps ]
    if not ts:
        return None
    return add(origin,scale3(direction,min(ts)))

def postelProjection(p,center,radius):
    """map a point on the sphere of ``radius`` about ``center`` onto the
    plane with the azimuthal equidistant (Postel) projection, centred on
    the pole directly below ``center`` along -z.  Geodesic distance from
    the pole is preserved: a point at polar angle alpha lands at planar
    radius ``alpha*radius``."""
    x,y,z = sub(p,center)[:3]
    alpha = acos(clamp(-z/radius,-1.0,1.0))
    arclen = alpha*radius
    theta = atan2(y,x)
    return point(arclen*cos(theta),arclen*sin(theta))

def lineLineIntersectXY(l1,l2,inside=True):
    """intersection of two lines, or ``None`` if they are parallel or,
    when ``inside`` is true, if the intersection falls outside either
    segment"""
    p,q = l1
    r,s = l2
    qp = sub(q,p)
    sr = sub(s,r)
    denom = cross2(qp,sr)
    if abs(denom) < scaletol(p,q,r,s):
        return None
    rp = sub(r,p)
    t = cross2(rp,sr)/denom
    u = cross2(rp,qp)/denom
    if inside and not (0.0 <= t <= 1.0 and 0.0 <= u <= 1.0):
        return None
    return point(p[0]+t*qp[0],p[1]+t*qp[1])

def lineCircleIntersectXY(l,c):
    """intersect the infinite line through ``l`` with circle ``c``.
    Returns a list of zero, one, or two points."""
    x=c[0]
    mpr=mpm.mpf(c[1][0])

    ## solve for b in | b*V + P | = r with the circle moved to the
    ## origin, where V = p0-p1 and P = p1
    p0=sub(l[0],x)
    p1=sub(l[1],x)
    V = sub(p0,p1)
    mpV0 = mpm.mpf(V[0])
    mpV1 = mpm.mpf(V[1])
    mpP0 = mpm.mpf(p1[0])
    mpP1 = mpm.mpf(p1[1])
    a = mpV0*mpV0+mpV1*mpV1
    mpepsilon = mpm.mpf(epsilon)
    if mpm.fabs(a) < mpepsilon*mpepsilon:
        return []
    b = 2*(mpV0*mpP0+mpV1*mpP1)
    cc = mpP0*mpP0+mpP1*mpP1-mpr*mpr
    d = b*b-4*a*cc
    if mpm.fabs(d) < mpm.sqrt(a)*2*mpepsilon: # tangent
        params = [ -b/(2*a) ]
    elif d < 0:
        return []
    else:
        params = [ (-b + mpm.sqrt(d))/(2*a), (-b - mpm.sqrt(d))/(2*a) ]

    return [ add(add(scale3(V,float(u)),p1),x) for u in params ]

def circleCircleIntersectXY(c1,c2):
    """intersect two circles.  Returns a list of zero or two points; a
    tangent contact is reported as two coincident points."""
    x1=c1[0]
    x2=c2[0]
    r1=c1[1][0]
    r2=c2[1][0]
    d=dist(x1,x2)

    if d > r1+r2:
        return [] # too far apart
    if d < abs(r1-r2):
        return [] # one circle fully inside the other
    if d < epsilon:
        return [] # concentric, no stable solution

    ## distance from the center of c1 to the chord joining the two
    ## intersections, from r1^2 - id^2 = r2^2 - (d-id)^2
    id = (r1*r1 - r2*r2 + d*d)/(2*d)
    h = sqrt(max(0.0,r1*r1 - id*id))
    v = scale3(sub(x2,x1),1.0/d)
    m = add(x1,scale3(v,id))
    o = [-v[1]*h, v[0]*h, 0, 1.0]
    return [ point(m[0]+o[0],m[1]+o[1]),
             point(m[0]-o[0],m[1]-o[1]) ]
