## matrix transformation operations for 3D homogeneous coordinates in
## cubeproj
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

from math import *
import cubeproj.geom as geom

## a matrix is represented as a list of four four vectors, which are
## its rows.  Because vectors are plain lists we assume that Mx
## implies a column vector.

## Rotation angles are given in degrees and are right-handed.  Local
## (intrinsic) rotations post-multiply: rotating an object about its
## own axis A by angle a replaces its matrix M with M*Rotation(A,a).


class Matrix:
    """4x4 transformation matrix class for transforming homogenemous 3D coordinates"""

    def __init__(self,a=False):
        self.m = [[1,0,0,0],
                  [0,1,0,0],
                  [0,0,1,0],
                  [0,0,0,1]]

        if isinstance(a,Matrix):
            self.m = [ list(row) for row in a.m ]
        elif isinstance(a,(tuple,list)):
            if len(a) == 4 and all(isinstance(r,(tuple,list)) and len(r) == 4 for r in a):
                vals = [ x for r in a for x in r ]
            elif len(a) == 16:
                vals = list(a)
            else:
                raise ValueError('bad list used to initialize matrix: {}'.format(a))
            for ind,x in enumerate(vals):
                if not geom.isgoodnum(x):
                    raise ValueError('bad element in matrix initialization: {}'.format(x))
                self.m[ind//4][ind%4]=x
        elif a is not False:
            raise ValueError('bad thing used in attempt to initialize matrix: {}'.format(a))

    def __repr__(self):
        return "Matrix({},{},{},{})".format(self.m[0],self.m[1],
                                            self.m[2],self.m[3])

    def get(self,i,j):
        if i < 0 or i > 3 or j < 0 or j > 3:
            raise ValueError('bad index passed to get: {},{}'.format(i,j))
        return self.m[i][j]

    def set(self,i,j,x):
        if i < 0 or i > 3 or j < 0 or j > 3:
            raise ValueError('bad index passed to set: {},{}'.format(i,j))
        if not geom.isgoodnum(x):
            raise ValueError('bad value passed to set: {}'.format(x))
        self.m[i][j]=x

    def getrow(self,i):
        return list(self.m[i])

    def getcol(self,j):
        return [self.m[0][j],self.m[1][j],self.m[2][j],self.m[3][j]]

    # matrix multiply.  If x is a matrix, compute MX.  If X is a
    # vector, compute Mx. If x is a scalar, compute xM.
    def mul(self,x):
        if isinstance(x,Matrix):
            result = Matrix()
            for i in range(4):
                for j in range(4):
                    result.m[i][j] = sum(self.m[i][k]*x.m[k][j] for k in range(4))
            return result
        elif isinstance(x,list) and len(x) == 4:
            return [ sum(self.m[i][k]*x[k] for k in range(4)) for i in range(4) ]
        elif geom.isgoodnum(x):
            return Matrix([ [ v*x for v in row ] for row in self.m ])

        raise ValueError('bad thing passed to mul(): {}'.format(x))

    def transpose(self):
        return Matrix([ self.getcol(j) for j in range(4) ])

    def determinant(self):
        """determinant of the upper-left 3x3 (linear) part of the matrix"""
        m = self.m
        return (m[0][0]*(m[1][1]*m[2][2] - m[1][2]*m[2][1]) -
                m[0][1]*(m[1][0]*m[2][2] - m[1][2]*m[2][0]) +
                m[0][2]*(m[1][0]*m[2][1] - m[1][1]*m[2][0]))

    def fingerprint(self,digits=12):
        """hashable summary of the matrix entries, rounded to ``digits``"""
        return tuple(round(v,digits) for row in self.m for v in row)


# return the generalized 4x4 arbitrary axis rotation matrix
def Rotation(axis,angle,inverse=False):
    m = geom.mag(axis)
    u = axis
    if m < geom.epsilon:
        raise ValueError('zero-length rotation axis not allowed')
    if not geom.close(m,1.0):
        u = geom.scale3(axis,1.0/m)

    if inverse:
        angle *= -1.0
    rad = (angle%360.0)*geom.pi2/360.0

    ux = u[0]
    uy = u[1]
    uz = u[2]

    cang = cos(rad)
    cmin = 1.0-cang
    sang = sin(rad)

    # see http://www.opengl-tutorial.org/assets/faq_quaternions/index.html#Q38
    R = [[cang + ux*ux*cmin, ux*uy*cmin-uz*sang, ux*uz*cmin+uy*sang,0],
         [uy*ux*cmin+uz*sang, cang + uy*uy*cmin, uy*uz*cmin - ux*sang,0],
         [uz*ux*cmin-uy*sang, uz*uy*cmin+ux*sang, cang+uz*uz*cmin,0],
         [0,0,0,1]]

    return Matrix(R)

def Translation(delta,inverse=False):
    if inverse:
        delta = geom.scale3(delta,-1.0)
    T = [[1,0,0,delta[0]],
         [0,1,0,delta[1]],
         [0,0,1,delta[2]],
         [0,0,0,1]]
    return Matrix(T)

XAXIS = geom.vect(1,0,0)
YAXIS = geom.vect(0,1,0)
ZAXIS = geom.vect(0,0,1)

## zx'z'' intrinsic Euler rotation: alpha about Z, then beta about the
## new X, then gamma about the final Z.  Angles in degrees.
def EulerZXZ(alpha,beta,gamma):
    return Rotation(ZAXIS,alpha).mul(Rotation(XAXIS,beta)).mul(Rotation(ZAXIS,gamma))

## intrinsic X, then Y, then Z.  Angles in degrees.
def EulerXYZ(x,y,z):
    return Rotation(XAXIS,x).mul(Rotation(YAXIS,y)).mul(Rotation(ZAXIS,z))

def eulerXYZ(mat):
    """recover intrinsic XYZ Euler angles (degrees) from the rotation
    part of ``mat``, the inverse of ``EulerXYZ()``"""
    m = mat.m
    y = asin(geom.clamp(m[0][2],-1.0,1.0))
    if abs(m[0][2]) < 0.9999999:
        x = atan2(-m[1][2],m[2][2])
        z = atan2(-m[0][1],m[0][0])
    else:
        x = atan2(m[2][1],m[1][1])
        z = 0.0
    return [ degrees(x), degrees(y), degrees(z) ]

def eulerZXZ(mat):
    """recover approximate zx'z'' Euler angles (degrees) from the
    rotation part of ``mat``.  At the gimbal-lock poles (beta of 0 or
    180) gamma is reported as zero."""
    m = mat.m
    beta = acos(geom.clamp(m[2][2],-1.0,1.0))
    if abs(sin(beta)) > 1.0e-7:
        alpha = atan2(m[0][2],-m[1][2])
        gamma = atan2(m[2][0],m[2][1])
    else:
        alpha = atan2(m[1][0],m[0][0])
        gamma = 0.0
    return [ degrees(alpha), degrees(beta), degrees(gamma) ]
