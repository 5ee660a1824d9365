import numpy as np

from meta_data import D50_WHITE_POINT

# relative to the largest element of the matrix
SINGULAR_EPSILON = 1e-12


class SingularMatrixError(ValueError):
    pass


def inverse_3x3(m):
    """
    Closed-form inverse of a 3x3 matrix (adjugate / determinant).
    Raises SingularMatrixError instead of returning inf/nan.
    """
    m = np.asarray(m, dtype=np.float64)
    if m.shape != (3, 3):
        raise ValueError("matrix must be 3x3")
    c0, c1, c2 = m[:, 0], m[:, 1], m[:, 2]
    # rows of the adjugate are cross products of column pairs
    adj = np.array([np.cross(c1, c2), np.cross(c2, c0), np.cross(c0, c1)])
    det = float(np.dot(c0, adj[0]))
    scale = float(np.max(np.abs(m)))
    if not np.isfinite(det) or scale == 0 or abs(det) <= SINGULAR_EPSILON * scale ** 3:
        raise SingularMatrixError(f"matrix is singular (det={det})")
    return adj / det


def from_diagonal(v):
    v = np.asarray(v, dtype=np.float64).reshape(-1)
    if v.size != 3:
        raise ValueError("diagonal must have 3 elements")
    return np.diag(v)


def column(m, index):
    return np.asarray(m, dtype=np.float64)[:, index].copy()


def scale_to_white(M0, XYZ_W):
    """
    Rescale the columns of an RGB(linear) -> XYZ matrix so that RGB (1,1,1) maps to XYZ_W.
    M0 columns are the XYZ of the R, G, B primaries.
    """
    M0 = np.asarray(M0, dtype=np.float64)
    s = inverse_3x3(M0) @ np.asarray(XYZ_W, dtype=np.float64)
    return M0 @ from_diagonal(s)


def xyz_scale_to_d50(M0):
    return scale_to_white(M0, D50_WHITE_POINT)
