import numpy as np

EPSILON = 1e-10


def _as_xyz_rows(XYZ):
    arr = np.asarray(XYZ, dtype=float)
    if arr.ndim == 1:
        if arr.shape[0] != 3:
            raise ValueError("XYZ length must be 3")
        return arr.reshape(1, 3), True
    if arr.shape[-1] != 3:
        raise ValueError("Last dim of XYZ must be 3")
    return arr, False


def XYZ_to_xy(XYZ):
    """
    XYZ -> xy, batched.
    Input shape (3,) or (...,3); output shape (2,) or (...,2).
    X+Y+Z == 0 gives (nan, nan).
    """
    arr, squeeze_back = _as_xyz_rows(XYZ)
    denom = arr[..., 0] + arr[..., 1] + arr[..., 2]
    denom_safe = np.where(denom == 0, np.nan, denom)
    x = arr[..., 0] / denom_safe
    y = arr[..., 1] / denom_safe
    xy = np.stack([x, y], axis=-1)
    if squeeze_back:
        return xy[0]
    return xy


def XYZ_to_xyY(XYZ):
    arr, squeeze_back = _as_xyz_rows(XYZ)
    xy = XYZ_to_xy(arr)
    xyY = np.concatenate([xy, arr[..., 1:2]], axis=-1)
    if squeeze_back:
        return xyY[0]
    return xyY


def xyY_to_XYZ(xyY):
    """
    xyY -> XYZ, batched. Y is relative (white Y == 1).
    y <= 0, x < 0 or x+y > 1 are invalid and give [0,0,0].
    """
    arr = np.asarray(xyY, dtype=float)
    if arr.shape[-1] != 3:
        raise ValueError("xyY last dimension must be 3 (x,y,Y)")
    squeeze = (arr.ndim == 1)
    if squeeze:
        arr = arr.reshape(1, 3)

    x = arr[..., 0]
    y = arr[..., 1]
    Y = arr[..., 2]

    valid = (y > 0) & (x >= 0) & (x + y <= 1 + 1e-12)
    safe_y = np.where(valid, y, 1.0)

    X = np.where(valid, (x / safe_y) * Y, 0.0)
    Z = np.where(valid, ((1.0 - x - y) / safe_y) * Y, 0.0)
    Z = np.where(np.abs(Z) < EPSILON, 0.0, Z)
    Y = np.where(valid, Y, 0.0)

    out = np.stack([X, Y, Z], axis=-1)
    if squeeze:
        return out[0]
    return out
