# palette_recolor/colour_convert.py
from __future__ import annotations

"""
Colour conversions and metrics (D65).

Exports:
  rgb_to_linear(srgb)
  rgb_to_lab(rgb)
  hex_to_lab(hex_str)
  hexes_to_lab(hex_list)
  lab_to_lch(lab)
  delta_e76(lab1, lab2)
  delta_e2000_pair(lab1, lab2)
  delta_e2000_vec(lab1, lab2)
  delta_e2000_matrix(lab_a, lab_b)
"""

import math
from typing import Sequence

import numpy as np
from numpy.typing import NDArray

from .constants import LAB_EPSILON, LAB_KAPPA, WHITE_D65
from .core_types import Lab, Lch, hex_list_to_u8_rgb_array


# sRGB to linear


def rgb_to_linear(srgb: np.ndarray) -> np.ndarray:
    """
    Convert sRGB (non-linear 0..1) to linear RGB (0..1). Vectorised.
    Args:
      srgb: array[...] in 0..1 (float)
    Returns:
      float64 array, same shape
    """
    srgb_f = np.asarray(srgb, dtype=np.float64)
    return np.where(
        srgb_f <= 0.04045, srgb_f / 12.92, ((srgb_f + 0.055) / 1.055) ** 2.4
    )


# sRGB to Lab (D65)


def rgb_to_lab(rgb: np.ndarray) -> Lab:
    """
    sRGB to CIE Lab (D65).
    Accepts uint8 [0..255] only when dtype is an integer type; floats are
    taken as [0..1]. Preserves shape (...,3). Returns float64.
    """
    arr = np.asarray(rgb)
    if np.issubdtype(arr.dtype, np.integer):
        rgb_f = arr.astype(np.float64) / 255.0
    else:
        rgb_f = arr.astype(np.float64, copy=False)

    r_lin = rgb_to_linear(rgb_f[..., 0])
    g_lin = rgb_to_linear(rgb_f[..., 1])
    b_lin = rgb_to_linear(rgb_f[..., 2])

    # Linear RGB -> XYZ (D65)
    X = 0.4124564 * r_lin + 0.3575761 * g_lin + 0.1804375 * b_lin
    Y = 0.2126729 * r_lin + 0.7151522 * g_lin + 0.0721750 * b_lin
    Z = 0.0193339 * r_lin + 0.1191920 * g_lin + 0.9503041 * b_lin

    Xn, Yn, Zn = WHITE_D65
    x, y, z = X / Xn, Y / Yn, Z / Zn

    def f(t: np.ndarray) -> np.ndarray:
        # Linear segment near black keeps the cube root from blowing up
        return np.where(t > LAB_EPSILON, np.cbrt(t), (LAB_KAPPA * t + 16.0) / 116.0)

    fx, fy, fz = f(x), f(y), f(z)
    out = np.empty(rgb_f.shape, dtype=np.float64)
    out[..., 0] = 116.0 * fy - 16.0
    out[..., 1] = 500.0 * (fx - fy)
    out[..., 2] = 200.0 * (fy - fz)
    return out


def hex_to_lab(hex_str: str) -> Lab:
    """'#rrggbb' to a Lab row of shape (3,)."""
    return rgb_to_lab(hex_list_to_u8_rgb_array([hex_str]))[0]


def hexes_to_lab(hex_list: Sequence[str]) -> Lab:
    """Many '#rrggbb' strings to Lab rows of shape (N,3)."""
    if len(hex_list) == 0:
        return np.zeros((0, 3), dtype=np.float64)
    return rgb_to_lab(hex_list_to_u8_rgb_array(list(hex_list)))


# Lab to LCh


def lab_to_lch(lab: Lab) -> Lch:
    """
    Lab[...,3] to LCh[...,3] (degrees in [0,360)).
    Returns float64 with shape preserved.
    """
    arr = np.asarray(lab, dtype=np.float64)
    out = np.empty(arr.shape, dtype=np.float64)
    out[..., 0] = arr[..., 0]
    out[..., 1] = np.hypot(arr[..., 1], arr[..., 2])
    out[..., 2] = np.degrees(np.arctan2(arr[..., 2], arr[..., 1])) % 360.0
    return out


# CIE76


def delta_e76(lab1: Lab, lab2: Lab) -> NDArray[np.float64]:
    """Euclidean Lab distance. Broadcasts over leading axes."""
    diff = np.asarray(lab1, dtype=np.float64) - np.asarray(lab2, dtype=np.float64)
    return np.sqrt(np.sum(diff * diff, axis=-1))


# CIEDE2000


def delta_e2000_pair(
    lab1: Sequence[float] | NDArray[np.floating],
    lab2: Sequence[float] | NDArray[np.floating],
) -> float:
    """
    CIEDE2000 distance between two Lab colours, one pair at a time.
    Scalar reference for delta_e2000_vec; the pipeline itself only uses the
    vectorised form.
    """
    L1, a1, b1 = float(lab1[0]), float(lab1[1]), float(lab1[2])
    L2, a2, b2 = float(lab2[0]), float(lab2[1]), float(lab2[2])

    C1 = math.hypot(a1, b1)
    C2 = math.hypot(a2, b2)
    C_bar = 0.5 * (C1 + C2)
    G = 0.5 * (1.0 - math.sqrt((C_bar**7) / (C_bar**7 + 25.0**7)))

    a1p = (1.0 + G) * a1
    a2p = (1.0 + G) * a2
    C1p = math.hypot(a1p, b1)
    C2p = math.hypot(a2p, b2)

    def _hue(a_val: float, b_val: float) -> float:
        if a_val == 0.0 and b_val == 0.0:
            return 0.0
        ang = math.degrees(math.atan2(b_val, a_val))
        return ang + 360.0 if ang < 0.0 else ang

    h1p = _hue(a1p, b1)
    h2p = _hue(a2p, b2)

    dLp = L2 - L1
    dCp = C2p - C1p

    dhp = h2p - h1p
    if C1p * C2p == 0.0:
        dhp = 0.0
    elif dhp > 180.0:
        dhp -= 360.0
    elif dhp < -180.0:
        dhp += 360.0

    dHp = 2.0 * math.sqrt(C1p * C2p) * math.sin(math.radians(dhp / 2.0))

    L_bar = 0.5 * (L1 + L2)
    C_bar_p = 0.5 * (C1p + C2p)

    if C1p * C2p == 0.0:
        h_bar_p = h1p + h2p
    else:
        h_sum = h1p + h2p
        h_diff = abs(h1p - h2p)
        if h_diff <= 180.0:
            h_bar_p = 0.5 * h_sum
        elif h_sum < 360.0:
            h_bar_p = 0.5 * (h_sum + 360.0)
        else:
            h_bar_p = 0.5 * (h_sum - 360.0)

    T = (
        1.0
        - 0.17 * math.cos(math.radians(h_bar_p - 30.0))
        + 0.24 * math.cos(math.radians(2.0 * h_bar_p))
        + 0.32 * math.cos(math.radians(3.0 * h_bar_p + 6.0))
        - 0.20 * math.cos(math.radians(4.0 * h_bar_p - 63.0))
    )

    d_theta = 30.0 * math.exp(-(((h_bar_p - 275.0) / 25.0) ** 2.0))
    R_c = 2.0 * math.sqrt((C_bar_p**7) / (C_bar_p**7 + 25.0**7))

    S_l = 1.0 + (0.015 * ((L_bar - 50.0) ** 2.0)) / math.sqrt(
        20.0 + ((L_bar - 50.0) ** 2.0)
    )
    S_c = 1.0 + 0.045 * C_bar_p
    S_h = 1.0 + 0.015 * C_bar_p * T
    R_t = -math.sin(math.radians(2.0 * d_theta)) * R_c

    kL = kC = kH = 1.0
    dE_sq = (
        (dLp / (kL * S_l)) ** 2
        + (dCp / (kC * S_c)) ** 2
        + (dHp / (kH * S_h)) ** 2
        + R_t * (dCp / (kC * S_c)) * (dHp / (kH * S_h))
    )
    return float(math.sqrt(max(0.0, dE_sq)))


def _hue_degrees(a_val: np.ndarray, b_val: np.ndarray) -> np.ndarray:
    """atan2 hue in [0,360); exact zero for a=b=0."""
    ang = np.degrees(np.arctan2(b_val, a_val)) % 360.0
    return np.where((a_val == 0.0) & (b_val == 0.0), 0.0, ang)


def delta_e2000_vec(lab1: Lab, lab2: Lab) -> NDArray[np.float64]:
    """
    Vectorised CIEDE2000. Inputs broadcast against each other over the
    leading axes; the last axis holds (L, a, b).

    Args:
      lab1: Lab [...,3]
      lab2: Lab [...,3]
    Returns:
      float64 array with the broadcast leading shape
    """
    x = np.asarray(lab1, dtype=np.float64)
    y = np.asarray(lab2, dtype=np.float64)
    L1, a1, b1 = x[..., 0], x[..., 1], x[..., 2]
    L2, a2, b2 = y[..., 0], y[..., 1], y[..., 2]

    C_bar = 0.5 * (np.hypot(a1, b1) + np.hypot(a2, b2))
    C_bar7 = C_bar**7
    G = 0.5 * (1.0 - np.sqrt(C_bar7 / (C_bar7 + 25.0**7)))

    a1p = (1.0 + G) * a1
    a2p = (1.0 + G) * a2
    C1p = np.hypot(a1p, b1)
    C2p = np.hypot(a2p, b2)
    h1p = _hue_degrees(a1p, b1)
    h2p = _hue_degrees(a2p, b2)
    chroma_prod = C1p * C2p
    achromatic = chroma_prod == 0.0

    dLp = L2 - L1
    dCp = C2p - C1p
    dhp = h2p - h1p
    dhp = np.where(dhp > 180.0, dhp - 360.0, np.where(dhp < -180.0, dhp + 360.0, dhp))
    dhp = np.where(achromatic, 0.0, dhp)
    dHp = 2.0 * np.sqrt(chroma_prod) * np.sin(np.radians(dhp / 2.0))

    L_bar = 0.5 * (L1 + L2)
    C_bar_p = 0.5 * (C1p + C2p)
    h_sum = h1p + h2p
    h_bar_p = np.where(
        np.abs(h1p - h2p) <= 180.0,
        0.5 * h_sum,
        np.where(h_sum < 360.0, 0.5 * (h_sum + 360.0), 0.5 * (h_sum - 360.0)),
    )
    h_bar_p = np.where(achromatic, h_sum, h_bar_p)

    T = (
        1.0
        - 0.17 * np.cos(np.radians(h_bar_p - 30.0))
        + 0.24 * np.cos(np.radians(2.0 * h_bar_p))
        + 0.32 * np.cos(np.radians(3.0 * h_bar_p + 6.0))
        - 0.20 * np.cos(np.radians(4.0 * h_bar_p - 63.0))
    )
    d_theta = 30.0 * np.exp(-(((h_bar_p - 275.0) / 25.0) ** 2.0))
    C_bar_p7 = C_bar_p**7
    R_c = 2.0 * np.sqrt(C_bar_p7 / (C_bar_p7 + 25.0**7))

    L_off = (L_bar - 50.0) ** 2.0
    S_l = 1.0 + (0.015 * L_off) / np.sqrt(20.0 + L_off)
    S_c = 1.0 + 0.045 * C_bar_p
    S_h = 1.0 + 0.015 * C_bar_p * T
    R_t = -np.sin(np.radians(2.0 * d_theta)) * R_c

    tL = dLp / S_l
    tC = dCp / S_c
    tH = dHp / S_h
    return np.sqrt(np.maximum(0.0, tL * tL + tC * tC + tH * tH + R_t * tC * tH))


def delta_e2000_matrix(lab_a: Lab, lab_b: Lab) -> NDArray[np.float64]:
    """All-pairs CIEDE2000: rows of lab_a [N,3] against rows of lab_b [M,3] -> [N,M]."""
    a = np.asarray(lab_a, dtype=np.float64).reshape(-1, 3)
    b = np.asarray(lab_b, dtype=np.float64).reshape(-1, 3)
    return delta_e2000_vec(a[:, None, :], b[None, :, :])


__all__ = [
    "rgb_to_linear",
    "rgb_to_lab",
    "hex_to_lab",
    "hexes_to_lab",
    "lab_to_lch",
    "delta_e76",
    "delta_e2000_pair",
    "delta_e2000_vec",
    "delta_e2000_matrix",
]
