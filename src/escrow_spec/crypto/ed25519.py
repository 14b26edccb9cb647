"""Edwards25519 point decompression (RFC 8032, section 5.1.3).

Only curve membership is needed here: a 32-byte string that decodes to a
valid point could be someone's public key, so program-derived addresses must
not.
"""

from __future__ import annotations

P = 2**255 - 19
D = (-121665 * pow(121666, P - 2, P)) % P
SQRT_M1 = pow(2, (P - 1) // 4, P)


def is_on_curve(encoded: bytes) -> bool:
    if len(encoded) != 32:
        return False

    y = int.from_bytes(encoded, "little") & ((1 << 255) - 1)
    sign = encoded[31] >> 7
    if y >= P:
        return False

    y2 = y * y % P
    u = (y2 - 1) % P
    v = (D * y2 + 1) % P
    x2 = u * pow(v, P - 2, P) % P

    x = pow(x2, (P + 3) // 8, P)
    if (x * x - x2) % P != 0:
        x = x * SQRT_M1 % P
    if (x * x - x2) % P != 0:
        return False

    if x == 0 and sign == 1:
        return False
    return True
