"""
In-place iterative radix-2 FFT (Cooley-Tukey).

The forward transform uses the positive exponent e^(+2*pi*i/L) and the
inverse the negative one, scaled by 1/n. For real input the magnitude
spectrum is the same as with the opposite convention.
"""

import math

from .complex_math import Complex, ComplexBuffer


def is_power_of_two(n: int) -> bool:
    return n > 0 and (n & (n - 1)) == 0


def next_power_of_two(n: int) -> int:
    """Smallest power of two >= n (1 for n <= 1)."""
    if n <= 1:
        return 1
    return 1 << (n - 1).bit_length()


def transform(buffer: ComplexBuffer, inverse: bool = False) -> None:
    """
    Transform buffer in place.

    Args:
        buffer: Complex samples, length must be a power of two
        inverse: False for time -> frequency, True for frequency -> time

    Raises:
        ValueError: If the buffer length is not a power of two
    """
    n = len(buffer)
    if not is_power_of_two(n):
        raise ValueError(f"FFT buffer length must be a power of two, got {n}")

    _bit_reverse(buffer, n)

    sign = -1.0 if inverse else 1.0
    length = 2
    while length <= n:
        half = length // 2
        wlen = Complex.from_angle(sign * 2.0 * math.pi / length)
        w = Complex(1.0, 0.0)
        # Offset j of every block in this stage is handled by one strided slice
        for j in range(half):
            top = slice(j, n, length)
            bottom = slice(j + half, n, length)
            u = buffer[top]
            v = buffer[bottom] * w
            upper, lower = u + v, u - v
            buffer[top] = upper
            buffer[bottom] = lower
            w = w * wlen
        length <<= 1

    if inverse:
        buffer.real /= n
        buffer.imag /= n


def _bit_reverse(buffer: ComplexBuffer, n: int) -> None:
    """Swap element i with element reverse_bits(i) using a running counter."""
    j = 0
    for i in range(1, n):
        bit = n >> 1
        while j & bit:
            j ^= bit
            bit >>= 1
        j ^= bit
        if i < j:
            buffer.swap(i, j)
