"""
Complex numbers and complex sample buffers for the FFT.

A Complex holds a real and an imaginary part. The parts may be plain floats
or numpy arrays of the same shape, so one type covers a single twiddle factor
and a strided slice of a whole buffer.
"""

from typing import NamedTuple, Union

import numpy as np

Scalar = Union[float, np.ndarray]


class Complex(NamedTuple):
    """Complex value (or struct-of-arrays of values)."""
    real: Scalar
    imag: Scalar

    def __add__(self, other: "Complex") -> "Complex":
        return Complex(self.real + other.real, self.imag + other.imag)

    def __sub__(self, other: "Complex") -> "Complex":
        return Complex(self.real - other.real, self.imag - other.imag)

    def __mul__(self, other: "Complex") -> "Complex":
        return Complex(
            self.real * other.real - self.imag * other.imag,
            self.real * other.imag + self.imag * other.real,
        )

    @classmethod
    def from_angle(cls, angle: float) -> "Complex":
        """Unit complex number e^(i*angle)."""
        return cls(float(np.cos(angle)), float(np.sin(angle)))

    def magnitude_squared(self) -> Scalar:
        return self.real * self.real + self.imag * self.imag


class ComplexBuffer:
    """
    Fixed-length buffer of complex samples.

    Stored as two float64 arrays so whole strided slices can be read and
    written as a single Complex.
    """

    def __init__(self, length: int):
        self.real = np.zeros(length, dtype=np.float64)
        self.imag = np.zeros(length, dtype=np.float64)

    @classmethod
    def from_values(cls, values) -> "ComplexBuffer":
        """Build a buffer from a sequence of Python/numpy complex numbers."""
        values = np.asarray(values, dtype=np.complex128)
        buffer = cls(len(values))
        buffer.real[:] = values.real
        buffer.imag[:] = values.imag
        return buffer

    def __len__(self) -> int:
        return len(self.real)

    def __getitem__(self, index) -> Complex:
        return Complex(self.real[index], self.imag[index])

    def __setitem__(self, index, value: Complex):
        self.real[index] = value.real
        self.imag[index] = value.imag

    def load_real(self, samples: np.ndarray):
        """Copy real samples in, resetting every imaginary part to 0."""
        self.real[:] = samples
        self.imag.fill(0.0)

    def swap(self, i: int, j: int):
        self.real[i], self.real[j] = self.real[j], self.real[i]
        self.imag[i], self.imag[j] = self.imag[j], self.imag[i]

    def power(self) -> np.ndarray:
        """Per-element real^2 + imag^2."""
        return self.real * self.real + self.imag * self.imag

    def to_numpy(self) -> np.ndarray:
        return self.real + 1j * self.imag
