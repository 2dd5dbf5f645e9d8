from dataclasses import dataclass

from .errors import ConfigurationError

ORDER = 2  # order of the equations of motion (position, velocity)
DIMS = 3
VALUES_PER_PARTICLE = ORDER * DIMS


@dataclass(frozen=True)
class Layout:
    """Stride pair addressing the flat state buffer.

    Position component j of particle i lives at ``i*ps + j*vs``, velocity
    component j at ``i*ps + (3+j)*vs``.
    """

    ps: int
    vs: int

    @classmethod
    def aos(cls) -> "Layout":
        return cls(ps=VALUES_PER_PARTICLE, vs=1)

    @classmethod
    def soa(cls, n: int) -> "Layout":
        return cls(ps=1, vs=n)

    @classmethod
    def from_name(cls, name: str, n: int) -> "Layout":
        if name == "aos":
            return cls.aos()
        if name == "soa":
            return cls.soa(n)
        raise ConfigurationError(f"unknown layout {name!r}; expected 'aos' or 'soa'")


@dataclass
class RunParams:
    n: int = 256
    t: int = 32
    s: int = 128
    dtype: str = "float64"  # "float32" or "float64"
    layout: str = "aos"  # "aos" or "soa"

    def __post_init__(self) -> None:
        for name in ("n", "t", "s"):
            value = getattr(self, name)
            if value < 1:
                raise ConfigurationError(f"{name} must be a positive integer, got {value}")
        if self.dtype not in ("float32", "float64"):
            raise ConfigurationError(f"dtype must be 'float32' or 'float64', got {self.dtype!r}")
        if self.layout not in ("aos", "soa"):
            raise ConfigurationError(f"layout must be 'aos' or 'soa', got {self.layout!r}")
