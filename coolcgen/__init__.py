"""Generate MIPS assembly from typed Cool syntax trees."""

__version__ = "0.1.0"