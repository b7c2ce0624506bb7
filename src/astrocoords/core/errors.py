class AstroCoordsError(Exception):
    """Base error."""

class ParseError(AstroCoordsError, ValueError):
    """Raised when an angle or epoch string cannot be understood."""

class CoordinateTypeError(AstroCoordsError, ValueError):
    """Raised when a coordinate-type keyword is not recognized."""

class UnsupportedVelocityDefinition(AstroCoordsError, ValueError):
    """Raised for velocity definitions or frames that have no Doppler rule."""
