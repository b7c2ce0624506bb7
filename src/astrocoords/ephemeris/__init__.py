"""High-precision planetary positions (optional).

Thin wrappers around external ephemeris libraries, usable wherever a
`PlanetEphemeris` is accepted. Install with:
  pip install "astrocoords[ephemeris]"
"""

def require_ephemeris():
    """Raise a clear error if ephemeris extras aren't installed."""
    try:
        import jplephem  # noqa: F401
        import skyfield  # noqa: F401
    except ImportError as e:
        raise RuntimeError('Ephemeris support requires: pip install "astrocoords[ephemeris]"') from e
