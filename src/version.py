# src/version.py - v1
"""Package version and asset format version."""

__version__ = "0.1.0"

# Mixed into every environment digest. Bump when the record layout or
# digest computation changes so previously built artifacts are invalidated.
FORMAT_VERSION = "2.0.0"
