"""Feature-flag identifiers consulted by the bundled codecs."""

PRETTY_PRINT = "urn:halbuilder:prettyprint"
STRIP_NULLS = "urn:halbuilder:stripnulls"
# Render single-member link/embedded relations as a bare object instead of an array.
COALESCE_ARRAYS = "urn:halbuilder:coalescearrays"

# Short names accepted from configuration (HALBUILDER_FLAGS).
FLAG_ALIASES = {
    "pretty_print": PRETTY_PRINT,
    "strip_nulls": STRIP_NULLS,
    "coalesce_arrays": COALESCE_ARRAYS,
}

__all__ = ["PRETTY_PRINT", "STRIP_NULLS", "COALESCE_ARRAYS", "FLAG_ALIASES"]
