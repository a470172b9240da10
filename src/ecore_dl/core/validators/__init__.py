"""Model validators."""

from .well_formedness import WellFormednessChecker, is_blank_name

__all__ = ["WellFormednessChecker", "is_blank_name"]
