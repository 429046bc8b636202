"""Typed data models used across ldstrpatch stages."""

from .datatypes import NormalizeReport, PatchReport, ReplacementRecord

__all__ = ["NormalizeReport", "PatchReport", "ReplacementRecord"]
