"""
Summary: Package marker for suggestion adapters.
Why: Keep content fingerprint providers discoverable.
"""

from .fingerprint import SampledContentFingerprinter

__all__ = ["SampledContentFingerprinter"]
