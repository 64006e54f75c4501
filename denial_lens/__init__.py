"""
denial_lens: match claim-denial letters against a local claims dataset.
"""

__version__ = "1.0.0"
