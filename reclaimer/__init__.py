"""AWS account reclaimer.

Scrubs released AWS accounts of customer resources and credentials before
they are returned to the account pool.
"""

__version__ = "0.1.0"
