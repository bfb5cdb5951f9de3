"""
PicSorter - review images and write a shell script that files them.
"""

from .services import SortService, UserFacingError

__version__ = "0.1.0"
__all__ = ['SortService', 'UserFacingError']
