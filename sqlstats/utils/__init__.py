from sqlstats.utils import logging

__all__ = ("logging",)
