"""
AnonBBS - Anonymous Message Bulletin

A small bulletin core where anyone may post short messages, tag them,
and reply in bounded threads. Posts never record who wrote them.
"""

__version__ = "0.1.0"
__author__ = "AnonBBS Project"
