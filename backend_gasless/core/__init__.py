"""
Core cross-cutting pieces: the exception hierarchy shared by relay and API.
"""
