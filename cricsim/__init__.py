"""
cricsim - ball-by-ball cricket match simulation for a season-long career mode
"""
__version__ = "0.1.0"
