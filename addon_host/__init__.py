"""
addon_host
----------
Headless host core for addon UI scripts: widget graph, anchor layout,
script/event dispatch and timers.
"""

__version__ = "0.1.0"
