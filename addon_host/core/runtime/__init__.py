"""Host runtime modules: settings, clocks and the SimState owner."""
