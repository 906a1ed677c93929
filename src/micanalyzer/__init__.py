"""
micanalyzer - Live microphone features for motion and visuals

Turns a continuously captured microphone signal into five smoothed values
in the 0..1 range, refreshed once per host frame:
- Loudness (RMS)
- Peak level
- Low / mid / high band energy share (0-300 Hz, 300 Hz-4 kHz, >4 kHz)
"""

__version__ = "1.0.0"
__author__ = "micanalyzer contributors"
