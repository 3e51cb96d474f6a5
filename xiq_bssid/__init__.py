# ExtremeCloud IQ BSSID inventory: device paging, CLI dispatch, interface parsing, reports.
__version__ = "0.1.0"
