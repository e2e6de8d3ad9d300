"""
airq: Air Quality Reporting Package.

Components:
    - ingestion: HTTP client wrapper, OpenWeatherMap geocoder and pollution connector
    - classification: severity band classifier
    - rules: pollutant threshold table, band labels and colors
    - terminal: ANSI escapes and the progress spinner
    - reports: terminal report renderer
"""

__version__ = "1.0.0"
