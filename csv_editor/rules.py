"""
Fixed editing and export rules.

This file exists to make the simplicity boundaries explicit: fields are split
on the delimiter only, with no quoting and no escaping on either side.
"""

DEFAULT_DELIMITER = ","
LINE_SEPARATOR = "\n"

ACCEPTED_EXTENSIONS = (".csv",)
ACCEPTED_MEDIA_TYPES = ("text/csv",)

EXPORT_FILENAME = "updated_data.csv"
EXPORT_MEDIA_TYPE = "text/csv;charset=utf-8"
