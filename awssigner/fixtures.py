"""
CSV fixture loading for template variables.
"""

import csv
from logging import getLogger

from .responselog import DEBUG, ERRORS

log = getLogger("awssigner.fixtures")

def load_csv_records(path, appender=None):
    """
    load_csv_records(path, appender=None) -> List[Dict[str, str]]

    Read a CSV file whose first row names the columns and return one dict
    per data row. Blank lines are skipped.

    A file that cannot be read or parsed yields an empty list; the failure
    is logged (and appended to the error log if appender is given) rather
    than raised.
    """
    try:
        with open(path, "r", encoding="utf-8", newline="") as fd:
            records = [
                dict(row) for row in csv.DictReader(fd)
                if any(value for value in row.values())]
    except (OSError, UnicodeDecodeError, csv.Error) as e:
        message = "CSV Load Failed for %s: %s" % (path, e)
        log.error(message)
        if appender is not None:
            appender.append(ERRORS, message)
        return []

    message = "Loaded %d records from CSV: %s" % (len(records), path)
    log.debug(message)
    if appender is not None:
        appender.append(DEBUG, message)

    return records
