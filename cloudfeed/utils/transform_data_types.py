'''
This module contains functions to turn the string attributes of AWS offer files into typed values.
'''
import math
import re
from typing import Any, Optional

MEMORY_PATTERN = re.compile(r'([\d.]+)\s*GiB', re.IGNORECASE)


def safe_float_convert(value: Any) -> Optional[float]:
    '''
    Convert a price or size field to float, returning None for empty or unparseable values.
    '''
    if value is None or value == '' or value == 'None':
        return None
    try:
        return float(value)
    except (ValueError, TypeError):
        return None


def positive_float(value: Any) -> Optional[float]:
    '''
    Like safe_float_convert, but zero and negative values are also treated as missing.
    '''
    number = safe_float_convert(value)
    if number is None or not math.isfinite(number) or number <= 0:
        return None
    return number


def parse_vcpu(value: Any) -> Optional[int]:
    '''
    Parse the vcpu attribute ("2", "96"). Missing, zero, fractional or garbage gives None.
    '''
    number = positive_float(value)
    if number is None or number < 1 or not number.is_integer():
        return None
    return int(number)


def parse_memory_gib(value: Any) -> Optional[float]:
    '''
    Extract the GiB figure from the memory attribute ("8 GiB", "0.5 GiB").
    '''
    if not value:
        return None
    match = MEMORY_PATTERN.search(str(value))
    if not match:
        return None
    return safe_float_convert(match.group(1))
