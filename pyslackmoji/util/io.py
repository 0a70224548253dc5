# -----------------------------------------------------------------------------
# console formatting helpers: SGR sequences, sizes and durations
# -----------------------------------------------------------------------------
from __future__ import annotations

import os
import re
import sys
from math import floor, trunc


class SGRSequence:
    def __init__(self, *params: int):
        self.params = params

    def __format__(self, format_spec: str) -> str:
        return str(self)

    def __str__(self):
        if not SGRRegistry.enabled:
            return ''
        return '\033[' + ';'.join(map(str, self.params)) + 'm'


class SGRRegistry:
    # only what the logger echo needs
    FMT_RESET = SGRSequence(0)
    FMT_RED = SGRSequence(31)
    FMT_YELLOW = SGRSequence(33)
    FMT_CYAN = SGRSequence(36)

    SGR_REGEX = re.compile(r'\033\[[0-9;]*m')

    # https://no-color.org
    enabled: bool = 'NO_COLOR' not in os.environ and sys.stdout.isatty()

    @staticmethod
    def remove_sgr_seqs(s: str) -> str:
        return SGRRegistry.SGR_REGEX.sub('', s)

    @staticmethod
    def wrap(text: str, seq: SGRSequence) -> str:
        return f'{seq}{text}{SGRRegistry.FMT_RESET}'


time_units = [
    {"name": "sec", "in_next": 60},
    {"name": "min", "in_next": 60},
    {"name": "hr", "in_next": 24},
    {"name": "day", "in_next": 0},
]


def fmt_time_delta(seconds: float) -> str:
    # 13 sec, 17 min, 5h 23m, 11 hr, 3 day
    seconds = max(0.0, seconds)
    num = seconds
    prev_frac = ''

    for unit in time_units:
        unit_name = unit["name"]
        next_unit_ratio = unit["in_next"]

        if num < 1:
            return f'<1 {unit_name}'
        elif not next_unit_ratio:
            return f'{num:.0f} {unit_name}'
        elif num < 10 and unit_name == "hr":
            return f'{num:1.0f}{unit_name[0]:1s} {prev_frac}'.strip()
        elif num < next_unit_ratio:
            return f'{num:.0f} {unit_name}'

        next_num = floor(num / next_unit_ratio)
        prev_frac = '{:d}{:1s}'.format(floor(num - (next_num * next_unit_ratio)), unit_name[0])
        num = next_num

    return f'{seconds:.1e} sec'


def fmt_sizeof(num: float, separator=' ', unit='b') -> str:
    # result max length: 8
    # 5 chars for number, 2 chars for unit, 1 for separator (with default options)
    num = max(0, num)
    for unit_idx, unit_prefix in enumerate(['', 'k', 'M', 'G', 'T', 'P', 'E', 'Z']):
        unit_full = f'{unit_prefix}{unit}'
        if num >= 1024.0:
            num /= 1024.0
            continue
        if unit_idx == 0:
            num_str = f'{int(num):5d}'
        else:
            num_str = f'{AutoFloat(num):5f}'
        return f'{num_str}{separator}{unit_full}'

    return f'{num!s}{unit}'


class AutoFloat(float):
    # fixed-length float printing, decimal digits amount is adjusted to fill the width:
    # f'{AutoFloat(1234.56):4f}'   ->   1235
    # f'{AutoFloat(  12.56):4f}'   ->   12.6
    # f'{AutoFloat(   1.56):4f}'   ->   1.56

    RE_MAX_LEN = re.compile(r'(\d+)([fd])$')

    def __format__(self, format_spec: str) -> str:
        return super().__format__(self._convert_spec(format_spec))

    def _convert_spec(self, format_spec: str) -> str:
        spec_matches = self.RE_MAX_LEN.findall(format_spec)
        if len(spec_matches) != 1:
            raise ValueError('AutoFloat format should be "4f" or "3d"')

        max_len, ftype = int(spec_matches[0][0]), spec_matches[0][1]
        if ftype == 'd':
            return self.RE_MAX_LEN.sub(f'{max_len}.0f', format_spec)

        max_decimals_len = 2
        integer_len = len(str(trunc(self)))
        decimals_and_point_len = min(max_decimals_len + 1, max_len - integer_len)

        decimals_len = 0
        if decimals_and_point_len >= 2:  # dot without decimals makes no sense
            decimals_len = decimals_and_point_len - 1

        return self.RE_MAX_LEN.sub(f'{max_len}.{decimals_len}f', format_spec)
