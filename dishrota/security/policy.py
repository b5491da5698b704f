"""PIN policy constants.

PINs are a local shared secret, compared as plain strings. They are not
hashed, rate limited or locked out.
"""

import re

PIN_MIN_DIGITS = 4
PIN_MAX_DIGITS = 8

PIN_PATTERN = re.compile(rf"^[0-9]{{{PIN_MIN_DIGITS},{PIN_MAX_DIGITS}}}$")
