"""
Business logic constants for the affiliate program.

Central location for program rules that are not part of the tier ladder.
Tier thresholds and commission rates live in compensation.constants.
"""

from decimal import Decimal

from compensation.constants import UPLINE_SCAN_LIMIT


# Referral codes: SKY-XXXXXX
REFERRAL_CODE_PREFIX = "SKY-"
REFERRAL_CODE_LENGTH = 6
REFERRAL_CODE_ALPHABET = "ABCDEFGHIJKLMNOPQRSTUVWXYZ0123456789"
REFERRAL_CODE_MAX_ATTEMPTS = 10

# Upline rows loaded per distribution (one recursive query)
UPLINE_SNAPSHOT_DEPTH = UPLINE_SCAN_LIMIT

# Withdrawals (defaults, overridable through settings)
DEFAULT_MIN_WITHDRAWAL = Decimal("50")
DEFAULT_WITHDRAWAL_FEE_PERCENT = Decimal("0")
