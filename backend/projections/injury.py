"""
Injury status classification.

One classifier turns the roster's free-form status string into a tagged
status, and both the availability weighting and the OUT exclusion read from
it. OUT is unconditional: turning injury weighting off resets DTD and GTD to
1.0 but never brings an OUT player back into the candidate pool.
"""

import logging
from enum import Enum
from typing import Optional, Union

logger = logging.getLogger(__name__)


class InjuryStatus(str, Enum):
    HEALTHY = 'healthy'
    DTD = 'DTD'
    GTD = 'GTD'
    OUT = 'OUT'


OUT_STATUSES = {'O', 'OUT', 'IR', 'SUSP'}
DTD_STATUSES = {'DTD', 'Q', 'QUESTIONABLE'}
GTD_STATUSES = {'GTD', 'P', 'PROBABLE'}

# DTD default follows the start/sit advisor; the schedule projection used
# 0.60. Configurable through DTD_MULTIPLIER until product picks one.
DEFAULT_DTD_MULTIPLIER = 0.70
DEFAULT_GTD_MULTIPLIER = 0.85


def classify_status(status: Optional[str]) -> InjuryStatus:
    """Classify a status string (case-insensitive, trimmed)."""
    if not status:
        return InjuryStatus.HEALTHY

    s = status.upper().strip()
    if s in OUT_STATUSES or '(O)' in s:
        return InjuryStatus.OUT
    if s in DTD_STATUSES or 'DTD' in s:
        return InjuryStatus.DTD
    if s in GTD_STATUSES or 'GTD' in s:
        return InjuryStatus.GTD
    return InjuryStatus.HEALTHY


def is_out(status: Union[str, InjuryStatus, None]) -> bool:
    if not isinstance(status, InjuryStatus):
        status = classify_status(status)
    return status == InjuryStatus.OUT


def injury_multiplier(
    status: Union[str, InjuryStatus, None],
    apply_multipliers: bool = True,
    dtd_multiplier: float = DEFAULT_DTD_MULTIPLIER,
    gtd_multiplier: float = DEFAULT_GTD_MULTIPLIER,
) -> float:
    """
    Expected-availability weight for a status.

    Args:
        status: Raw status string or an already classified InjuryStatus
        apply_multipliers: When False, DTD/GTD weigh 1.0 (OUT stays 0)
        dtd_multiplier: Weight for DTD / Q
        gtd_multiplier: Weight for GTD / P

    Returns:
        Multiplier in [0, 1]
    """
    if not isinstance(status, InjuryStatus):
        status = classify_status(status)

    if status == InjuryStatus.OUT:
        return 0.0
    if not apply_multipliers:
        return 1.0
    if status == InjuryStatus.DTD:
        return dtd_multiplier
    if status == InjuryStatus.GTD:
        return gtd_multiplier
    return 1.0
