from decimal import Decimal
from typing import Optional

import attrs


@attrs.frozen
class PromotionOutcome:
    """Result of applying a promotional code: the amount to charge and whether a discount happened"""

    amount: Decimal
    applied: bool
    code: Optional[str] = None
