import logging
from decimal import Decimal
from typing import Iterable, Optional, Tuple

from mini_pos_cafe.config import settings
from mini_pos_cafe.models import OrderLineItem
from mini_pos_cafe.schemas.order import VATBreakdown

logger = logging.getLogger(__name__)

HUNDRED = Decimal("100")


def split_gross(gross: Decimal, rate: Decimal) -> Tuple[Decimal, Decimal]:
    """
    Делит брутто-сумму на нетто и НДС по ставке rate (в процентах).
    НДС считается как разность, поэтому net + vat == gross без погрешности.
    """
    net = gross / (1 + Decimal(rate) / HUNDRED)
    return net, gross - net


def calculate_vat_breakdown(
    items: Iterable[OrderLineItem],
    rates: Optional[Tuple[Decimal, Decimal]] = None,
) -> VATBreakdown:
    """
    Разбивка нетто/НДС по двум ставкам (по умолчанию 7% и 19%).

    - брутто позиции = quantity * price
    - брутто копится по корзинам ставок точно (Decimal), а делится на
      нетто и НДС один раз на корзину: результат не зависит от порядка позиций
    - позиции с нераспознанной ставкой в разбивку не попадают
    """
    low_rate, high_rate = rates or (settings.VAT_RATE_LOW, settings.VAT_RATE_HIGH)
    low_rate, high_rate = Decimal(low_rate), Decimal(high_rate)

    gross_low = Decimal("0")
    gross_high = Decimal("0")
    for item in items:
        gross = item.price * item.quantity
        if item.vat == low_rate:
            gross_low += gross
        elif item.vat == high_rate:
            gross_high += gross
        else:
            logger.warning(
                "Line item %s has unsupported VAT rate %s%%, excluded from breakdown",
                item.id, item.vat,
            )

    net_low, vat_low = split_gross(gross_low, low_rate)
    net_high, vat_high = split_gross(gross_high, high_rate)

    return VATBreakdown(
        low_rate=low_rate,
        high_rate=high_rate,
        net_low=net_low,
        vat_low=vat_low,
        net_high=net_high,
        vat_high=vat_high,
    )
