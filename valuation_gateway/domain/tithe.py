"""Tithe calculation - a percentage of net income over a period"""

from decimal import Decimal

from valuation_gateway.domain.exceptions import InvalidParameterError, InvalidDateRangeError
from valuation_gateway.domain.models import TitheOptions, TitheResult
from valuation_gateway.domain.ports import LedgerReader
from valuation_gateway.utils.money import ZERO, to_money


class TitheCalculator:
    """Derives a tithe from the ledger's net income for a period"""

    def __init__(self, ledger: LedgerReader):
        self.ledger = ledger

    async def calculate(self, business_id: str, options: TitheOptions) -> TitheResult:
        """
        Compute the tithe for a business.

        Requirements:
        - percentage within [0, 100]
        - disabled tithe returns 0 without reading the ledger
        - amount = net income × percentage / 100, rounded half-up to cents

        Dates are optional; a missing endpoint leaves that side of the
        period open. Both present and inverted is an error.

        Raises:
            InvalidParameterError: percentage out of range
            InvalidDateRangeError: start_date after end_date
        """
        percentage = Decimal(str(options.percentage))
        if percentage < 0 or percentage > 100:
            raise InvalidParameterError(f"Tithe percentage must be between 0 and 100, got {options.percentage}")
        if options.start_date and options.end_date and options.start_date > options.end_date:
            raise InvalidDateRangeError(f"start_date {options.start_date} is after end_date {options.end_date}")

        if not options.enabled:
            return TitheResult(
                start_date=options.start_date,
                end_date=options.end_date,
                percentage=percentage,
                enabled=False,
                net_income=None,
                amount=ZERO,
            )

        net_income = to_money(await self.ledger.get_net_income(business_id, options.start_date, options.end_date))

        return TitheResult(
            start_date=options.start_date,
            end_date=options.end_date,
            percentage=percentage,
            enabled=True,
            net_income=net_income,
            amount=to_money(net_income * percentage / 100),
        )
