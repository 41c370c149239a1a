"""Input validation for contract creation and payments.

Every check runs and all violations are reported together in one
``ValidationError``; nothing is created or recorded when any check fails.
"""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Any, TypeVar

from loan_ledger.engine.rates import to_decimal
from loan_ledger.exceptions import ValidationError
from loan_ledger.models.contract import ContractInput, LoanContract, LoanTerms
from loan_ledger.models.enums import (
    AmortizationSystem,
    Compounding,
    ContractType,
    DayCountConvention,
    GraceType,
    Periodicity,
)

E = TypeVar("E", bound=Enum)


def _coerce_enum(enum_type: type[E], value: Any, label: str, errors: list[str]) -> E | None:
    if isinstance(value, enum_type):
        return value
    try:
        return enum_type(str(value).strip().upper())
    except ValueError:
        allowed = ", ".join(member.value for member in enum_type)
        errors.append(f"{label} must be one of {allowed}, got {value!r}")
        return None


def _coerce_decimal(value: Any, label: str, errors: list[str]) -> Decimal | None:
    try:
        number = to_decimal(value)
    except (InvalidOperation, ValueError, TypeError):
        errors.append(f"{label} is not a number: {value!r}")
        return None
    if not number.is_finite():
        errors.append(f"{label} must be finite")
        return None
    return number


def _is_date(value: Any) -> bool:
    return isinstance(value, date) and not isinstance(value, datetime)


def build_terms(
    data: ContractInput,
    default_day_count: DayCountConvention = DayCountConvention.ACT_365,
    default_compounding: Compounding = Compounding.EXPONENTIAL,
) -> LoanTerms:
    """Validate creation input and normalize it into immutable terms.

    Raises
    ------
    ValidationError
        If any field is missing or out of range.
    """
    errors: list[str] = []

    counterparty = (data.counterparty or "").strip()
    if not counterparty:
        errors.append("counterparty is required")

    currency = (data.currency or "").strip().upper()
    if len(currency) != 3 or not currency.isalpha():
        errors.append(f"currency must be a 3-letter code, got {data.currency!r}")

    contract_type = _coerce_enum(ContractType, data.contract_type, "contract_type", errors)
    system = _coerce_enum(AmortizationSystem, data.system, "system", errors)
    periodicity = _coerce_enum(Periodicity, data.periodicity, "periodicity", errors)
    day_count = _coerce_enum(
        DayCountConvention,
        data.day_count if data.day_count is not None else default_day_count,
        "day_count",
        errors,
    )
    compounding = _coerce_enum(
        Compounding,
        data.compounding if data.compounding is not None else default_compounding,
        "compounding",
        errors,
    )
    grace_type = _coerce_enum(GraceType, data.grace_type, "grace_type", errors)

    principal = _coerce_decimal(data.principal, "principal", errors)
    if principal is not None and principal <= 0:
        errors.append("principal must be greater than zero")

    rate = _coerce_decimal(data.annual_rate_percent, "annual_rate_percent", errors)
    if rate is not None and rate <= 0:
        errors.append("annual_rate_percent must be greater than zero")

    if not isinstance(data.installment_count, int) or isinstance(data.installment_count, bool):
        errors.append("installment_count must be an integer")
    elif data.installment_count <= 0:
        errors.append("installment_count must be greater than zero")

    if not isinstance(data.grace_periods, int) or data.grace_periods < 0:
        errors.append("grace_periods must be a non-negative integer")

    if not _is_date(data.start_date):
        errors.append("start_date must be a date")
    if not _is_date(data.maturity_date):
        errors.append("maturity_date must be a date")
    if _is_date(data.start_date) and _is_date(data.maturity_date) and data.maturity_date <= data.start_date:
        errors.append("maturity_date must be after start_date")

    if errors:
        raise ValidationError(errors)

    return LoanTerms(
        contract_type=contract_type,
        counterparty=counterparty,
        currency=currency,
        principal=principal,
        annual_rate_percent=rate,
        start_date=data.start_date,
        maturity_date=data.maturity_date,
        system=system,
        periodicity=periodicity,
        installment_count=data.installment_count,
        day_count=day_count,
        compounding=compounding,
        grace_periods=data.grace_periods,
        grace_type=grace_type,
        notes=(data.notes or "").strip(),
    )


def validate_payment(
    contract: LoanContract,
    amount: Decimal | int | str,
    payment_date: date,
    reject_overpayment: bool = False,
) -> Decimal:
    """Check a payment against its contract and return the amount as Decimal.

    Overpayment (amount above the current balance) is accepted unless
    ``reject_overpayment`` is set, in which case it is a validation error.
    """
    errors: list[str] = []

    value = _coerce_decimal(amount, "amount", errors)
    if value is not None and value <= 0:
        errors.append("amount must be greater than zero")
    if value is not None and value > 0 and reject_overpayment and value > contract.current_balance:
        errors.append(
            f"amount {value} exceeds current balance {contract.current_balance}"
        )

    if not _is_date(payment_date):
        errors.append("payment date must be a date")
    elif payment_date < contract.terms.start_date:
        errors.append("payment date cannot precede the contract start date")

    if errors:
        raise ValidationError(errors)
    return value
